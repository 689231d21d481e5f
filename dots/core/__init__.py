"""Dots Core - Shared utilities.

Import specific functions from submodules:
    from dots.core.config import ConfigManager
    from dots.core import constants
    from dots.core import errors
    from dots.core import logging
    from dots.core import path_utils
    from dots.core import validators
"""

from dots.core import config, constants, errors, logging, path_utils, validators

__all__ = [
    "config",
    "constants",
    "errors",
    "logging",
    "path_utils",
    "validators",
]
