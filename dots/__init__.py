"""dots - per-machine dotfile rules.

Decides which managed files are included on the current machine from
declarative rules keyed on host name, OS class, user and environment.
"""

from dots.core.constants import DOTS_VERSION as __version__

__all__ = ["__version__"]
