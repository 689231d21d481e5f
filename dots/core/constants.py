"""
Dots Core: Constants and Type Definitions

This module provides system-wide constants, error codes, OS classes and
configuration keys shared by the rule engine and the command line.
"""
from enum import Enum, IntEnum
from typing import Dict, Tuple

# Version information
DOTS_VERSION = "0.3.0"
RULES_FORMAT_VERSION = 1


class ErrorCode(IntEnum):
    """Standardized error codes, also used as CLI exit statuses."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad rule file, invalid configuration
    NOT_FOUND = 2  # File or resource doesn't exist
    UNSUPPORTED_PLATFORM = 3  # Running OS cannot be classified
    INTERNAL_ERROR = 6  # Bug in dots


class OsClass(Enum):
    """Operating-system classes a rule can be keyed on."""

    WINDOWS = "windows"
    OSX = "osx"
    LINUX = "linux"
    UNIX = "unix"


OS_DISPLAY_NAMES: Dict[OsClass, str] = {
    OsClass.OSX: "OS X",
    OsClass.WINDOWS: "Windows",
    OsClass.LINUX: "Linux",
    OsClass.UNIX: "Unix",
}

# Checked in order against the lower-cased platform identifier
PLATFORM_PATTERNS: Tuple[Tuple[str, OsClass], ...] = (
    (r"mswin|msys|mingw|cygwin|bccwin|wince|emc|win32|windows", OsClass.WINDOWS),
    (r"darwin|mac os", OsClass.OSX),
    (r"linux", OsClass.LINUX),
    (r"solaris|sunos|bsd", OsClass.UNIX),
)

class ConfigKey:
    """Keys used in rule documents."""

    VERSION = "version"
    RULES = "rules"

    # Rule declaration
    NAME = "name"
    HOST = "host"
    OS = "os"
    ENV = "env"
    USER = "user"
    ACTIONS = "actions"

    # Action directive
    INCLUDE = "include"
    EXCLUDE = "exclude"
    PATTERN = "pattern"

    # Regex value
    REGEX = "regex"
    IGNORE_CASE = "ignore_case"

    RULE_KEYS = frozenset({NAME, HOST, OS, ENV, USER, ACTIONS})
    REGEX_KEYS = frozenset({REGEX, IGNORE_CASE})


class Defaults:
    """Default locations and settings."""

    DOTS_DIR = "~/.dots"
    RULES_FILE_NAME = "rules.yaml"
    SETTINGS_FILE = "~/.config/dots/config.yaml"
    ENV_PREFIX = "DOTS_"
    LOG_LEVEL = "WARNING"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_MAX_BYTES = 1024 * 1024  # 1MB
    LOG_BACKUP_COUNT = 3
