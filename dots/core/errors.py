"""
Dots Core: Exception hierarchy.

Every error raised by dots derives from DotsError and carries an ErrorCode,
which the command line turns into its exit status.
"""
from dots.core.constants import ErrorCode


class DotsError(Exception):
    """Base exception for dots errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize DotsError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigError(DotsError):
    """Settings or rule file could not be read or parsed."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


class RuleConfigError(ConfigError):
    """A rule declaration, criterion or pattern is malformed."""


class InvalidOsClassError(DotsError, ValueError):
    """An OS criterion names something outside the known OS classes."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid OS class: {value!r}", ErrorCode.INVALID_INPUT)


class UnknownPlatformError(DotsError):
    """The running machine's operating system cannot be classified."""

    def __init__(self, platform_id: str):
        self.platform_id = platform_id
        super().__init__(f"Unknown OS: {platform_id!r}", ErrorCode.UNSUPPORTED_PLATFORM)


class FrozenActionListError(DotsError):
    """A directive was appended to an action list after it was frozen."""
