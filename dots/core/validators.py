"""
Dots Core: Rule document validators.

Structural validation for rule documents read from YAML: rule declarations,
criteria values, action directives and patterns. Validation happens before
any rule is built so a malformed document never yields a partial rule set.
"""
import re
from typing import Any, Dict, List, Pattern

from dots.core.constants import RULES_FORMAT_VERSION, ConfigKey, ErrorCode


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_rules_document(document: Any) -> List[Dict[str, Any]]:
    """Validate a parsed rule document and return its rule declarations.

    The document is either a mapping with a ``rules`` list (and an optional
    ``version``) or a bare list of rule declarations. An empty document
    holds no rules.

    Args:
        document: Object produced by the YAML parser

    Returns:
        List of rule declaration dictionaries, in document order

    Raises:
        ValidationError: If the document structure is invalid
    """
    if document is None:
        return []

    if isinstance(document, dict):
        unknown = set(document) - {ConfigKey.VERSION, ConfigKey.RULES}
        if unknown:
            raise ValidationError(f"Unknown top-level keys: {sorted(unknown, key=str)}")

        if ConfigKey.VERSION in document:
            validate_version(document[ConfigKey.VERSION])

        rules = document.get(ConfigKey.RULES)
        if rules is None:
            return []
    else:
        rules = document

    if not isinstance(rules, list):
        raise ValidationError("Rules must be a list")

    for i, rule in enumerate(rules):
        try:
            validate_rule_config(rule)
        except ValidationError as e:
            raise ValidationError(f"Invalid rule at index {i}: {e}")

    return rules


def validate_version(version: Any) -> bool:
    """Validate the rule document format version.

    Raises:
        ValidationError: If the version is not supported
    """
    if isinstance(version, bool) or version != RULES_FORMAT_VERSION:
        raise ValidationError(
            f"Unsupported rules version: {version!r} (expected {RULES_FORMAT_VERSION})"
        )
    return True


def validate_rule_config(rule: Any) -> bool:
    """Validate one rule declaration.

    Args:
        rule: Rule declaration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If rule is invalid
    """
    if not isinstance(rule, dict):
        raise ValidationError("Rule must be a dictionary")

    unknown = set(rule) - ConfigKey.RULE_KEYS
    if unknown:
        raise ValidationError(f"Unknown rule keys: {sorted(unknown, key=str)}")

    if ConfigKey.NAME in rule and not isinstance(rule[ConfigKey.NAME], str):
        raise ValidationError("Rule name must be a string")

    for key in (ConfigKey.HOST, ConfigKey.USER):
        if rule.get(key) is not None:
            validate_criterion(rule[key], key)

    if rule.get(ConfigKey.OS) is not None:
        validate_os_criterion(rule[ConfigKey.OS])

    if rule.get(ConfigKey.ENV) is not None:
        validate_env_criterion(rule[ConfigKey.ENV])

    # A missing actions key is legal: the rule is skipped by the loader
    if ConfigKey.ACTIONS in rule:
        actions = rule[ConfigKey.ACTIONS]
        if actions is None:
            return True
        if not isinstance(actions, list):
            raise ValidationError("Actions must be a list")
        for i, action in enumerate(actions):
            try:
                validate_action_config(action)
            except ValidationError as e:
                raise ValidationError(f"Invalid action at index {i}: {e}")

    return True


def validate_criterion(value: Any, field: str) -> bool:
    """Validate a host or user criterion: a value or a non-empty list of values.

    Raises:
        ValidationError: If the criterion shape is invalid
    """
    if isinstance(value, list):
        if not value:
            raise ValidationError(f"'{field}' list cannot be empty")
        for item in value:
            if isinstance(item, list):
                raise ValidationError(f"'{field}' lists cannot be nested")
            validate_value(item, field)
        return True

    return validate_value(value, field)


def validate_os_criterion(value: Any) -> bool:
    """Validate the shape of an os criterion (membership is checked by OsEq)."""
    values = value if isinstance(value, list) else [value]
    if not values:
        raise ValidationError("'os' list cannot be empty")
    for item in values:
        if not isinstance(item, str):
            raise ValidationError(f"'os' values must be strings, got {type(item).__name__}")
    return True


def validate_env_criterion(value: Any) -> bool:
    """Validate an env criterion: a mapping of variable name to value.

    Raises:
        ValidationError: If the criterion shape is invalid
    """
    if not isinstance(value, dict):
        raise ValidationError("'env' must be a mapping of variable name to value")

    for name, expected in value.items():
        if not isinstance(name, str) or not name:
            raise ValidationError(f"Invalid environment variable name: {name!r}")
        validate_value(expected, f"env.{name}")

    return True


def validate_value(value: Any, field: str) -> bool:
    """Validate a single literal string or regex mapping.

    Raises:
        ValidationError: If the value is neither
    """
    if isinstance(value, str):
        return True

    if isinstance(value, dict):
        return validate_regex_config(value)

    raise ValidationError(
        f"'{field}' value must be a string or a regex mapping, got {type(value).__name__}"
        " (quote numbers and booleans)"
    )


def validate_regex_config(value: Dict[str, Any]) -> bool:
    """Validate a ``{regex: ..., ignore_case: ...}`` mapping."""
    unknown = set(value) - ConfigKey.REGEX_KEYS
    if unknown:
        raise ValidationError(f"Unknown regex keys: {sorted(unknown, key=str)}")

    if ConfigKey.REGEX not in value:
        raise ValidationError("Regex mapping must have 'regex' field")

    ignore_case = value.get(ConfigKey.IGNORE_CASE, False)
    if not isinstance(ignore_case, bool):
        raise ValidationError("'ignore_case' must be a boolean")

    validate_regex(value[ConfigKey.REGEX], ignore_case)
    return True


def validate_action_config(action: Any) -> bool:
    """Validate one include/exclude directive.

    Accepted forms: ``{include: <pattern>}``, ``{exclude: <pattern>}`` or
    ``{pattern: <pattern>, include: <bool>}``.

    Raises:
        ValidationError: If the directive is invalid
    """
    if not isinstance(action, dict):
        raise ValidationError("Action must be a dictionary")

    if ConfigKey.PATTERN in action:
        if set(action) != {ConfigKey.PATTERN, ConfigKey.INCLUDE}:
            raise ValidationError("Action with 'pattern' must have exactly 'pattern' and 'include'")
        if not isinstance(action[ConfigKey.INCLUDE], bool):
            raise ValidationError("Action 'include' flag must be a boolean")
        return validate_pattern(action[ConfigKey.PATTERN])

    if len(action) != 1 or next(iter(action)) not in (ConfigKey.INCLUDE, ConfigKey.EXCLUDE):
        raise ValidationError("Action must have exactly one of 'include' or 'exclude'")

    return validate_pattern(next(iter(action.values())))


def validate_pattern(pattern: Any) -> bool:
    """Validate a file pattern: glob string, regex mapping, or list of those.

    Args:
        pattern: Pattern to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If pattern is invalid
    """
    if isinstance(pattern, list):
        if not pattern:
            raise ValidationError("Pattern list cannot be empty")
        for item in pattern:
            if isinstance(item, list):
                raise ValidationError("Pattern lists cannot be nested")
            validate_pattern(item)
        return True

    if isinstance(pattern, dict):
        return validate_regex_config(pattern)

    if not isinstance(pattern, str):
        raise ValidationError(f"Pattern must be string, got {type(pattern).__name__}")

    return validate_glob(pattern)


def validate_glob(pattern: str) -> bool:
    """Validate a glob pattern.

    Raises:
        ValidationError: If pattern is invalid
    """
    if not pattern:
        raise ValidationError("Pattern cannot be empty")

    if "\0" in pattern:
        raise ValidationError("Invalid pattern: contains null bytes")

    if any(ord(c) < 32 for c in pattern):
        raise ValidationError("Invalid pattern: contains control characters")

    return True


def validate_regex(pattern: Any, ignore_case: bool = False) -> Pattern[str]:
    """Validate and compile a regular expression.

    Returns:
        Compiled pattern

    Raises:
        ValidationError: If pattern is not a valid regex
    """
    if not isinstance(pattern, str) or not pattern:
        raise ValidationError("Regex must be a non-empty string")

    try:
        return re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as e:
        raise ValidationError(f"Invalid regex pattern {pattern!r}: {e}")
