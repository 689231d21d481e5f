#!/usr/bin/env python3
r"""Criteria values and file-name patterns.

Criteria values (what host/user/env criteria compare against):
- Literal: exact text
- Regex: partial match, optionally case-insensitive
- OneOf: a list of either, expanded into a disjunction by the loader

File-name patterns (what include/exclude directives match):
- Glob patterns matched literally against the whole name; wildcards
  also match a leading dot, like a shell with dotglob set
- Regex patterns, partial match
- Several patterns at once with OR logic

Example:
    >>> matcher = PatternMatcher()
    >>> matcher.add_glob_pattern(".zsh*")
    >>> matcher.add_regex_pattern(r"\.bash_.*")
    >>> matcher.matches(".zshrc")
    True
    >>> PatternMatcher.from_config("*").matches(".vimrc")
    True
"""

import fnmatch
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Pattern, Tuple, Union

from dots.core.constants import ConfigKey
from dots.core.errors import RuleConfigError


class PatternType(Enum):
    """Pattern matching type."""

    GLOB = "glob"  # Shell-style patterns (*.txt, .vim*)
    REGEX = "regex"  # Regular expressions, partial match


@dataclass(frozen=True)
class Literal:
    """A criterion value compared for equality."""

    text: str

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True)
class Regex:
    """A criterion value matched as a partial regular expression."""

    source: str
    ignore_case: bool = False
    compiled: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            compiled = re.compile(self.source, flags)
        except re.error as e:
            raise RuleConfigError(f"Invalid regex pattern {self.source!r}: {e}")
        object.__setattr__(self, "compiled", compiled)

    def search(self, value: Optional[str]) -> bool:
        """True if the pattern occurs anywhere in value (None never matches)."""
        if value is None:
            return False
        return self.compiled.search(value) is not None

    def describe(self) -> str:
        return f"/{self.source}/{'i' if self.ignore_case else ''}"


Value = Union[Literal, Regex]


@dataclass(frozen=True)
class OneOf:
    """A list of criterion values, any of which may match."""

    values: Tuple[Value, ...]

    def describe(self) -> str:
        return "[" + ", ".join(v.describe() for v in self.values) + "]"


Criterion = Union[Literal, Regex, OneOf]


def value_from_config(raw: Any) -> Value:
    """Build a single criterion value from its configuration form.

    A string is a Literal; a ``{regex: ..., ignore_case: ...}`` mapping is a
    Regex.

    Raises:
        RuleConfigError: If raw has neither shape
    """
    if isinstance(raw, str):
        return Literal(raw)

    if isinstance(raw, dict) and ConfigKey.REGEX in raw:
        return Regex(raw[ConfigKey.REGEX], bool(raw.get(ConfigKey.IGNORE_CASE, False)))

    raise RuleConfigError(f"Expected a string or regex mapping, got {raw!r}")


def criterion_from_config(raw: Any) -> Criterion:
    """Build a criterion from a value or a list of values."""
    if isinstance(raw, list):
        return OneOf(tuple(value_from_config(item) for item in raw))
    return value_from_config(raw)


@dataclass(frozen=True)
class PatternEntry:
    """A single file pattern with its compiled form."""

    pattern: str
    pattern_type: PatternType
    compiled: Pattern[str] = field(repr=False, compare=False)
    ignore_case: bool = False

    def matches(self, file_name: str) -> bool:
        if self.pattern_type == PatternType.GLOB:
            return self.compiled.match(file_name) is not None
        return self.compiled.search(file_name) is not None

    def describe(self) -> str:
        if self.pattern_type == PatternType.GLOB:
            return self.pattern
        return f"/{self.pattern}/{'i' if self.ignore_case else ''}"


class PatternMatcher:
    """File-name matcher over glob and regex patterns (matches any)."""

    def __init__(self):
        self._patterns: List[PatternEntry] = []

    @classmethod
    def from_config(cls, raw: Any) -> "PatternMatcher":
        """Build a matcher from a glob string, regex mapping, or list of those.

        Args:
            raw: Pattern as written in a rule document

        Raises:
            RuleConfigError: If the pattern is malformed
        """
        matcher = cls()
        for item in raw if isinstance(raw, list) else [raw]:
            if isinstance(item, str):
                matcher.add_glob_pattern(item)
            elif isinstance(item, dict) and ConfigKey.REGEX in item:
                matcher.add_regex_pattern(
                    item[ConfigKey.REGEX], bool(item.get(ConfigKey.IGNORE_CASE, False))
                )
            else:
                raise RuleConfigError(f"Invalid pattern: {item!r}")
        return matcher

    def add_glob_pattern(self, pattern: str) -> None:
        """Add glob pattern.

        Matching is case-sensitive and against the name as given: ``*`` and
        ``?`` match any character, a leading dot and ``/`` included. Both
        ``[!a]`` and ``[^a]`` negate a set. A backslash is an ordinary
        character, not an escape; use ``[*]`` for a literal ``*``.

        Args:
            pattern: Glob pattern (e.g., ".zsh*", "*.swp")
        """
        if not pattern:
            raise RuleConfigError("Pattern cannot be empty")

        compiled = re.compile(fnmatch.translate(pattern.replace("[^", "[!")))
        self._patterns.append(PatternEntry(pattern, PatternType.GLOB, compiled))

    def add_regex_pattern(self, pattern: str, ignore_case: bool = False) -> None:
        """Add regex pattern, matched anywhere in the name.

        Args:
            pattern: Regular expression pattern
            ignore_case: Match case-insensitively
        """
        flags = re.IGNORECASE if ignore_case else 0
        try:
            compiled = re.compile(pattern, flags)
        except re.error as e:
            raise RuleConfigError(f"Invalid regex pattern {pattern!r}: {e}")

        self._patterns.append(PatternEntry(pattern, PatternType.REGEX, compiled, ignore_case))

    def matches(self, file_name: str) -> bool:
        """Check if file_name matches any pattern.

        Args:
            file_name: Base name or repository-relative path

        Returns:
            True if any pattern matches
        """
        return any(entry.matches(file_name) for entry in self._patterns)

    def get_matching_patterns(self, file_name: str) -> List[str]:
        """Patterns (as written) that match file_name."""
        return [entry.pattern for entry in self._patterns if entry.matches(file_name)]

    def get_patterns(self) -> List[PatternEntry]:
        """Get all registered patterns."""
        return self._patterns.copy()

    def describe(self) -> str:
        if len(self._patterns) == 1:
            return self._patterns[0].describe()
        return "[" + ", ".join(entry.describe() for entry in self._patterns) + "]"

    def __len__(self) -> int:
        return len(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)
