#!/usr/bin/env python3
"""Ordered include/exclude directives for one rule.

An ActionList decides whether a file name is included using
last-match-wins: every directive whose pattern matches overwrites the
verdict, so a later include can re-include what an earlier, broader
exclude removed. A name no directive matches is included.

Example:
    >>> actions = ActionList()
    >>> actions.exclude("*.vim*")
    >>> actions.include("*.vimrc")
    >>> actions.freeze()
    >>> actions.includes(".vimrc"), actions.includes(".vimswap")
    (True, False)
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Union

from dots.core.errors import FrozenActionListError
from dots.rules.patterns import PatternMatcher

PatternSpec = Union[PatternMatcher, Any]


@dataclass(frozen=True)
class ActionEntry:
    """A pattern and the verdict it yields when it matches."""

    matcher: PatternMatcher
    included: bool

    def describe(self) -> str:
        verb = "include" if self.included else "exclude"
        return f"{verb} {self.matcher.describe()}"


class ActionList:
    """Append-only list of directives, frozen once the rule is built."""

    def __init__(self):
        self._entries: List[ActionEntry] = []
        self._frozen = False

    def include(self, pattern: PatternSpec) -> None:
        """Append an include directive.

        Args:
            pattern: PatternMatcher, glob string, regex mapping, or list of those
        """
        self._append(pattern, True)

    def exclude(self, pattern: PatternSpec) -> None:
        """Append an exclude directive.

        Args:
            pattern: PatternMatcher, glob string, regex mapping, or list of those
        """
        self._append(pattern, False)

    def _append(self, pattern: PatternSpec, included: bool) -> None:
        if self._frozen:
            raise FrozenActionListError("Cannot modify a frozen action list")

        if not isinstance(pattern, PatternMatcher):
            pattern = PatternMatcher.from_config(pattern)

        self._entries.append(ActionEntry(pattern, included))

    def freeze(self) -> None:
        """Disallow further directives."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def last_match(self, file_name: str) -> Optional[ActionEntry]:
        """The directive that decides file_name, or None if none matches."""
        decisive = None
        for entry in self._entries:
            if entry.matcher.matches(file_name):
                decisive = entry
        return decisive

    def includes(self, file_name: str) -> bool:
        """Evaluate file_name against the directives, last match wins.

        Args:
            file_name: Base name or repository-relative path

        Returns:
            Verdict of the last matching directive, True if none matches
        """
        included = True
        for entry in self._entries:
            if entry.matcher.matches(file_name):
                included = entry.included
        return included

    def __iter__(self) -> Iterator[ActionEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
