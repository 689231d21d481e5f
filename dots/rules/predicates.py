#!/usr/bin/env python3
"""Predicates over a machine Context.

A predicate is an immutable boolean expression tree built from a closed set
of node types:
- TRUE / FALSE constants
- HostEq, UserEq: host or user name equals a literal (case-insensitive)
  or matches a regex
- OsEq: OS class equality
- EnvEq: environment variable equals a literal or matches a regex
- And, Or: binary combinators

simplify() removes redundant constants without changing the result of
test() for any context.

Example:
    >>> p = And(TRUE, Or(HostEq(Literal("nexus")), OsEq("osx")))
    >>> simplify(p).describe()
    '(host == nexus) || (OS is OS X)'
"""

from dataclasses import dataclass
from typing import Union

from dots.core.constants import OS_DISPLAY_NAMES, OsClass
from dots.core.errors import InvalidOsClassError
from dots.rules.context import Context
from dots.rules.patterns import Literal, Regex, Value


def _identity_matches(value: Value, actual: str) -> bool:
    # Host and user literals compare case-insensitively
    if isinstance(value, Literal):
        return actual.lower() == value.text.lower()
    return value.search(actual)


def _describe_identity(field: str, value: Value) -> str:
    if isinstance(value, Literal):
        return f"{field} == {value.text.lower()}"
    return f"{field} =~ {value.describe()}"


@dataclass(frozen=True)
class TruePredicate:
    """Always matches."""

    def test(self, ctx: Context) -> bool:
        return True

    def describe(self) -> str:
        return "true"

    __str__ = describe


@dataclass(frozen=True)
class FalsePredicate:
    """Never matches."""

    def test(self, ctx: Context) -> bool:
        return False

    def describe(self) -> str:
        return "false"

    __str__ = describe


TRUE = TruePredicate()
FALSE = FalsePredicate()


@dataclass(frozen=True)
class HostEq:
    """Host name equals a literal or matches a regex."""

    value: Value

    def test(self, ctx: Context) -> bool:
        return _identity_matches(self.value, ctx.host)

    def describe(self) -> str:
        return _describe_identity("host", self.value)

    __str__ = describe


@dataclass(frozen=True)
class UserEq:
    """User name equals a literal or matches a regex."""

    value: Value

    def test(self, ctx: Context) -> bool:
        return _identity_matches(self.value, ctx.user)

    def describe(self) -> str:
        return _describe_identity("user", self.value)

    __str__ = describe


@dataclass(frozen=True)
class OsEq:
    """OS class equality. Accepts an OsClass or its string value."""

    os_class: OsClass

    def __post_init__(self):
        if isinstance(self.os_class, OsClass):
            return
        try:
            os_class = OsClass(self.os_class)
        except ValueError:
            raise InvalidOsClassError(self.os_class) from None
        object.__setattr__(self, "os_class", os_class)

    def test(self, ctx: Context) -> bool:
        return ctx.os == self.os_class

    def describe(self) -> str:
        return f"OS is {OS_DISPLAY_NAMES[self.os_class]}"

    __str__ = describe


@dataclass(frozen=True)
class EnvEq:
    """Environment variable equals a literal or matches a regex.

    A variable missing from the context never matches.
    """

    key: str
    value: Value

    def test(self, ctx: Context) -> bool:
        actual = ctx.env.get(self.key)
        if actual is None:
            return False
        if isinstance(self.value, Literal):
            return actual == self.value.text
        return self.value.search(actual)

    def describe(self) -> str:
        if isinstance(self.value, Literal):
            return f"${self.key} == {self.value.text}"
        return f"${self.key} =~ {self.value.describe()}"

    __str__ = describe


@dataclass(frozen=True)
class And:
    """Both operands match. Both sides are always evaluated."""

    left: "Predicate"
    right: "Predicate"

    def test(self, ctx: Context) -> bool:
        left = self.left.test(ctx)
        right = self.right.test(ctx)
        return left and right

    def describe(self) -> str:
        return f"({self.left.describe()}) && ({self.right.describe()})"

    __str__ = describe


@dataclass(frozen=True)
class Or:
    """Either operand matches. Both sides are always evaluated."""

    left: "Predicate"
    right: "Predicate"

    def test(self, ctx: Context) -> bool:
        left = self.left.test(ctx)
        right = self.right.test(ctx)
        return left or right

    def describe(self) -> str:
        return f"({self.left.describe()}) || ({self.right.describe()})"

    __str__ = describe


Predicate = Union[TruePredicate, FalsePredicate, HostEq, UserEq, OsEq, EnvEq, And, Or]

_LEAVES = (TruePredicate, FalsePredicate, HostEq, UserEq, OsEq, EnvEq)


def simplify(predicate: Predicate) -> Predicate:
    """Remove redundant TRUE/FALSE constants, bottom-up.

    Rewrites:
        And(FALSE, x) -> FALSE      Or(TRUE, x) -> TRUE
        And(TRUE, TRUE) -> TRUE     Or(FALSE, FALSE) -> FALSE
        And(TRUE, x) -> x           Or(FALSE, x) -> x
    and the mirrored forms. Leaves are returned unchanged.

    Args:
        predicate: Predicate tree

    Returns:
        Equivalent predicate tree

    Raises:
        TypeError: If the tree contains an unknown node type
    """
    if isinstance(predicate, And):
        left = simplify(predicate.left)
        right = simplify(predicate.right)
        if left == FALSE or right == FALSE:
            return FALSE
        if left == TRUE:
            return right
        if right == TRUE:
            return left
        return And(left, right)

    if isinstance(predicate, Or):
        left = simplify(predicate.left)
        right = simplify(predicate.right)
        if left == TRUE or right == TRUE:
            return TRUE
        if left == FALSE:
            return right
        if right == FALSE:
            return left
        return Or(left, right)

    if isinstance(predicate, _LEAVES):
        return predicate

    raise TypeError(f"Not a predicate: {predicate!r}")
