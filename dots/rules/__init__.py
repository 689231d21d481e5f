"""Dots Rules System.

This module provides the rule evaluation engine:
- Context: snapshot of the machine identity
- Predicates: boolean expressions over the context, with simplify()
- PatternMatcher: glob and regex file-name matching
- ActionList: ordered include/exclude directives, last match wins
- RuleSet: AND-aggregation of every rule that applies to the context
- RuleLoader: builds a RuleSet from a YAML rule document
"""

from .actions import ActionEntry, ActionList
from .context import Context, detect_os
from .engine import Rule, RuleDecision, RuleSet
from .loader import RuleLoader, combine, load_rules
from .patterns import Literal, OneOf, PatternEntry, PatternMatcher, PatternType, Regex
from .predicates import (
    FALSE,
    TRUE,
    And,
    EnvEq,
    FalsePredicate,
    HostEq,
    Or,
    OsEq,
    Predicate,
    TruePredicate,
    UserEq,
    simplify,
)

__all__ = [
    # Context
    "Context",
    "detect_os",
    # Values and patterns
    "Literal",
    "Regex",
    "OneOf",
    "PatternType",
    "PatternEntry",
    "PatternMatcher",
    # Predicates
    "Predicate",
    "TruePredicate",
    "FalsePredicate",
    "TRUE",
    "FALSE",
    "HostEq",
    "UserEq",
    "OsEq",
    "EnvEq",
    "And",
    "Or",
    "simplify",
    # Actions and rules
    "ActionEntry",
    "ActionList",
    "Rule",
    "RuleDecision",
    "RuleSet",
    # Loading
    "RuleLoader",
    "combine",
    "load_rules",
]
