#!/usr/bin/env python3
"""Rule set evaluation.

A RuleSet pairs predicates over the machine Context with action lists and
answers, per file name, whether the file is included on this machine:
- Rules whose predicate does not match the context are ignored
- Each matching rule's action list gives a verdict (last match wins)
- Verdicts combine with AND: once a matching rule excludes a file, no
  later rule can include it again
- With no matching rule every file is included

Example:
    >>> rule_set = RuleLoader(context).load_file("~/.dots/rules.yaml")
    >>> rule_set.included(".zshrc")
    False
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from dots.rules.actions import ActionEntry, ActionList
from dots.rules.context import Context
from dots.rules.predicates import Predicate


@dataclass(frozen=True)
class Rule:
    """A predicate and the directives that apply when it matches."""

    predicate: Predicate
    actions: ActionList
    name: Optional[str] = None
    index: int = 0

    @property
    def label(self) -> str:
        return self.name or f"rule #{self.index}"

    def applies_to(self, ctx: Context) -> bool:
        return self.predicate.test(ctx)


@dataclass(frozen=True)
class RuleDecision:
    """Verdict of one matching rule for one file name."""

    rule: Rule
    included: bool
    entry: Optional[ActionEntry] = None


class RuleSet:
    """Ordered, immutable collection of rules bound to one context."""

    def __init__(self, context: Context, rules: Iterable[Rule] = ()):
        """Initialize rule set.

        Args:
            context: Machine identity the predicates are tested against
            rules: Rules in declaration order
        """
        self._context = context
        self._rules: Tuple[Rule, ...] = tuple(rules)

    @property
    def context(self) -> Context:
        return self._context

    def included(self, file_name: str) -> bool:
        """Decide whether file_name is included on this machine.

        Args:
            file_name: Base name or repository-relative path

        Returns:
            True unless a matching rule excludes the file
        """
        included = True
        for rule in self._rules:
            if rule.applies_to(self._context):
                included = rule.actions.includes(file_name) and included
        return included

    def matching_rules(self) -> List[Rule]:
        """Rules whose predicate matches the context, in order."""
        return [rule for rule in self._rules if rule.applies_to(self._context)]

    def explain(self, file_name: str) -> List[RuleDecision]:
        """Per-rule verdicts for file_name from every matching rule."""
        return [
            RuleDecision(rule, rule.actions.includes(file_name), rule.actions.last_match(file_name))
            for rule in self.matching_rules()
        ]

    def filter(self, file_names: Iterable[str]) -> List[str]:
        """The included names, in input order."""
        return [name for name in file_names if self.included(name)]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
