#!/usr/bin/env python3
"""Tests for Rule and RuleSet."""

import pytest

from dots.rules.actions import ActionList
from dots.rules.engine import Rule, RuleDecision, RuleSet
from dots.rules.patterns import Literal
from dots.rules.predicates import FALSE, TRUE, HostEq


def actions(*directives) -> ActionList:
    result = ActionList()
    for verb, pattern in directives:
        getattr(result, verb)(pattern)
    result.freeze()
    return result


class TestRule:
    """Tests for Rule."""

    def test_label_uses_name(self):
        """Named rules are labelled by name."""
        assert Rule(TRUE, actions(), name="vim", index=3).label == "vim"

    def test_label_falls_back_to_index(self):
        """Unnamed rules are labelled by position."""
        assert Rule(TRUE, actions(), index=3).label == "rule #3"

    def test_applies_to(self, linux_context):
        """A rule applies when its predicate matches."""
        assert Rule(HostEq(Literal("nexus")), actions()).applies_to(linux_context)
        assert not Rule(HostEq(Literal("zero")), actions()).applies_to(linux_context)


class TestRuleSet:
    """Tests for RuleSet aggregation."""

    def test_empty_includes_everything(self, linux_context):
        """With no rules every file is included."""
        rule_set = RuleSet(linux_context)
        assert len(rule_set) == 0
        assert rule_set.included(".zshrc")

    def test_non_matching_rules_ignored(self, linux_context):
        """Rules for other machines do not affect the verdict."""
        rule_set = RuleSet(
            linux_context,
            [
                Rule(FALSE, actions(("exclude", "*"))),
                Rule(HostEq(Literal("zero")), actions(("exclude", ".vim*"))),
            ],
        )
        assert rule_set.included(".vimrc")
        assert rule_set.included("anything")

    def test_matching_rule_excludes(self, linux_context):
        """A matching rule's exclusion applies."""
        rule_set = RuleSet(linux_context, [Rule(TRUE, actions(("exclude", ".zsh*")))])
        assert not rule_set.included(".zshrc")
        assert rule_set.included(".bashrc")

    @pytest.mark.parametrize("exclude_first", [True, False])
    def test_and_across_rules(self, linux_context, exclude_first):
        """Once a matching rule excludes a file no later rule re-includes it."""
        excluding = Rule(TRUE, actions(("exclude", "x")), name="a")
        including = Rule(TRUE, actions(("include", "x")), name="b")
        rules = [excluding, including] if exclude_first else [including, excluding]
        assert RuleSet(linux_context, rules).included("x") is False

    def test_matching_rules(self, linux_context):
        """matching_rules lists applicable rules in order."""
        first = Rule(TRUE, actions(), index=0)
        skipped = Rule(FALSE, actions(), index=1)
        last = Rule(HostEq(Literal("NEXUS")), actions(), index=2)
        rule_set = RuleSet(linux_context, [first, skipped, last])
        assert rule_set.matching_rules() == [first, last]

    def test_explain(self, linux_context):
        """explain reports each applicable rule's verdict and deciding entry."""
        rule_set = RuleSet(
            linux_context,
            [
                Rule(TRUE, actions(("exclude", "*.vim*"), ("include", "*.vimrc")), name="vim"),
                Rule(TRUE, actions(("exclude", ".zsh*")), name="zsh"),
                Rule(FALSE, actions(("exclude", "*")), name="elsewhere"),
            ],
        )
        decisions = rule_set.explain(".vimrc")
        assert [d.rule.name for d in decisions] == ["vim", "zsh"]
        assert all(isinstance(d, RuleDecision) for d in decisions)
        assert decisions[0].included is True
        assert decisions[0].entry.describe() == "include *.vimrc"
        assert decisions[1].included is True
        assert decisions[1].entry is None

    def test_filter(self, linux_context):
        """filter keeps included names in input order."""
        rule_set = RuleSet(linux_context, [Rule(TRUE, actions(("exclude", ".zsh*")))])
        names = [".zshrc", ".vimrc", ".zshenv", ".bashrc"]
        assert rule_set.filter(names) == [".vimrc", ".bashrc"]

    def test_iteration_and_context(self, linux_context):
        """The rule set exposes its rules and context."""
        rules = [Rule(TRUE, actions(), index=i) for i in range(3)]
        rule_set = RuleSet(linux_context, rules)
        assert list(rule_set) == rules
        assert rule_set.context is linux_context

    def test_rules_snapshot(self, linux_context):
        """Changing the input list afterwards does not change the rule set."""
        rules = [Rule(TRUE, actions(("exclude", "x")))]
        rule_set = RuleSet(linux_context, rules)
        rules.clear()
        assert len(rule_set) == 1
        assert not rule_set.included("x")
