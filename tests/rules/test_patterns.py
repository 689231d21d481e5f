#!/usr/bin/env python3
"""Tests for criteria values and file-name patterns."""

import pytest

from dots.core.errors import RuleConfigError
from dots.rules.patterns import (
    Literal,
    OneOf,
    PatternMatcher,
    PatternType,
    Regex,
    criterion_from_config,
    value_from_config,
)


class TestValues:
    """Tests for Literal, Regex and OneOf."""

    def test_regex_search_partial(self):
        """Regex.search matches anywhere."""
        assert Regex("dev").search("ags-dev-01")
        assert not Regex("^dev").search("ags-dev-01")

    def test_regex_search_none(self):
        """A missing value never matches."""
        assert not Regex(".*").search(None)

    def test_regex_invalid(self):
        """Malformed regexes are configuration errors."""
        with pytest.raises(RuleConfigError):
            Regex("(unclosed")

    def test_regex_equality_ignores_compiled(self):
        """Regex values compare by source and flags."""
        assert Regex("a+") == Regex("a+")
        assert Regex("a+") != Regex("a+", ignore_case=True)
        assert hash(Regex("a+")) == hash(Regex("a+"))

    def test_describe(self):
        """Values render for diagnostics."""
        assert Literal("nexus").describe() == "nexus"
        assert Regex("x", ignore_case=True).describe() == "/x/i"
        assert OneOf((Literal("foo"), Regex("^bar"))).describe() == "[foo, /^bar/]"


class TestValueFromConfig:
    """Tests for building values from configuration."""

    def test_string_is_literal(self):
        """Plain strings become literals."""
        assert value_from_config("nexus") == Literal("nexus")

    def test_mapping_is_regex(self):
        """Regex mappings become Regex values."""
        value = value_from_config({"regex": "ags-dev", "ignore_case": True})
        assert value == Regex("ags-dev", ignore_case=True)

    def test_list_is_one_of(self):
        """Lists become OneOf in order."""
        criterion = criterion_from_config(["foo", {"regex": "bar"}])
        assert criterion == OneOf((Literal("foo"), Regex("bar")))

    @pytest.mark.parametrize("raw", [42, None, {"pattern": "x"}, ["nested"]])
    def test_invalid(self, raw):
        """Other shapes are rejected."""
        with pytest.raises(RuleConfigError):
            value_from_config(raw)


class TestPatternMatcher:
    """Tests for PatternMatcher."""

    def test_empty_matches_nothing(self):
        """A matcher without patterns matches nothing."""
        matcher = PatternMatcher()
        assert not matcher
        assert not matcher.matches(".vimrc")

    @pytest.mark.parametrize(
        "pattern,name,expected",
        [
            (".zsh*", ".zshrc", True),
            (".zsh*", ".zsh", True),
            (".zsh*", ".bashrc", False),
            ("*", ".vimrc", True),
            ("*.vim*", ".vimrc", True),
            ("*rc", ".bashrc", True),
            (".?imrc", ".vimrc", True),
            (".gconf", ".gconf", True),
            (".gconf", ".gconfd", False),
            (".gconf", "x.gconf", False),
            ("*.swp", "dir/.file.swp", True),
            (".[bz]shrc", ".zshrc", True),
            (".[!b]shrc", ".zshrc", True),
            (".[!b]shrc", ".bshrc", False),
            (".[^b]shrc", ".zshrc", True),
            (".[^b]shrc", ".bshrc", False),
            ("a\\b", "a\\b", True),
            ("a\\*", "a*", False),
        ],
    )
    def test_glob(self, pattern, name, expected):
        """Globs match the whole name and wildcards match leading dots."""
        assert PatternMatcher.from_config(pattern).matches(name) is expected

    def test_glob_case_sensitive(self):
        """Glob matching is case-sensitive."""
        assert not PatternMatcher.from_config(".ZSH*").matches(".zshrc")

    def test_regex_partial(self):
        """Regex patterns match anywhere in the name."""
        matcher = PatternMatcher.from_config({"regex": r"\.zsh.*"})
        assert matcher.matches(".zshrc")
        assert matcher.matches("config/.zshenv")
        assert not matcher.matches(".bashrc")

    def test_regex_ignore_case(self):
        """Regex patterns can ignore case."""
        matcher = PatternMatcher()
        matcher.add_regex_pattern("readme", ignore_case=True)
        assert matcher.matches("README.md")

    def test_list_matches_any(self):
        """A list matches when any member matches."""
        matcher = PatternMatcher.from_config([".vimrc", {"regex": "^.gvim"}])
        assert len(matcher) == 2
        assert matcher.matches(".vimrc")
        assert matcher.matches(".gvimrc")
        assert not matcher.matches(".nvimrc")

    def test_pattern_types(self):
        """Entries record their pattern type."""
        matcher = PatternMatcher.from_config(["*.py", {"regex": "x"}])
        types = [entry.pattern_type for entry in matcher.get_patterns()]
        assert types == [PatternType.GLOB, PatternType.REGEX]

    def test_get_matching_patterns(self):
        """Matching patterns are reported as written."""
        matcher = PatternMatcher.from_config([".zsh*", "*rc", ".vim*"])
        assert matcher.get_matching_patterns(".zshrc") == [".zsh*", "*rc"]

    def test_describe(self):
        """Single patterns render bare, lists in brackets."""
        assert PatternMatcher.from_config(".zsh*").describe() == ".zsh*"
        assert PatternMatcher.from_config({"regex": r"\.zsh"}).describe() == r"/\.zsh/"
        assert PatternMatcher.from_config(["a", "b"]).describe() == "[a, b]"

    @pytest.mark.parametrize("raw", ["", 12, {"glob": "*"}, [None]])
    def test_invalid(self, raw):
        """Malformed patterns are configuration errors."""
        with pytest.raises(RuleConfigError):
            PatternMatcher.from_config(raw)

    def test_invalid_regex(self):
        """Uncompilable regexes are configuration errors."""
        with pytest.raises(RuleConfigError):
            PatternMatcher.from_config({"regex": "[a-"})
