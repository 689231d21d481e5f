#!/usr/bin/env python3
"""Build a RuleSet from a YAML rule document.

Each rule declaration has up to four criteria and a list of directives:

    rules:
      - host: [foo, bar]            # literal, {regex: ...}, or a list
        os: windows                 # windows | osx | linux | unix, or a list
        env: {TERM: xterm}          # variable -> literal or {regex: ...}
        user: vagrant
        actions:
          - exclude: ".zsh*"
          - include: {regex: '\\.zshenv$'}
          - pattern: [".vimrc", ".gvimrc"]
            include: true

Criteria lists become disjunctions, env entries a conjunction, and the
four criteria are AND-ed and simplified. A declaration without an
``actions`` key is skipped; ``actions: []`` always includes.
"""

from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Type, Union

import yaml

from dots.core.constants import ConfigKey, ErrorCode
from dots.core.errors import ConfigError, DotsError, RuleConfigError
from dots.core.logging import Logger, get_logger
from dots.core.path_utils import expand_path, shorten_path
from dots.core.validators import ValidationError, validate_rules_document
from dots.rules.actions import ActionList
from dots.rules.context import Context
from dots.rules.engine import Rule, RuleSet
from dots.rules.patterns import OneOf, criterion_from_config, value_from_config
from dots.rules.predicates import FALSE, TRUE, And, EnvEq, HostEq, Or, OsEq, Predicate, UserEq, simplify


def combine(predicates: Iterable[Predicate], combinator: Type[Union[And, Or]]) -> Predicate:
    """Fold predicates left to right, seeded with the combinator's identity."""
    seed = TRUE if combinator is And else FALSE
    return reduce(combinator, predicates, seed)


class RuleLoader:
    """Parses rule documents into RuleSets bound to one Context."""

    def __init__(self, context: Optional[Context] = None, logger: Optional[Logger] = None):
        """Initialize loader.

        Args:
            context: Machine identity (captured from the running machine if None)
            logger: Logger for diagnostics
        """
        self.context = context if context is not None else Context.capture()
        self.logger = logger or get_logger()

    def load_file(self, path: Union[str, Path]) -> RuleSet:
        """Read and build rules from a YAML file.

        Raises:
            ConfigError: If the file is missing or not valid YAML
            RuleConfigError: If a rule declaration is malformed
        """
        rules_path = expand_path(path)
        short = shorten_path(rules_path)

        if not rules_path.is_file():
            raise ConfigError(f"Rules file not found: {short}", ErrorCode.NOT_FOUND)

        try:
            text = rules_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Error reading rules file {short}: {e}")

        with self.logger.add_context(rules_file=short):
            return self.load_string(text, source=short)

    def load_string(self, text: str, source: str = "<string>") -> RuleSet:
        """Parse YAML text and build rules.

        Raises:
            ConfigError: If text is not valid YAML
            RuleConfigError: If a rule declaration is malformed
        """
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {source}: {e}")

        return self.load_document(document)

    def load_document(self, document: Any) -> RuleSet:
        """Validate a parsed document and build its rules.

        Args:
            document: Mapping with a ``rules`` list, a bare list, or None

        Returns:
            RuleSet bound to this loader's context

        Raises:
            RuleConfigError: If the document or a rule declaration is malformed
        """
        try:
            declarations = validate_rules_document(document)
        except ValidationError as e:
            raise RuleConfigError(str(e), e.error_code)

        rules = []
        for index, declaration in enumerate(declarations):
            try:
                rule = self.build_rule(declaration, index)
            except DotsError as e:
                raise RuleConfigError(f"Invalid rule at index {index}: {e.message}", e.error_code)

            if rule is not None:
                rules.append(rule)

        self.logger.debug("Rule set loaded", rules=len(rules), declared=len(declarations))
        return RuleSet(self.context, rules)

    def build_rule(self, declaration: Dict[str, Any], index: int = 0) -> Optional[Rule]:
        """Build one rule from a validated declaration.

        Returns:
            The rule, or None for a declaration without an actions key
        """
        name = declaration.get(ConfigKey.NAME)

        if ConfigKey.ACTIONS not in declaration:
            self.logger.debug("Skipping rule without actions", index=index, name=name)
            return None

        predicate = self.build_predicate(
            host=declaration.get(ConfigKey.HOST),
            os=declaration.get(ConfigKey.OS),
            env=declaration.get(ConfigKey.ENV),
            user=declaration.get(ConfigKey.USER),
        )

        actions = ActionList()
        for directive in declaration[ConfigKey.ACTIONS] or []:
            self._append_directive(actions, directive)
        actions.freeze()

        self.logger.debug(
            "Loaded rule",
            index=index,
            predicate=predicate.describe(),
            directives=len(actions),
        )
        return Rule(predicate, actions, name=name, index=index)

    def build_predicate(self, host: Any = None, os: Any = None, env: Any = None, user: Any = None) -> Predicate:
        """Combine the four criteria into one simplified predicate."""
        predicates = [
            self._identity_predicate(host, HostEq),
            self._os_predicate(os),
            self._env_predicate(env),
            self._identity_predicate(user, UserEq),
        ]
        return simplify(combine(predicates, And))

    def _identity_predicate(self, criteria: Any, predicate_class: Callable[..., Predicate]) -> Predicate:
        if criteria is None:
            return TRUE

        criterion = criterion_from_config(criteria)
        if isinstance(criterion, OneOf):
            return combine((predicate_class(value) for value in criterion.values), Or)
        return predicate_class(criterion)

    def _os_predicate(self, criteria: Any) -> Predicate:
        if criteria is None:
            return TRUE
        if isinstance(criteria, list):
            return combine((OsEq(value) for value in criteria), Or)
        return OsEq(criteria)

    def _env_predicate(self, criteria: Any) -> Predicate:
        if criteria is None:
            return TRUE
        return combine(
            (EnvEq(key, value_from_config(value)) for key, value in criteria.items()),
            And,
        )

    def _append_directive(self, actions: ActionList, directive: Dict[str, Any]) -> None:
        if ConfigKey.PATTERN in directive:
            if directive[ConfigKey.INCLUDE]:
                actions.include(directive[ConfigKey.PATTERN])
            else:
                actions.exclude(directive[ConfigKey.PATTERN])
        elif ConfigKey.INCLUDE in directive:
            actions.include(directive[ConfigKey.INCLUDE])
        else:
            actions.exclude(directive[ConfigKey.EXCLUDE])


def load_rules(path: Union[str, Path], context: Optional[Context] = None) -> RuleSet:
    """Convenience wrapper: load a rule file for the running machine."""
    return RuleLoader(context).load_file(path)
