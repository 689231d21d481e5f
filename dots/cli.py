#!/usr/bin/env python3
"""Command-line interface for dots.

This module provides the CLI for querying dotfile rules on this machine:
- check: which of the given files are included here
- rules: list rules and whether they apply here
- context: show the machine identity rules are evaluated against

Example:
    >>> from dots.cli import parse_arguments
    >>> args = parse_arguments(["check", ".zshrc", ".vimrc"])
"""

import argparse
import sys
from typing import List, Optional, TextIO

from dots.core.config import ConfigManager
from dots.core.constants import DOTS_VERSION, OS_DISPLAY_NAMES
from dots.core.errors import ConfigError, DotsError
from dots.core.logging import Logger, set_global_logger
from dots.core.path_utils import expand_path, shorten_path
from dots.rules.context import Context
from dots.rules.engine import RuleSet
from dots.rules.loader import RuleLoader

DESCRIPTION = "dots - decide which dotfiles belong on this machine"


def ok(message: str) -> str:
    return f"[OK] {message}"


def excluded(message: str) -> str:
    return f"[--] {message}"


def err(message: str) -> str:
    return f"[ERR] {message}"


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="dots",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Which of these files are included on this machine?
  dots check .zshrc .vimrc .gconf

  # Show which rule decided
  dots check --explain .zshrc

  # Use another rule file
  dots --rules ./rules.yaml rules
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {DOTS_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Settings file path (YAML format, default: ~/.config/dots/config.yaml)",
    )

    parser.add_argument(
        "-r",
        "--rules",
        metavar="FILE",
        type=str,
        help="Rule file path (default: ~/.dots/rules.yaml)",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log messages to FILE",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    check = commands.add_parser("check", help="Report whether files are included on this machine")
    check.add_argument("files", metavar="FILE", nargs="+", help="File names to check")
    check.add_argument(
        "--explain",
        action="store_true",
        help="Show the verdict of every rule that applies",
    )

    commands.add_parser("rules", help="List rules and whether they apply to this machine")
    commands.add_parser("context", help="Show host, OS and user of this machine")

    return parser.parse_args(args)


def build_settings(args: argparse.Namespace) -> ConfigManager:
    """
    Resolve settings from the settings file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration manager with CLI overrides applied
    """
    config = ConfigManager()

    if args.config:
        config.load_file(args.config)
    else:
        config.load_default_file()

    overrides = {"dots": {"logging": {}}}
    if args.rules:
        overrides["dots"]["rules_file"] = args.rules
    if args.debug:
        overrides["dots"]["logging"]["level"] = "DEBUG"
    if args.log_file:
        overrides["dots"]["logging"]["file"] = args.log_file
    config.load_dict(overrides)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on the resolved settings.

    Args:
        config: Configuration manager

    Returns:
        Configured logger instance, also installed as the shared logger
    """
    level = config.get("dots.logging.level")
    try:
        logger = Logger("dots", level=level)
    except KeyError:
        raise ConfigError(f"Invalid logging level: {level}")

    log_file = config.get("dots.logging.file")
    if log_file:
        log_path = expand_path(log_file)
        try:
            handler = logger.create_file_handler(log_path)
        except OSError as e:
            raise ConfigError(f"Cannot open log file {shorten_path(log_path)}: {e.strerror}")
        logger.add_handler(handler)

    set_global_logger(logger)
    return logger


def run_check(rule_set: RuleSet, files: List[str], explain: bool, out: TextIO) -> None:
    """Print the verdict for each file name."""
    for file_name in files:
        if rule_set.included(file_name):
            print(ok(f"{file_name} included"), file=out)
        else:
            print(excluded(f"{file_name} excluded"), file=out)

        if not explain:
            continue

        for decision in rule_set.explain(file_name):
            verdict = "include" if decision.included else "exclude"
            reason = decision.entry.describe() if decision.entry else "no matching directive"
            print(f"    {decision.rule.label}: {verdict} ({reason})", file=out)


def run_rules(rule_set: RuleSet, out: TextIO) -> None:
    """Print every rule with its predicate and whether it applies."""
    if not len(rule_set):
        print("No rules defined.", file=out)
        return

    for rule in rule_set:
        marker = "*" if rule.applies_to(rule_set.context) else " "
        print(f"{marker} {rule.label}: {rule.predicate.describe()}", file=out)
        for entry in rule.actions:
            print(f"      {entry.describe()}", file=out)


def run_context(context: Context, out: TextIO) -> None:
    """Print the machine identity."""
    print(f"host: {context.host}", file=out)
    print(f"os:   {OS_DISPLAY_NAMES[context.os]}", file=out)
    print(f"user: {context.user}", file=out)


def main(
    argv: Optional[List[str]] = None,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit status (0 on success, the error's code on failure)
    """
    out = out or sys.stdout
    err_out = err_out or sys.stderr
    args = parse_arguments(argv)

    try:
        config = build_settings(args)
        logger = setup_logging(config)
        context = Context.capture()
        logger.debug("Captured context", host=context.host, os=context.os.value, user=context.user)

        if args.command == "context":
            run_context(context, out)
            return 0

        rules_path = config.rules_path()
        logger.debug("Loading rules", rules_file=shorten_path(rules_path))
        rule_set = RuleLoader(context, logger).load_file(rules_path)

        if args.command == "check":
            run_check(rule_set, args.files, args.explain, out)
        else:
            run_rules(rule_set, out)
        return 0

    except DotsError as e:
        print(err(e.message), file=err_out)
        return int(e.error_code)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=err_out)
        return 130


if __name__ == "__main__":
    sys.exit(main())
