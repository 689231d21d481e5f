"""Shared pytest fixtures for dots tests."""
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from dots.core import logging as dots_logging
from dots.core.constants import OsClass
from dots.rules.context import Context


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def linux_context() -> Context:
    """A Linux machine named nexus."""
    return Context(
        host="nexus",
        os=OsClass.LINUX,
        user="alice",
        env={"SHELL": "/bin/zsh", "TERM": "xterm-256color"},
    )


@pytest.fixture
def windows_context() -> Context:
    """A Windows vagrant box named foo."""
    return Context(
        host="FOO",
        os=OsClass.WINDOWS,
        user="vagrant",
        env={"USERNAME": "vagrant", "COMSPEC": "C:\\Windows\\system32\\cmd.exe"},
    )


@pytest.fixture
def sample_rules() -> Dict[str, Any]:
    """Rule document covering every criterion shape."""
    return {
        "version": 1,
        "rules": [
            {
                "name": "no zsh on windows",
                "os": "windows",
                "actions": [{"exclude": ".zsh*"}],
            },
            {
                "host": "nexus",
                "actions": [
                    {"exclude": {"regex": r"\.zsh.*"}},
                    {"exclude": ".gconf"},
                ],
            },
            {
                "host": {"regex": "ags-dev", "ignore_case": True},
                "actions": [],
            },
            {
                "host": ["foo", "bar"],
                "user": "vagrant",
                "os": "windows",
                "actions": [],
            },
            {
                "host": "zero",
                "actions": [{"exclude": ".vim*"}],
            },
        ],
    }


@pytest.fixture
def rules_file(temp_dir: Path, sample_rules: Dict[str, Any]) -> Path:
    """Write the sample rule document to disk."""
    path = temp_dir / "rules.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(sample_rules, f)
    return path


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Reset the shared logger between tests."""
    dots_logging.set_global_logger(None)
    yield
    dots_logging.set_global_logger(None)
