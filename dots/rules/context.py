#!/usr/bin/env python3
"""Machine identity snapshot used to evaluate rule predicates.

A Context is captured once per session and never changes afterwards:
- host: network host name
- os: operating-system class derived from the platform identifier
- user: logged-in user ($USER, falling back to $USERNAME)
- env: read-only view of the environment variables

Example:
    >>> ctx = Context.capture()
    >>> ctx.os
    <OsClass.LINUX: 'linux'>
    >>> Context.capture(hostname="nexus", platform="darwin").os
    <OsClass.OSX: 'osx'>
"""

import os
import re
import socket
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from dots.core.constants import OS_DISPLAY_NAMES, PLATFORM_PATTERNS, OsClass
from dots.core.errors import UnknownPlatformError


def detect_os(platform_id: str) -> OsClass:
    """Classify a platform identifier such as ``sys.platform``.

    Args:
        platform_id: Platform identifier string (e.g. "linux", "win32", "darwin")

    Returns:
        Matching OS class

    Raises:
        UnknownPlatformError: If the identifier matches no known OS family
    """
    lowered = platform_id.lower()
    for pattern, os_class in PLATFORM_PATTERNS:
        if re.search(pattern, lowered):
            return os_class
    raise UnknownPlatformError(platform_id)


def current_user(environ: Mapping[str, str]) -> str:
    """Logged-in user name as reported by the environment."""
    return environ.get("USER") or environ.get("USERNAME") or ""


@dataclass(frozen=True)
class Context:
    """Immutable snapshot of the running machine's identity."""

    host: str
    os: OsClass
    user: str
    env: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze whatever mapping we were handed
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @classmethod
    def capture(
        cls,
        hostname: Optional[str] = None,
        platform: Optional[str] = None,
        user: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Context":
        """Capture the identity of the running machine.

        Every argument overrides the corresponding probe, which keeps the
        snapshot reproducible in tests and tooling.

        Args:
            hostname: Host name (defaults to socket.gethostname())
            platform: Platform identifier (defaults to sys.platform)
            user: User name (defaults to $USER or $USERNAME)
            environ: Environment mapping (defaults to os.environ)

        Raises:
            UnknownPlatformError: If the platform cannot be classified
        """
        env = dict(os.environ if environ is None else environ)
        return cls(
            host=socket.gethostname() if hostname is None else hostname,
            os=detect_os(sys.platform if platform is None else platform),
            user=current_user(env) if user is None else user,
            env=env,
        )

    def describe(self) -> str:
        """One-line summary for diagnostics."""
        return f"host={self.host} os={OS_DISPLAY_NAMES[self.os]} user={self.user}"
