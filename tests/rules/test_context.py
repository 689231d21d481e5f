#!/usr/bin/env python3
"""Tests for Context capture and OS detection."""

import socket
import sys

import pytest

from dots.core.constants import ErrorCode, OsClass
from dots.core.errors import UnknownPlatformError
from dots.rules.context import Context, current_user, detect_os


class TestDetectOs:
    """Tests for detect_os()."""

    @pytest.mark.parametrize(
        "platform_id,expected",
        [
            ("win32", OsClass.WINDOWS),
            ("cygwin", OsClass.WINDOWS),
            ("msys", OsClass.WINDOWS),
            ("x64-mingw32", OsClass.WINDOWS),
            ("darwin", OsClass.OSX),
            ("x86_64-darwin21", OsClass.OSX),
            ("Mac OS X", OsClass.OSX),
            ("linux", OsClass.LINUX),
            ("x86_64-linux-gnu", OsClass.LINUX),
            ("freebsd13", OsClass.UNIX),
            ("openbsd7", OsClass.UNIX),
            ("sunos5", OsClass.UNIX),
            ("solaris2.11", OsClass.UNIX),
        ],
    )
    def test_known_platforms(self, platform_id, expected):
        """Platform identifiers map to OS classes."""
        assert detect_os(platform_id) is expected

    @pytest.mark.parametrize("platform_id", ["aix", "emscripten-wasm", "", "haiku"])
    def test_unknown_platform(self, platform_id):
        """Unrecognised platforms are fatal."""
        with pytest.raises(UnknownPlatformError) as exc_info:
            detect_os(platform_id)
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_PLATFORM
        assert exc_info.value.platform_id == platform_id


class TestCurrentUser:
    """Tests for current_user()."""

    def test_prefers_user(self):
        """$USER wins over $USERNAME."""
        assert current_user({"USER": "alice", "USERNAME": "bob"}) == "alice"

    def test_falls_back_to_username(self):
        """$USERNAME is used on Windows-style environments."""
        assert current_user({"USERNAME": "bob"}) == "bob"

    def test_missing(self):
        """No user variables yields an empty name."""
        assert current_user({}) == ""


class TestContext:
    """Tests for Context."""

    def test_capture_overrides(self):
        """Every probe can be overridden."""
        ctx = Context.capture(
            hostname="nexus",
            platform="darwin",
            user="alice",
            environ={"TERM": "xterm"},
        )
        assert ctx.host == "nexus"
        assert ctx.os is OsClass.OSX
        assert ctx.user == "alice"
        assert ctx.env["TERM"] == "xterm"

    def test_capture_user_from_environ(self):
        """The user defaults to the environment's user variables."""
        ctx = Context.capture(hostname="h", platform="win32", environ={"USERNAME": "vagrant"})
        assert ctx.user == "vagrant"

    def test_capture_running_machine(self, monkeypatch):
        """Without overrides the running machine is probed."""
        monkeypatch.setattr(socket, "gethostname", lambda: "probe-host")
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("USER", "probe-user")

        ctx = Context.capture()

        assert ctx.host == "probe-host"
        assert ctx.os is OsClass.LINUX
        assert ctx.user == "probe-user"
        assert ctx.env["USER"] == "probe-user"

    def test_capture_unknown_platform(self):
        """Capture fails on an unclassifiable platform."""
        with pytest.raises(UnknownPlatformError):
            Context.capture(hostname="h", platform="plan9", environ={})

    def test_immutable(self, linux_context):
        """Fields cannot be reassigned."""
        with pytest.raises(AttributeError):
            linux_context.host = "other"

    def test_env_is_read_only_snapshot(self):
        """The environment is copied and cannot be modified."""
        environ = {"TERM": "xterm"}
        ctx = Context(host="h", os=OsClass.LINUX, user="u", env=environ)
        environ["TERM"] = "changed"
        assert ctx.env["TERM"] == "xterm"
        with pytest.raises(TypeError):
            ctx.env["TERM"] = "vt100"

    def test_hashable(self, linux_context):
        """Contexts can be hashed despite holding a mapping."""
        assert isinstance(hash(linux_context), int)

    def test_describe(self, linux_context):
        """describe summarises the identity."""
        assert linux_context.describe() == "host=nexus os=Linux user=alice"
