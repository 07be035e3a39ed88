"""Entry point — exit codes for clean shutdown and fatal failures.

Tests cover:
    - Clean shutdown returns 0
    - Ctrl-C returns 0
    - Duplicate capability at startup returns 1
    - Stdio connection failure returns 1 with a diagnostic
    - Unexpected transport failure returns 1
    - Startup log lists capabilities by category, minus disabled ones
"""

import logging
from contextlib import asynccontextmanager

import pytest

from demo_server import main as main_module
from demo_server.core.errors import DuplicateCapabilityError
from demo_server.infrastructure import mcp_transport


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # Keep pytest's caplog handler; skip installing the stderr handler
    monkeypatch.setattr(main_module, "setup_logging", lambda *a, **kw: None)


def test_clean_shutdown_returns_zero(monkeypatch):
    served = []

    async def fake_serve(server):
        served.append(server.name)

    monkeypatch.setattr(main_module, "serve_stdio", fake_serve)
    assert main_module.main() == 0
    assert served == ["Demo"]


def test_keyboard_interrupt_returns_zero(monkeypatch):
    async def interrupted(server):
        raise KeyboardInterrupt

    monkeypatch.setattr(main_module, "serve_stdio", interrupted)
    assert main_module.main() == 0


def test_duplicate_capability_returns_one(monkeypatch, caplog):
    def duplicate(disabled=()):
        raise DuplicateCapabilityError("add")

    monkeypatch.setattr(main_module, "build_registry", duplicate)
    with caplog.at_level(logging.CRITICAL):
        assert main_module.main() == 1
    assert "already registered" in caplog.text


def test_connect_failure_returns_one(monkeypatch, caplog):
    @asynccontextmanager
    async def broken_stdio():
        raise OSError("bad file descriptor")
        yield

    monkeypatch.setattr(mcp_transport, "stdio_server", broken_stdio)
    with caplog.at_level(logging.CRITICAL):
        assert main_module.main() == 1
    assert "Error connecting server: bad file descriptor" in caplog.text


def test_transport_failure_returns_one(monkeypatch, caplog):
    async def broken(server):
        raise BrokenPipeError("stdout closed")

    monkeypatch.setattr(main_module, "serve_stdio", broken)
    with caplog.at_level(logging.CRITICAL):
        assert main_module.main() == 1
    assert "Transport failed" in caplog.text


def test_startup_log_lists_capabilities_by_category(monkeypatch, caplog):
    async def fake_serve(server):
        return None

    monkeypatch.delenv("DISABLED_CAPABILITIES", raising=False)
    monkeypatch.setattr(main_module, "serve_stdio", fake_serve)
    with caplog.at_level(logging.INFO, logger="demo_server.main"):
        assert main_module.main() == 0
    assert "with capabilities: math: add; text: greeting" in caplog.text


def test_disabled_capabilities_setting(monkeypatch, caplog):
    async def fake_serve(server):
        return None

    monkeypatch.setenv("DISABLED_CAPABILITIES", '["greeting"]')
    monkeypatch.setattr(main_module, "serve_stdio", fake_serve)
    with caplog.at_level(logging.INFO, logger="demo_server.main"):
        assert main_module.main() == 0
    assert "with capabilities: math: add\n" in caplog.text
