"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and small helpers for
building directory trees under ``tmp_path``.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os
from pathlib import Path

import pytest

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_binding_env(request, monkeypatch):
    """Clear SERVICE_BINDING_ROOT and CONFIGTREE_* variables for each test.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("CONFIGTREE_") or key == "SERVICE_BINDING_ROOT":
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def debug_library_logging():
    """Let caplog see configtree debug records."""
    logging.getLogger("configtree").setLevel(logging.DEBUG)


# =============================================================================
# Tree Builders
# =============================================================================


def _write(root: Path, relative: str, content: str | bytes) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_file(tmp_path):
    """Return ``write(relative, content)`` that creates files under tmp_path."""

    def write(relative: str, content: str | bytes = "") -> Path:
        return _write(tmp_path, relative, content)

    return write


@pytest.fixture
def symlink(tmp_path):
    """Return ``link(relative_link, relative_target)``; skips without symlinks."""

    def link(relative_link: str, relative_target: str) -> Path:
        link_path = tmp_path / relative_link
        link_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            link_path.symlink_to((tmp_path / relative_target).absolute())
        except (OSError, NotImplementedError):
            pytest.skip("symlinks are not supported on this platform")
        return link_path

    return link


@pytest.fixture
def bindings_root(tmp_path, write_file):
    """A bindings root holding one complete ``db`` binding."""
    write_file("db/type", "relational")
    write_file("db/provider", "vendor")
    write_file("db/host", "hostname")
    write_file("db/port", "9999")
    return tmp_path
