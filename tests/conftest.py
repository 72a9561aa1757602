"""Shared test configuration for multiedit-mcp tests.

Provides:
- Target file factory writing exact bytes into tmp_path
- Preconfigured FileEditor
- Mock MCP context for calling tool functions directly
"""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from multiedit_mcp.context import AppContext
from multiedit_mcp.engine import FileEditor
from multiedit_mcp.engine.path_locks import PathLockRegistry


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a file with exact content (no newline translation).

    Usage:
        target = make_file("foo bar foo")
        target = make_file("a\\r\\nb", name="crlf.txt")
    """

    def _make(content: str, name: str = "target.txt") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _make


@pytest.fixture
def editor() -> FileEditor:
    """FileEditor with default settings."""
    return FileEditor()


@pytest.fixture
def mock_context() -> MagicMock:
    """Create mock MCP context with AppContext for unit testing MCP tools.

    Returns:
        Mock context object with request_context.lifespan_context structure
    """
    app_context = AppContext(path_locks=PathLockRegistry())

    mock_ctx = MagicMock()
    mock_ctx.request_context.lifespan_context = app_context

    return mock_ctx
