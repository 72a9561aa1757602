"""Shared context types for MCP server.

This module contains context types used across server and tools modules,
separated to avoid circular imports.
"""

from dataclasses import dataclass

from mcp.server.fastmcp import Context
from mcp.server.session import ServerSession

from .engine import FileEditor
from .engine.diffing import DEFAULT_PREVIEW_LINES
from .engine.file_checks import DEFAULT_MAX_FILE_SIZE
from .engine.path_locks import PathLockRegistry


@dataclass
class AppContext:
    """Application context containing shared resources for MCP tools.

    This context is created during server startup and made available to all tools
    via dependency injection through the Context parameter.
    """

    path_locks: PathLockRegistry | None  # Optional per-path serialization of sessions
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    preview_lines: int = DEFAULT_PREVIEW_LINES
    encoding: str = "utf-8"

    def create_editor(self) -> FileEditor:
        """Create a FileEditor configured from server settings.

        Returns:
            FileEditor (stateless, safe to create per request)
        """
        return FileEditor(
            max_file_size=self.max_file_size,
            preview_lines=self.preview_lines,
            encoding=self.encoding,
        )


# Type alias for MCP tool context parameter
AppContextType = Context[ServerSession, AppContext]


__all__ = ["AppContext", "AppContextType"]
