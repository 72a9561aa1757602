"""Transactional multi-edit engine exposed as an MCP server."""

from .engine import (
    EditError,
    EditOperation,
    FileEditor,
    ReasonCode,
    SessionResult,
    edit_file,
)

__version__ = "0.1.0"

__all__ = [
    "EditError",
    "EditOperation",
    "FileEditor",
    "ReasonCode",
    "SessionResult",
    "edit_file",
    "__version__",
]
