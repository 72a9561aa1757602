"""FastMCP server initialization for multiedit-mcp.

This module initializes the MCP server and manages shared resources via lifespan context.
All tool implementations are in the tools module.

Following the official Anthropic Python SDK patterns:
- Lifespan context manager for resource initialization and cleanup
- Context injection for tool access to shared resources
- FastMCP server with stdio transport
"""

import codecs
import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from .context import AppContext, AppContextType
from .engine.diffing import DEFAULT_PREVIEW_LINES
from .engine.file_checks import DEFAULT_MAX_FILE_SIZE, format_size
from .engine.path_locks import PathLockRegistry

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration (environment variables)
# =============================================================================


def get_max_file_size() -> int:
    """Get maximum editable file size from environment.

    Reads MULTIEDIT_MAX_FILE_SIZE environment variable (bytes).
    Default: 10 MiB, values below 1 are clamped to 1.

    Returns:
        Maximum file size in bytes
    """
    try:
        size = int(os.getenv("MULTIEDIT_MAX_FILE_SIZE", str(DEFAULT_MAX_FILE_SIZE)))
        return max(1, size)
    except ValueError:
        logger.warning("Invalid MULTIEDIT_MAX_FILE_SIZE, using default")
        return DEFAULT_MAX_FILE_SIZE


def get_preview_lines() -> int:
    """Get preview line cap for multi-edit responses from environment.

    Reads MULTIEDIT_PREVIEW_LINES environment variable.
    Default: 20, Valid range: 1-500 (clamped automatically)

    Returns:
        Preview line cap (1-500)
    """
    try:
        lines = int(os.getenv("MULTIEDIT_PREVIEW_LINES", str(DEFAULT_PREVIEW_LINES)))
        return max(1, min(500, lines))
    except ValueError:
        logger.warning("Invalid MULTIEDIT_PREVIEW_LINES, using default")
        return DEFAULT_PREVIEW_LINES


def get_encoding() -> str:
    """Get file encoding from MULTIEDIT_ENCODING (default: utf-8)."""
    encoding = os.getenv("MULTIEDIT_ENCODING", "utf-8").strip() or "utf-8"
    try:
        codecs.lookup(encoding)
    except LookupError:
        logger.warning(f"Unknown MULTIEDIT_ENCODING '{encoding}', using utf-8")
        return "utf-8"
    return encoding


def path_locks_enabled() -> bool:
    """Whether sessions on the same path are serialized (MULTIEDIT_PATH_LOCKS_ENABLED)."""
    return os.getenv("MULTIEDIT_PATH_LOCKS_ENABLED", "true").lower() == "true"


# =============================================================================
# Shared Resources and Lifespan Management
# =============================================================================


@asynccontextmanager
async def app_lifespan(_server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage application lifecycle with resource initialization and cleanup.

    Environment Variables:
        MULTIEDIT_MAX_FILE_SIZE: Largest file the editor will open (bytes)
        MULTIEDIT_PREVIEW_LINES: Preview line cap for multi-edit responses
        MULTIEDIT_ENCODING: Text encoding for reads and writes
        MULTIEDIT_PATH_LOCKS_ENABLED: Serialize sessions per path (default: true)

    Args:
        _server: FastMCP server instance (unused, required by FastMCP signature)

    Yields:
        AppContext with initialized resources
    """
    logger.info("Initializing MCP server resources...")

    path_locks = PathLockRegistry() if path_locks_enabled() else None

    app_context = AppContext(
        path_locks=path_locks,
        max_file_size=get_max_file_size(),
        preview_lines=get_preview_lines(),
        encoding=get_encoding(),
    )

    logger.info(
        f"Editor config: max file size {format_size(app_context.max_file_size)}, "
        f"preview {app_context.preview_lines} lines, encoding {app_context.encoding}"
    )
    if path_locks:
        logger.info("Per-path session locks enabled")
    else:
        logger.info("Per-path session locks disabled")

    try:
        yield app_context
    finally:
        logger.info("Shutting down MCP server...")
        if path_locks:
            stats = path_locks.get_stats()
            logger.info(
                f"Path locks: {stats['total_acquisitions']} sessions, "
                f"{stats['contended_acquisitions']} waited on another session"
            )


# Initialize MCP server with lifespan management
# Following Python MCP naming convention: {service}_mcp
mcp = FastMCP("multiedit_mcp", lifespan=app_lifespan)


# =============================================================================
# Server Entry Point
# =============================================================================


def main() -> None:
    """Entry point for running the MCP server.

    This function is called when the server is run directly via:
    - python -m multiedit_mcp
    - multiedit-mcp (console script entry point)

    Defaults to stdio transport for MCP protocol communication.
    """
    # Get log level from environment variable, default to INFO
    valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    log_level_str = os.getenv("MULTIEDIT_LOG_LEVEL", "INFO").upper()

    # Validate log level and provide feedback
    if log_level_str not in valid_log_levels:
        print(
            f"Warning: Invalid MULTIEDIT_LOG_LEVEL '{log_level_str}'. "
            f"Valid levels: {', '.join(sorted(valid_log_levels))}. "
            "Using INFO.",
            file=sys.stderr,
        )
        log_level_str = "INFO"

    log_level = getattr(logging, log_level_str)

    # Configure logging to stderr (MCP requirement)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    logger.info("Starting MCP server (press Ctrl+C to stop)...")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down gracefully...")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        sys.exit(1)

    logger.info("Server shutdown complete")


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "mcp",
    "main",
    "AppContext",
    "AppContextType",
]
