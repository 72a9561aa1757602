"""MCP tool implementations for transactional file editing.

This module contains all MCP tool function implementations that expose
the edit engine via the MCP protocol.

Following official Anthropic MCP Python SDK patterns:
- Tool functions decorated with @mcp.tool()
- Flat parameter signatures with Annotated types for validation
- Type hints for automatic schema generation
- Async functions for all tools
- Clear docstrings (become tool descriptions)
"""

import asyncio
from collections.abc import Callable
from typing import Annotated, Any

from mcp.types import ToolAnnotations
from pydantic import BaseModel, Field

from .context import AppContext, AppContextType
from .engine import EditError, SessionResult
from .formatting import ResponseFormat, format_edit_error, format_session_result
from .server import mcp


class EditSpec(BaseModel):
    """One find/replace edit as accepted by the multi_edit_file tool.

    Structural rules (non-empty old_string, old_string != new_string) are
    enforced by the engine so they come back as INVALID_OPERATION errors.
    """

    old_string: str = Field(description="The text to replace (exact match, not a regex)")
    new_string: str = Field(description="The text to replace it with")
    replace_all: bool = Field(
        default=False, description="Replace all occurrences of old_string (default false)"
    )


async def _run_session(
    app_ctx: AppContext,
    file_path: str,
    session: Callable[[], SessionResult],
    format_type: ResponseFormat,
    include_content: bool,
) -> dict[str, Any] | str:
    """Run one blocking edit session off the event loop, serialized per path."""
    try:
        if app_ctx.path_locks is not None:
            async with app_ctx.path_locks.lock(file_path):
                result = await asyncio.to_thread(session)
        else:
            result = await asyncio.to_thread(session)
    except EditError as e:
        return format_edit_error(e, format_type)

    return format_session_result(result, format_type, include_content)


# =============================================================================
# MCP Tools (following official SDK decorator pattern)
# =============================================================================


@mcp.tool(
    annotations=ToolAnnotations(
        title="Edit File",
        readOnlyHint=False,
        destructiveHint=True,  # Overwrites file content
        idempotentHint=False,
        openWorldHint=False,
    )
)
async def edit_file(
    file_path: Annotated[
        str,
        Field(description="The absolute path to the file to modify", min_length=1),
    ],
    old_string: Annotated[
        str,
        Field(description="The text to replace (must match exactly including whitespace)"),
    ],
    new_string: Annotated[
        str,
        Field(description="The text to replace it with (must be different from old_string)"),
    ],
    replace_all: Annotated[
        bool,
        Field(description="Replace all occurrences of old_string"),
    ] = False,
    format: Annotated[  # noqa: A002
        ResponseFormat,
        Field(description="Output format"),
    ] = "json",
    include_content: Annotated[
        bool,
        Field(description="Include original/final content and unified diff in the response"),
    ] = False,
    *,
    ctx: AppContextType,
) -> dict[str, Any] | str:
    """Exact string replacement in one file. old_string must be unique unless replace_all."""
    app_ctx = ctx.request_context.lifespan_context
    editor = app_ctx.create_editor()

    return await _run_session(
        app_ctx,
        file_path,
        lambda: editor.replace(file_path, old_string, new_string, replace_all),
        format,
        include_content,
    )


@mcp.tool(
    annotations=ToolAnnotations(
        title="Multi Edit File",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    )
)
async def multi_edit_file(
    file_path: Annotated[
        str,
        Field(description="The absolute path to the file to modify", min_length=1),
    ],
    edits: Annotated[
        list[EditSpec],
        Field(
            description=(
                "Edits applied sequentially; each sees the previous edit's output. "
                "An empty old_string on the first edit creates a new file."
            ),
            min_length=1,
        ),
    ],
    format: Annotated[  # noqa: A002
        ResponseFormat,
        Field(description="Output format"),
    ] = "json",
    include_content: Annotated[
        bool,
        Field(description="Include original/final content and unified diff in the response"),
    ] = False,
    *,
    ctx: AppContextType,
) -> dict[str, Any] | str:
    """Multiple edits to one file in one atomic operation. All succeed or none are applied."""
    app_ctx = ctx.request_context.lifespan_context
    editor = app_ctx.create_editor()
    raw_edits = [edit.model_dump() for edit in edits]

    return await _run_session(
        app_ctx,
        file_path,
        lambda: editor.apply(file_path, raw_edits),
        format,
        include_content,
    )
