"""Shared formatting utilities for MCP tool responses.

All formatting logic for edit session responses is centralized here.

Following MCP best practices:
- JSON format: Machine-readable structured data for programmatic access
- Markdown format: Human-readable with headers, lists, and a diff preview
- YAML format: Readable structured data with literal blocks for content
"""

from typing import Any, Literal

import yaml

from .engine import EditError, SessionResult

ResponseFormat = Literal["json", "markdown", "yaml"]

# =============================================================================
# YAML Formatting Utilities
# =============================================================================


class _LiteralDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal block scalars."""


def _str_representer(dumper: yaml.SafeDumper, data: str) -> Any:
    if "\n" in data:  # Multi-line: use literal style
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_LiteralDumper.add_representer(str, _str_representer)


def format_as_yaml(payload: dict[str, Any]) -> str:
    """Dump a response payload as YAML, preserving key order."""
    return yaml.dump(
        payload,
        Dumper=_LiteralDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


# =============================================================================
# Markdown Formatting Utilities
# =============================================================================


def format_session_result_markdown(result: SessionResult) -> str:
    """Format a successful edit session as markdown.

    Args:
        result: Session result

    Returns:
        Markdown with summary, per-edit results and a fenced diff preview
    """
    action = "Created" if result.created else "Edited"
    plural = "s" if result.total_replacements != 1 else ""
    lines = [
        f"## {action} `{result.file_path}`",
        "",
        f"- **Edits applied**: {result.edits_applied}",
        f"- **Replacements**: {result.total_replacements} occurrence{plural}",
        f"- **Lines**: +{result.diff_stats.added} / -{result.diff_stats.removed}",
    ]
    if result.changed_lines:
        shown = ", ".join(str(number) for number in result.changed_lines)
        more = (result.total_changed_lines or 0) - len(result.changed_lines)
        lines.append(f"- **Changed lines**: {shown}" + (f" (+{more} more)" if more > 0 else ""))
    if result.message:
        lines.insert(1, "")
        lines.insert(2, result.message)

    if len(result.outcomes) > 1:
        lines.append("")
        lines.append("### Edits")
        for outcome in result.outcomes:
            lines.append(
                f"{outcome.index}. `{outcome.search_preview}` -> "
                f"`{outcome.replacement_preview}` ({outcome.occurrences_replaced})"
            )

    if result.preview:
        lines.extend(["", "### Preview", "```diff", result.preview, "```"])

    return "\n".join(lines)


def format_edit_error_markdown(error: EditError) -> str:
    """Format an edit failure as markdown.

    Args:
        error: Failure raised by the engine

    Returns:
        Markdown error with reason code and optional context excerpt
    """
    lines = [f"**Error** (`{error.reason.value}`): {error}"]
    if error.context:
        lines.extend(["", "**Context:**", "```", error.context, "```"])
    lines.append("")
    lines.append("No changes were written to the file.")
    return "\n".join(lines)


# =============================================================================
# Dispatch
# =============================================================================


def format_session_result(
    result: SessionResult, format_type: ResponseFormat = "json", include_content: bool = False
) -> dict[str, Any] | str:
    """Format a session result in the requested format."""
    if format_type == "markdown":
        return format_session_result_markdown(result)
    payload = result.to_response(include_content=include_content)
    if format_type == "yaml":
        return format_as_yaml(payload)
    return payload


def format_edit_error(error: EditError, format_type: ResponseFormat = "json") -> dict[str, Any] | str:
    """Format an edit failure in the requested format."""
    if format_type == "markdown":
        return format_edit_error_markdown(error)
    payload = error.to_dict()
    if format_type == "yaml":
        return format_as_yaml(payload)
    return payload


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "ResponseFormat",
    "format_as_yaml",
    "format_edit_error",
    "format_edit_error_markdown",
    "format_session_result",
    "format_session_result_markdown",
]
