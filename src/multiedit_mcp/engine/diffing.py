"""Line-level diff statistics and change previews.

Reporting only: nothing here affects which content gets written.
"""

from __future__ import annotations

import difflib
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_PREVIEW_LINES = 20
SINGLE_EDIT_PREVIEW_LINES = 10
CHANGED_LINES_LIMIT = 10


class DiffStats(BaseModel):
    """Added/removed line counts between two versions."""

    added: int = Field(default=0, description="Number of lines added")
    removed: int = Field(default=0, description="Number of lines removed")


class LineChange(BaseModel):
    """One added or removed line."""

    kind: Literal["added", "removed"]
    line_number: int
    text: str


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings.

    Unlike ``str.splitlines`` this does not break on form feeds or other
    Unicode separators, and a missing final newline makes the last line
    differ from its newline-terminated version.
    """
    lines = text.split("\n")
    result = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result


def _display(line: str) -> str:
    return line.removesuffix("\n").removesuffix("\r")


def line_changes(original: str, modified: str) -> list[LineChange]:
    """List changed lines in diff order.

    Lines are compared with their endings, so adding or dropping a
    trailing newline shows up as one removed and one added line. Removed
    lines carry their line number in the original, added lines their
    line number in the modified content.
    """
    original_lines = split_lines(original)
    modified_lines = split_lines(modified)

    matcher = difflib.SequenceMatcher(None, original_lines, modified_lines, autojunk=False)

    changes: list[LineChange] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag in ("replace", "delete"):
            for offset, text in enumerate(original_lines[i1:i2]):
                changes.append(
                    LineChange(kind="removed", line_number=i1 + offset + 1, text=_display(text))
                )
        if tag in ("replace", "insert"):
            for offset, text in enumerate(modified_lines[j1:j2]):
                changes.append(
                    LineChange(kind="added", line_number=j1 + offset + 1, text=_display(text))
                )
    return changes


def compute_diff_stats(original: str, modified: str) -> DiffStats:
    """Count added and removed lines.

    ``added - removed`` always equals the change in ``split_lines()`` count.
    """
    changes = line_changes(original, modified)
    added = sum(1 for change in changes if change.kind == "added")
    return DiffStats(added=added, removed=len(changes) - added)


def generate_change_preview(
    original: str, modified: str, max_lines: int = DEFAULT_PREVIEW_LINES
) -> str:
    """Format up to ``max_lines`` changed lines as ``<line> <+/-> <text>``.

    A trailing ``... and N more changes`` line is added when the cap is hit.
    """
    changes = line_changes(original, modified)
    preview = [
        f"{change.line_number:>4} {'+' if change.kind == 'added' else '-'} {change.text}"
        for change in changes[:max_lines]
    ]
    if len(changes) > max_lines:
        preview.append(f"... and {len(changes) - max_lines} more changes")
    return "\n".join(preview)


def compute_unified_diff(original: str, modified: str, filepath: str) -> str:
    """Generate unified diff between original and modified content.

    Args:
        original: Original file content
        modified: Modified file content
        filepath: File path for diff header

    Returns:
        Unified diff string
    """
    original_lines = split_lines(original)
    modified_lines = split_lines(modified)

    diff_lines = difflib.unified_diff(
        original_lines,
        modified_lines,
        fromfile=f"a/{filepath}",
        tofile=f"b/{filepath}",
        lineterm="",
    )

    return "".join(
        line if line.endswith("\n") else line + "\n" for line in diff_lines
    )


def find_changed_lines(
    content: str, replacement: str, limit: int = CHANGED_LINES_LIMIT
) -> tuple[list[int], int]:
    """Line numbers in ``content`` that contain the replacement text.

    Multi-line replacements are located by their first non-blank line. A
    blank replacement (a deletion) leaves nothing to locate.

    Returns:
        (first ``limit`` matching 1-based line numbers, total matching lines)
    """
    needle = next((part for part in replacement.split("\n") if part.strip()), "")
    if not needle:
        return [], 0
    matches = [
        number
        for number, line in enumerate(content.split("\n"), start=1)
        if needle in line
    ]
    return matches[:limit], len(matches)
