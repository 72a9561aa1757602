"""Literal match resolution for a single edit operation.

Matching is plain substring scanning, never regex. An operation is legal
when its search text occurs exactly once, or when replace_all is set and
it occurs at least once.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import AmbiguousMatchError, SearchNotFoundError
from .operations import EditOperation

CONTEXT_CHARS = 50
PARTIAL_MATCH_CHARS = 20


@dataclass(frozen=True)
class MatchResult:
    """Content after applying one operation."""

    new_content: str
    occurrences_replaced: int


def count_occurrences(content: str, search: str) -> int:
    """Count non-overlapping literal occurrences of ``search``.

    Equal to ``len(content.split(search)) - 1``.
    """
    return content.count(search)


def find_context(content: str, search: str, context_chars: int = CONTEXT_CHARS) -> str:
    """Return an excerpt around the first occurrence of ``search``.

    Args:
        content: Text to search
        search: Literal text to locate
        context_chars: Characters of surrounding content on each side

    Returns:
        Excerpt with ``...`` markers where it was truncated, or an empty
        string if ``search`` does not occur
    """
    if not search:
        return ""
    index = content.find(search)
    if index == -1:
        return ""

    start = max(0, index - context_chars)
    end = min(len(content), index + len(search) + context_chars)

    excerpt = content[start:end]
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(content):
        excerpt = excerpt + "..."
    return excerpt


def _escape(text: str) -> str:
    return text.replace("\n", "\\n").replace("\t", "\\t")


def resolve(content: str, operation: EditOperation, index: int = 0) -> MatchResult:
    """Apply one operation to a content snapshot.

    Args:
        content: Content at this point in the chain
        operation: Validated edit operation
        index: Position of the operation in the request (for errors)

    Returns:
        MatchResult with the new content and the number of replacements

    Raises:
        SearchNotFoundError: Search text does not occur
        AmbiguousMatchError: Search text occurs more than once without replace_all
    """
    search = operation.search
    occurrences = count_occurrences(content, search)

    if occurrences == 0:
        similar = find_context(content, search[:PARTIAL_MATCH_CHARS])
        if similar:
            hint = f'Similar context found: "{_escape(similar)}"'
        else:
            hint = "Previous edits may have removed it."
        raise SearchNotFoundError(
            f'String not found: "{search}". {hint}',
            index=index,
            context=similar or None,
        )

    if occurrences > 1 and not operation.replace_all:
        example = find_context(content, search)
        raise AmbiguousMatchError(
            f"String is not unique (found {occurrences} occurrences). "
            f"Use replace_all=true or provide more context. "
            f'Example context: "{_escape(example)}"',
            occurrences=occurrences,
            index=index,
            context=example,
        )

    if operation.replace_all:
        return MatchResult(
            new_content=content.replace(search, operation.replacement),
            occurrences_replaced=occurrences,
        )

    return MatchResult(
        new_content=content.replace(search, operation.replacement, 1),
        occurrences_replaced=1,
    )
