"""Sequential edit application with dry-run and commit passes.

Both passes call the same pure ``apply_chain`` function from the original
content. Operation i always sees the output of operation i-1. The commit
pass only runs after the dry-run succeeded, and must reproduce it exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field

from .exceptions import ChainMismatchError, EditError, ReasonCode
from .matcher import resolve
from .operations import EditOperation

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 50


def truncate_preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class EditOutcome(BaseModel):
    """Per-operation outcome recorded during a pass."""

    index: int = Field(description="Position of the edit in the request")
    search_preview: str = Field(description="First 50 characters of the search text")
    replacement_preview: str = Field(description="First 50 characters of the replacement")
    occurrences_replaced: int = Field(default=0, description="Replacements performed")
    succeeded: bool = Field(default=True, description="Whether the operation applied")
    failure_reason: ReasonCode | None = Field(default=None, description="Reason code on failure")
    error: str | None = Field(default=None, description="Error message on failure")

    @classmethod
    def for_operation(cls, index: int, operation: EditOperation, **kwargs: object) -> EditOutcome:
        return cls(
            index=index,
            search_preview=truncate_preview(operation.search),
            replacement_preview=truncate_preview(operation.replacement),
            **kwargs,  # type: ignore[arg-type]
        )


class ChainResult(BaseModel):
    """Final content and ordered outcomes of a fully successful chain."""

    final_content: str
    outcomes: list[EditOutcome] = Field(default_factory=list)

    @property
    def occurrence_counts(self) -> list[int]:
        return [outcome.occurrences_replaced for outcome in self.outcomes]

    @property
    def total_replacements(self) -> int:
        return sum(self.occurrence_counts)


def apply_chain(
    content: str, operations: Sequence[EditOperation], first_index: int = 0
) -> ChainResult:
    """Feed content through every operation in order.

    Args:
        content: Starting content
        operations: Validated operations, in request order
        first_index: Request index of ``operations[0]``

    Returns:
        ChainResult with the final content and one outcome per operation

    Raises:
        EditError: First failing operation (SearchNotFound or AmbiguousMatch).
            ``error.outcomes`` holds the outcomes up to and including the
            failure; later operations are not evaluated.
    """
    outcomes: list[EditOutcome] = []
    current = content

    for offset, operation in enumerate(operations):
        index = first_index + offset
        try:
            match = resolve(current, operation, index)
        except EditError as e:
            outcomes.append(
                EditOutcome.for_operation(
                    index,
                    operation,
                    succeeded=False,
                    failure_reason=e.reason,
                    error=e.message,
                )
            )
            e.outcomes = outcomes
            raise

        current = match.new_content
        outcomes.append(
            EditOutcome.for_operation(
                index, operation, occurrences_replaced=match.occurrences_replaced
            )
        )

    return ChainResult(final_content=current, outcomes=outcomes)


def dry_run(
    original: str, operations: Sequence[EditOperation], first_index: int = 0
) -> ChainResult:
    """Simulate the whole chain without any I/O.

    Raises:
        EditError: The first operation that cannot be applied
    """
    result = apply_chain(original, operations, first_index)
    logger.debug(
        f"Dry-run passed: {len(operations)} operations, "
        f"{result.total_replacements} replacements"
    )
    return result


def commit(
    original: str,
    operations: Sequence[EditOperation],
    expected: ChainResult,
    first_index: int = 0,
) -> ChainResult:
    """Re-apply the chain from the original content after a successful dry-run.

    Args:
        original: Original content (same as the dry-run input)
        operations: Same operations as the dry-run
        expected: Result of the dry-run pass
        first_index: Request index of ``operations[0]``

    Returns:
        ChainResult whose content is the one to persist

    Raises:
        ChainMismatchError: The commit pass disagrees with the dry-run
    """
    result = apply_chain(original, operations, first_index)
    if (
        result.final_content != expected.final_content
        or result.occurrence_counts != expected.occurrence_counts
    ):
        raise ChainMismatchError(
            "Commit pass diverged from dry-run pass "
            f"(counts {result.occurrence_counts} vs {expected.occurrence_counts})"
        )
    return result
