"""Edit operation models and structural validation.

EditOperation instances can only be built through validation, so an
operation with an empty search text or a no-op replacement never exists
as a value. ``validate_operations`` runs over the whole request before
any file I/O and rejects the entire session on the first bad operation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    model_validator,
)

from .exceptions import InvalidOperationError

logger = logging.getLogger(__name__)


class EditOperation(BaseModel):
    """Single literal find/replace operation.

    Accepts both ``search``/``replacement`` and the tool-facing
    ``old_string``/``new_string`` names.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    search: StrictStr = Field(
        validation_alias=AliasChoices("search", "old_string"),
        description="Exact text to find (literal, not a regex)",
    )
    replacement: StrictStr = Field(
        validation_alias=AliasChoices("replacement", "new_string"),
        description="Text to replace it with (must differ from search)",
    )
    replace_all: StrictBool = Field(
        default=False,
        description="Replace every occurrence instead of requiring a unique match",
    )

    @model_validator(mode="after")
    def _check_invariants(self) -> EditOperation:
        if len(self.search) == 0:
            raise ValueError("search text cannot be empty")
        if self.search == self.replacement:
            raise ValueError("search and replacement must be different")
        return self


class CreateIntent(BaseModel):
    """First edit with an empty search: create the file with ``replacement``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    search: StrictStr = Field(validation_alias=AliasChoices("search", "old_string"))
    replacement: StrictStr = Field(validation_alias=AliasChoices("replacement", "new_string"))
    replace_all: StrictBool = False

    @model_validator(mode="after")
    def _check_content(self) -> CreateIntent:
        if self.replacement == "":
            raise ValueError("creating a file requires non-empty replacement content")
        return self


class ValidatedEdits(BaseModel):
    """Result of structural validation of a raw edit list.

    ``create_content`` is set when the first raw edit carried an empty
    search text, which is the explicit "create new file" intent. The
    orchestrator decides whether that intent is legal once it knows
    whether the target exists.
    """

    model_config = ConfigDict(frozen=True)

    operations: tuple[EditOperation, ...] = ()
    create_content: str | None = None

    @property
    def first_index(self) -> int:
        """Request index of ``operations[0]``."""
        return 1 if self.create_content is not None else 0

    @property
    def total(self) -> int:
        """Number of edits in the original request."""
        return len(self.operations) + self.first_index


class EditSession(BaseModel):
    """One target file plus its ordered, validated operations."""

    model_config = ConfigDict(frozen=True)

    target_path: Path
    edits: ValidatedEdits

    @property
    def operations(self) -> tuple[EditOperation, ...]:
        return self.edits.operations


def _first_error_message(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "__root__")
    message = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def _is_create_intent(raw: Any) -> bool:
    if isinstance(raw, EditOperation):
        return False
    if not isinstance(raw, Mapping):
        return False
    search = raw.get("search", raw.get("old_string"))
    return search == ""


def build_operation(raw: Any, index: int) -> EditOperation:
    """Validate a single raw edit.

    Args:
        raw: EditOperation instance or mapping with search/replacement keys
        index: Position of the edit in the request (for error messages)

    Returns:
        Validated, immutable EditOperation

    Raises:
        InvalidOperationError: Edit is malformed
    """
    if isinstance(raw, EditOperation):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidOperationError(
            f"edit must be an object, got {type(raw).__name__}", index=index
        )
    try:
        return EditOperation.model_validate(dict(raw))
    except ValidationError as e:
        raise InvalidOperationError(_first_error_message(e), index=index) from e


def validate_operations(raw_edits: Sequence[Any]) -> ValidatedEdits:
    """Validate every requested edit before any file I/O.

    Rules, per edit and in order:
    1. search must be non-empty (an empty search on the first edit is the
       create-new-file intent and is accepted here)
    2. search must differ from replacement

    Args:
        raw_edits: Non-empty list of edits (mappings or EditOperation)

    Returns:
        ValidatedEdits with the operations and optional create content

    Raises:
        InvalidOperationError: Empty list or any malformed edit (fail-fast)
    """
    if isinstance(raw_edits, (str, bytes)) or not isinstance(raw_edits, Sequence):
        raise InvalidOperationError("edits must be a list of edit operations")
    if len(raw_edits) == 0:
        raise InvalidOperationError("At least one edit is required")

    create_content: str | None = None
    start = 0
    if _is_create_intent(raw_edits[0]):
        try:
            intent = CreateIntent.model_validate(dict(raw_edits[0]))
        except ValidationError as e:
            raise InvalidOperationError(_first_error_message(e), index=0) from e
        create_content = intent.replacement
        start = 1

    operations = tuple(
        build_operation(raw, index) for index, raw in enumerate(raw_edits) if index >= start
    )

    logger.debug(
        f"Validated {len(raw_edits)} edits (create intent: {create_content is not None})"
    )
    return ValidatedEdits(operations=operations, create_content=create_content)
