"""Edit session orchestrator.

Architecture:
- FileEditor holds only configuration; every call is an independent session
- Returns SessionResult directly on success
- Raises EditError subclasses for every failure, before any write when the
  failure is in validation or matching
- The target is replaced in one atomic rename, or not touched at all

Flow:
    validate edits -> validate path -> check/read file -> dry-run ->
    commit -> no-change check -> diff/preview -> atomic write
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path, PurePath
from typing import Any

from pydantic import BaseModel, Field

from .applier import EditOutcome, commit, dry_run, truncate_preview
from .diffing import (
    DEFAULT_PREVIEW_LINES,
    SINGLE_EDIT_PREVIEW_LINES,
    DiffStats,
    compute_diff_stats,
    compute_unified_diff,
    find_changed_lines,
    generate_change_preview,
)
from .exceptions import (
    EditError,
    EditFileNotFoundError,
    FileCheckError,
    FileSystemError,
    InvalidOperationError,
    InvalidPathError,
    NoChangesError,
    ReasonCode,
)
from .file_checks import DEFAULT_MAX_FILE_SIZE, FileValidator, PathResolver
from .operations import EditSession, validate_operations
from .persistence import read_text, write_atomic

logger = logging.getLogger(__name__)


class SessionResult(BaseModel):
    """Outcome of a successful edit session.

    Only ever built after the dry-run pass succeeded; there is no partial
    SessionResult.
    """

    file_path: str = Field(description="Absolute path of the edited file")
    original_content: str = Field(description="Content before the session")
    final_content: str = Field(description="Content written to disk")
    outcomes: list[EditOutcome] = Field(default_factory=list, description="Per-edit outcomes")
    edits_applied: int = Field(default=0, description="Number of edits applied")
    total_replacements: int = Field(default=0, description="Occurrences replaced in total")
    diff_stats: DiffStats = Field(default_factory=DiffStats, description="Line statistics")
    preview: str = Field(default="", description="Bounded preview of changed lines")
    unified_diff: str = Field(default="", description="Unified diff of the change")
    created: bool = Field(default=False, description="True if the file was created")
    bytes_written: int = Field(default=0, description="Bytes written to the target")
    message: str = Field(default="", description="Short summary for single-edit sessions")
    changed_lines: list[int] | None = Field(
        default=None, description="Up to 10 line numbers containing the replacement"
    )
    total_changed_lines: int | None = Field(
        default=None, description="Number of lines containing the replacement"
    )

    def to_response(self, include_content: bool = False) -> dict[str, Any]:
        """Build the payload returned to tool callers.

        Args:
            include_content: Also return original/final content and the unified diff

        Returns:
            JSON-serializable dict
        """
        response: dict[str, Any] = {
            "status": "success",
            "file_path": self.file_path,
            "created": self.created,
            "edits_applied": self.edits_applied,
            "total_replacements": self.total_replacements,
            "edit_results": [outcome.model_dump(mode="json") for outcome in self.outcomes],
            "diff": {
                "added": self.diff_stats.added,
                "removed": self.diff_stats.removed,
                "preview": self.preview,
            },
        }
        if self.message:
            response["message"] = self.message
        if self.changed_lines is not None:
            response["changed_lines"] = self.changed_lines
            response["total_changed_lines"] = self.total_changed_lines
        if include_content:
            response["original_content"] = self.original_content
            response["final_content"] = self.final_content
            response["unified_diff"] = self.unified_diff
        return response


class FileEditor:
    """Transactional multi-edit engine for a single file.

    Stateless and reentrant: instances hold configuration only. Callers
    that may edit the same path concurrently must serialize per path
    themselves (see PathLockRegistry).

    Example:
        editor = FileEditor()
        result = editor.apply(
            "/srv/app/settings.py",
            [
                {"search": "DEBUG = True", "replacement": "DEBUG = False"},
                {"search": "localhost", "replacement": "0.0.0.0", "replace_all": True},
            ],
        )
        print(result.preview)
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        preview_lines: int = DEFAULT_PREVIEW_LINES,
        encoding: str = "utf-8",
    ) -> None:
        self.max_file_size = max_file_size
        self.preview_lines = preview_lines
        self.encoding = encoding
        self._validator = FileValidator(max_file_size=max_file_size, encoding=encoding)

    def apply(
        self,
        path: str | PurePath,
        edits: Sequence[Any],
        preview_lines: int | None = None,
    ) -> SessionResult:
        """Apply every edit to ``path`` or change nothing.

        Args:
            path: Absolute path of the target file
            edits: Ordered edits (mappings with search/replacement/replace_all,
                or EditOperation instances). A first edit with an empty
                search creates the file with its replacement as content.
            preview_lines: Cap on preview lines (defaults to the editor's)

        Returns:
            SessionResult for the persisted change

        Raises:
            EditError: Any failure, tagged with a ReasonCode
        """
        try:
            return self._run(
                path,
                edits,
                preview_lines if preview_lines is not None else self.preview_lines,
            )
        except EditError as e:
            logger.warning(f"Edit session failed for {path} [{e.reason.value}]: {e}")
            raise

    def replace(
        self,
        path: str | PurePath,
        search: str,
        replacement: str,
        replace_all: bool = False,
    ) -> SessionResult:
        """Single find/replace session (preview capped at 10 lines).

        The result also carries a summary message and the line numbers of
        the new content that contain the replacement text.
        """
        result = self.apply(
            path,
            [{"search": search, "replacement": replacement, "replace_all": replace_all}],
            preview_lines=SINGLE_EDIT_PREVIEW_LINES,
        )

        if replace_all:
            count = result.total_replacements
            message = f"Replaced {count} occurrence{'s' if count > 1 else ''} in file"
        else:
            message = "File updated successfully"
        changed_lines, total_changed_lines = find_changed_lines(result.final_content, replacement)

        return result.model_copy(
            update={
                "message": message,
                "changed_lines": changed_lines,
                "total_changed_lines": total_changed_lines,
            }
        )

    def _run(self, path: str | PurePath, edits: Sequence[Any], preview_lines: int) -> SessionResult:
        # Structural validation happens before any file I/O
        validated = validate_operations(edits)

        path_result = PathResolver.resolve_and_validate(path)
        if not path_result.is_success:
            raise InvalidPathError(f"Invalid path: {path_result.error}")
        assert path_result.value is not None
        session = EditSession(target_path=path_result.value, edits=validated)
        target = session.target_path

        logger.info(f"Edit session started: {target} ({validated.total} edits)")

        created = not target.exists()
        if created:
            if validated.create_content is None:
                raise EditFileNotFoundError(f"File not found: {target}")
            original = ""
            base = validated.create_content
        else:
            if validated.create_content is not None:
                raise InvalidOperationError(
                    "search text cannot be empty when the file already exists", index=0
                )
            original = self._read(target)
            base = original

        # Dry-run over the full chain, then commit the identical chain
        planned = dry_run(base, session.operations, validated.first_index)
        committed = commit(base, session.operations, planned, validated.first_index)
        final = committed.final_content

        if not created and final == original:
            raise NoChangesError("No changes were made to the file")

        outcomes = list(committed.outcomes)
        if created:
            outcomes.insert(
                0,
                EditOutcome(
                    index=0,
                    search_preview="",
                    replacement_preview=truncate_preview(validated.create_content),
                ),
            )

        stats = compute_diff_stats(original, final)
        preview = generate_change_preview(original, final, preview_lines)
        unified = compute_unified_diff(original, final, str(target))

        try:
            bytes_written = write_atomic(
                target, final, encoding=self.encoding, create_parents=created
            )
        except (OSError, UnicodeError) as e:
            raise FileSystemError.from_os_error(e, target) from e

        logger.info(
            f"Edit session committed: {target} "
            f"({len(outcomes)} edits, {committed.total_replacements} replacements, "
            f"+{stats.added}/-{stats.removed} lines)"
        )

        return SessionResult(
            file_path=str(target),
            original_content=original,
            final_content=final,
            outcomes=outcomes,
            edits_applied=len(outcomes),
            total_replacements=committed.total_replacements,
            diff_stats=stats,
            preview=preview,
            unified_diff=unified,
            created=created,
            bytes_written=bytes_written,
        )

    def _read(self, target: Path) -> str:
        check = self._validator.check(target)
        if not check.is_success:
            reason = check.reason or ReasonCode.IO_ERROR
            raise FileCheckError(check.error or "File check failed", reason=reason)

        try:
            return read_text(target, encoding=self.encoding)
        except (OSError, UnicodeError) as e:
            raise FileSystemError.from_os_error(e, target) from e


def edit_file(path: str | PurePath, edits: Sequence[Any], **editor_options: Any) -> SessionResult:
    """Run one edit session with a throwaway FileEditor.

    Args:
        path: Absolute path of the target file
        edits: Ordered edits
        **editor_options: FileEditor keyword arguments

    Returns:
        SessionResult
    """
    return FileEditor(**editor_options).apply(path, edits)
