"""Edit session exceptions.

Every failure of an edit session is terminal and non-retryable. Each
exception carries a ReasonCode so callers (MCP tools, tests) can branch
on the failure kind without parsing messages.
"""

from __future__ import annotations

import errno
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .applier import EditOutcome


class ReasonCode(str, Enum):
    """Reason codes reported verbatim to callers."""

    INVALID_OPERATION = "INVALID_OPERATION"
    INVALID_PATH = "INVALID_PATH"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    SEARCH_NOT_FOUND = "SEARCH_NOT_FOUND"
    AMBIGUOUS_MATCH = "AMBIGUOUS_MATCH"
    NO_CHANGES = "NO_CHANGES"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    IS_A_DIRECTORY = "IS_A_DIRECTORY"
    NO_SPACE = "NO_SPACE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    BINARY_FILE = "BINARY_FILE"
    ENCODING_ERROR = "ENCODING_ERROR"
    IO_ERROR = "IO_ERROR"


class EditError(Exception):
    """
    Base class for all edit session failures.

    Attributes:
        reason: Reason code for the failure
        message: Human-readable description
        index: Index of the failing operation (None for session-level failures)
        context: Short excerpt of the file content near the failure, if any
        outcomes: Per-operation outcomes recorded before the failure
    """

    reason: ReasonCode = ReasonCode.IO_ERROR

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        context: str | None = None,
        reason: ReasonCode | None = None,
    ):
        self.message = message
        self.index = index
        self.context = context
        if reason is not None:
            self.reason = reason
        self.outcomes: list[EditOutcome] = []

        prefix = f"Edit {index}: " if index is not None else ""
        super().__init__(f"{prefix}{message}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the structured error payload returned to callers."""
        payload: dict[str, Any] = {
            "status": "failure",
            "reason": self.reason.value,
            "error": str(self),
        }
        if self.index is not None:
            payload["index"] = self.index
        if self.context:
            payload["context"] = self.context
        if self.outcomes:
            payload["outcomes"] = [outcome.model_dump(mode="json") for outcome in self.outcomes]
        return payload

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(reason={self.reason.value}, index={self.index!r})"


class InvalidOperationError(EditError):
    """Structural validation failure (empty search, search == replacement, bad shape)."""

    reason = ReasonCode.INVALID_OPERATION


class InvalidPathError(EditError):
    """Target path is relative, contains traversal segments, or is a symlink."""

    reason = ReasonCode.INVALID_PATH


class EditFileNotFoundError(EditError):
    """Target does not exist and the session does not carry a create intent."""

    reason = ReasonCode.FILE_NOT_FOUND


class SearchNotFoundError(EditError):
    """Search text is absent from the content at that point in the chain."""

    reason = ReasonCode.SEARCH_NOT_FOUND


class AmbiguousMatchError(EditError):
    """Search text occurs more than once and replace_all was not requested.

    Attributes:
        occurrences: Number of occurrences found
    """

    reason = ReasonCode.AMBIGUOUS_MATCH

    def __init__(self, message: str, *, occurrences: int, **kwargs: Any):
        self.occurrences = occurrences
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["occurrences"] = self.occurrences
        return payload


class NoChangesError(EditError):
    """The full chain produced content identical to the original."""

    reason = ReasonCode.NO_CHANGES


class FileCheckError(EditError):
    """Pre-flight file check failure (too large, binary, not a regular file)."""


class FileSystemError(EditError):
    """Underlying filesystem error re-tagged with a reason code.

    The original exception is kept as ``__cause__`` and in ``os_error``.
    """

    def __init__(self, message: str, *, os_error: BaseException | None = None, **kwargs: Any):
        self.os_error = os_error
        super().__init__(message, **kwargs)

    @classmethod
    def from_os_error(cls, error: BaseException, path: object) -> FileSystemError:
        """Map an OSError (or decode error) to the engine's error shape.

        Args:
            error: Exception raised by the filesystem call
            path: Path involved, for the message

        Returns:
            FileSystemError with the matching reason code
        """
        if isinstance(error, UnicodeError):
            return cls(
                f"Encoding error for '{path}': {error}",
                os_error=error,
                reason=ReasonCode.ENCODING_ERROR,
            )

        code = getattr(error, "errno", None)
        if isinstance(error, FileNotFoundError) or code == errno.ENOENT:
            reason, message = ReasonCode.FILE_NOT_FOUND, f"File or directory not found: {path}"
        elif isinstance(error, PermissionError) or code in (errno.EACCES, errno.EPERM):
            reason, message = ReasonCode.PERMISSION_DENIED, f"Permission denied: {path}"
        elif isinstance(error, IsADirectoryError) or code == errno.EISDIR:
            reason, message = ReasonCode.IS_A_DIRECTORY, f"Path is a directory, not a file: {path}"
        elif code == errno.ENOSPC:
            reason, message = ReasonCode.NO_SPACE, f"No space left on device: {path}"
        else:
            reason, message = ReasonCode.IO_ERROR, f"Failed to edit file '{path}': {error}"

        return cls(message, os_error=error, reason=reason)


class ChainMismatchError(RuntimeError):
    """Dry-run and commit passes produced different results.

    This is an internal correctness bug, never a user error.
    """
