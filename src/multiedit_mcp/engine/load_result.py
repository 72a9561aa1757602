"""LoadResult for path and file pre-flight checks.

This is a small error monad used by the path/file checking layer
(PathResolver, FileValidator). It is NOT used for edit sessions.

Edit sessions return SessionResult directly and raise EditError subclasses.
The orchestrator converts a failed LoadResult into the matching EditError
using the reason stored in ``metadata["reason"]``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class LoadStatus(str, Enum):
    """Status of a check operation."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class LoadResult(Generic[T]):  # noqa: UP046
    """
    Outcome of a non-raising check: a value on success, a message and
    reason metadata on failure.

    Usage:
        path_result = PathResolver.resolve_and_validate("/tmp/file.txt")
        if path_result.is_success:
            path = path_result.value
        else:
            print(f"Invalid path: {path_result.error}")
    """

    status: LoadStatus
    value: T | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate state consistency after initialization.

        - SUCCESS results must have a value
        - FAILED results must have an error message
        """
        if self.status == LoadStatus.SUCCESS and self.value is None:
            raise ValueError("Success result must have a value")
        if self.status == LoadStatus.FAILED and not self.error:
            raise ValueError("Failed result must have an error message")

    @property
    def is_success(self) -> bool:
        """Check if the check passed."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Check if the check failed."""
        return self.status == LoadStatus.FAILED

    @classmethod
    def success(cls, value: T, metadata: dict[str, Any] | None = None) -> "LoadResult[T]":
        """Create a successful result."""
        return cls(
            status=LoadStatus.SUCCESS,
            value=value,
            metadata=metadata or {},
        )

    @classmethod
    def failure(cls, error: str, metadata: dict[str, Any] | None = None) -> "LoadResult[T]":
        """Create a failed result.

        Args:
            error: Error message describing the failure
            metadata: Optional metadata (e.g. ``{"reason": ReasonCode.INVALID_PATH}``)

        Returns:
            LoadResult with FAILED status and the error message
        """
        return cls(
            status=LoadStatus.FAILED,
            error=error,
            metadata=metadata or {},
        )

    @property
    def reason(self) -> Any:
        """ReasonCode stored by the failing check, if any."""
        return self.metadata.get("reason")
