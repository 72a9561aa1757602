"""Pre-flight path and file checks for edit sessions.

All checks return LoadResult instead of raising. A failed result stores
the matching ReasonCode in ``metadata["reason"]`` so the orchestrator can
raise the right EditError.
"""

import codecs
from pathlib import Path, PurePath

from pydantic import BaseModel, Field

from .exceptions import FileSystemError, ReasonCode
from .load_result import LoadResult

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
BINARY_SNIFF_BYTES = 8192


class PathResolver:
    """Path validation for edit targets.

    Rejects:
    - Empty paths and paths containing null bytes
    - Relative paths (targets must be absolute)
    - Any ``..`` segment (path traversal)
    - Symlinks as the target itself
    """

    @staticmethod
    def resolve_and_validate(path: str | PurePath) -> LoadResult[Path]:
        """Validate and normalize an edit target path.

        Args:
            path: Absolute file path

        Returns:
            LoadResult.success(absolute_path) or LoadResult.failure(error_message)

        Example:
            result = PathResolver.resolve_and_validate("/srv/app/config.yaml")
            if result.is_success:
                target = result.value
        """
        invalid = {"reason": ReasonCode.INVALID_PATH}
        raw = str(path)

        if not raw:
            return LoadResult.failure("Path must be a non-empty string", invalid)

        if "\0" in raw:
            return LoadResult.failure("Path contains null bytes", invalid)

        file_path = Path(raw)

        if not file_path.is_absolute():
            return LoadResult.failure(f"Path must be absolute, got: {raw}", invalid)

        if ".." in file_path.parts:
            return LoadResult.failure(f"Path traversal detected: {raw}", invalid)

        if file_path.is_symlink():
            return LoadResult.failure(f"Symlinks not allowed for security: {file_path}", invalid)

        return LoadResult.success(file_path)


class FileInfo(BaseModel):
    """Metadata gathered while checking an existing target."""

    path: str = Field(description="Absolute file path")
    size_bytes: int = Field(description="File size in bytes")


class FileValidator:
    """Checks an existing target before it is read.

    - Must be a regular file
    - Must not exceed ``max_file_size`` bytes
    - Must not look binary (NUL character in the first 8 KiB)

    For ASCII-compatible encodings the NUL check runs on raw bytes. Other
    encodings (UTF-16, UTF-32) carry NUL bytes in ordinary text, so the
    head is decoded first and checked for a NUL character instead.
    """

    def __init__(
        self, max_file_size: int = DEFAULT_MAX_FILE_SIZE, encoding: str = "utf-8"
    ) -> None:
        self.max_file_size = max_file_size
        self.encoding = encoding

    def check(self, path: Path) -> LoadResult[FileInfo]:
        """Validate an existing file.

        Args:
            path: Absolute path to an existing file

        Returns:
            LoadResult.success(FileInfo) or LoadResult.failure(error_message)
        """
        try:
            if path.is_dir():
                return LoadResult.failure(
                    f"Path is a directory, not a file: {path}",
                    {"reason": ReasonCode.IS_A_DIRECTORY},
                )
            if not path.is_file():
                return LoadResult.failure(
                    f"Path is not a regular file: {path}",
                    {"reason": ReasonCode.INVALID_PATH},
                )

            size = path.stat().st_size
            if size > self.max_file_size:
                return LoadResult.failure(
                    f"File size ({format_size(size)}) exceeds maximum allowed "
                    f"({format_size(self.max_file_size)})",
                    {"reason": ReasonCode.FILE_TOO_LARGE},
                )

            with path.open("rb") as f:
                head = f.read(BINARY_SNIFF_BYTES)
        except OSError as e:
            error = FileSystemError.from_os_error(e, path)
            return LoadResult.failure(str(error), {"reason": error.reason})

        if self._looks_binary(head):
            return LoadResult.failure(
                f"Cannot edit binary files: {path}",
                {"reason": ReasonCode.BINARY_FILE},
            )

        return LoadResult.success(FileInfo(path=str(path), size_bytes=size))

    def _looks_binary(self, head: bytes) -> bool:
        if is_ascii_compatible(self.encoding):
            return b"\0" in head
        decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        return "\0" in decoder.decode(head, final=False)


def is_ascii_compatible(encoding: str) -> bool:
    """Whether ASCII text encodes to the same bytes in ``encoding``."""
    try:
        return "a\n".encode(encoding).endswith(b"a\n")
    except UnicodeError:
        return False


def format_size(size: int) -> str:
    """Human-readable byte size."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{size} B"
        value /= 1024
    return f"{value:.1f} GB"
