"""File I/O for edit sessions: exact reads and atomic writes.

Unlike the check helpers, these functions raise the underlying OSError
(or UnicodeError) unchanged. The orchestrator re-tags them as
FileSystemError with a reason code.
"""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


def temp_path_for(path: Path) -> Path:
    """Sibling temp path, same directory so the rename stays on one filesystem."""
    return path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex[:12]}")


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """Read file content without newline translation.

    ``\\r\\n`` and lone ``\\r`` survive the read so untouched lines are
    written back byte-for-byte.

    Raises:
        OSError: File cannot be read
        UnicodeDecodeError: Content is not valid in ``encoding``
    """
    with open(path, encoding=encoding, newline="") as f:
        return f.read()


def _cleanup(temp_path: Path) -> None:
    try:
        temp_path.unlink()
    except OSError as e:
        logger.debug(f"Ignoring temp file cleanup failure for {temp_path}: {e}")


def write_atomic(
    path: Path,
    content: str,
    encoding: str = "utf-8",
    create_parents: bool = False,
) -> int:
    """Replace ``path`` with ``content`` in one rename.

    The target either keeps its old content or holds the complete new
    content. On any failure the temp file is removed (best-effort) and the
    original error propagates.

    Args:
        path: Target file path
        content: Complete new content
        encoding: Text encoding
        create_parents: Create missing parent directories first

    Returns:
        Number of bytes written

    Raises:
        OSError: Write or rename failed
        UnicodeEncodeError: Content cannot be encoded
    """
    if create_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    data = content.encode(encoding)
    temp_path = temp_path_for(path)

    try:
        with open(temp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, temp_path)
    except BaseException:
        _cleanup(temp_path)
        raise

    try:
        os.replace(temp_path, path)
    except BaseException:
        _cleanup(temp_path)
        raise

    logger.debug(f"Atomically wrote {len(data)} bytes to {path}")
    return len(data)
