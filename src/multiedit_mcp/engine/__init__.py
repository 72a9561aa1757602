"""Transactional multi-edit engine.

Key Components:

- EditOperation: Immutable, validated literal find/replace operation
- validate_operations: Structural validation of a whole edit request
- resolve: Match resolution for one operation on one content snapshot
- apply_chain / dry_run / commit: Sequential application of the edit list
- compute_diff_stats / generate_change_preview: Reporting helpers
- write_atomic: Temp-file + rename persistence
- FileEditor: Session orchestrator returning SessionResult
- PathLockRegistry: Per-path serialization for concurrent callers
- EditError: Exception hierarchy with ReasonCode

Architecture:
- One session = one read, N in-memory transformations, one atomic write
- All-or-nothing: every failure is raised before the write, or the
  temp file is cleaned up and the target is left untouched
- No global state; FileEditor instances hold configuration only
"""

from .applier import ChainResult, EditOutcome, apply_chain, commit, dry_run
from .diffing import (
    DiffStats,
    compute_diff_stats,
    compute_unified_diff,
    generate_change_preview,
)
from .editor import FileEditor, SessionResult, edit_file
from .exceptions import (
    AmbiguousMatchError,
    ChainMismatchError,
    EditError,
    EditFileNotFoundError,
    FileCheckError,
    FileSystemError,
    InvalidOperationError,
    InvalidPathError,
    NoChangesError,
    ReasonCode,
    SearchNotFoundError,
)
from .file_checks import FileValidator, PathResolver
from .load_result import LoadResult
from .matcher import MatchResult, count_occurrences, find_context, resolve
from .operations import EditOperation, EditSession, ValidatedEdits, validate_operations
from .path_locks import PathLockRegistry
from .persistence import read_text, write_atomic

__all__ = [
    # Operations
    "EditOperation",
    "EditSession",
    "ValidatedEdits",
    "validate_operations",
    # Matching
    "MatchResult",
    "count_occurrences",
    "find_context",
    "resolve",
    # Application
    "ChainResult",
    "EditOutcome",
    "apply_chain",
    "commit",
    "dry_run",
    # Reporting
    "DiffStats",
    "compute_diff_stats",
    "compute_unified_diff",
    "generate_change_preview",
    # Persistence and checks
    "FileValidator",
    "LoadResult",
    "PathResolver",
    "read_text",
    "write_atomic",
    # Orchestration
    "FileEditor",
    "PathLockRegistry",
    "SessionResult",
    "edit_file",
    # Errors
    "AmbiguousMatchError",
    "ChainMismatchError",
    "EditError",
    "EditFileNotFoundError",
    "FileCheckError",
    "FileSystemError",
    "InvalidOperationError",
    "InvalidPathError",
    "NoChangesError",
    "ReasonCode",
    "SearchNotFoundError",
]
