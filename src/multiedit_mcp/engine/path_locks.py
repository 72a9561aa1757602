"""Per-path locks for serialized edit sessions.

The edit engine itself never locks. Callers that can run several sessions
against the same file at once (the MCP server) take the lock for the
target's canonical path around each session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)


class PathLockRegistry:
    """Keyed asyncio locks, one per canonical file path.

    Architecture:
    - Locks are created on first use and dropped once no session holds or
      waits for them, so the registry does not grow with every path ever edited
    - Sessions on different paths never block each other
    - Sessions on the same path run one at a time, in arrival order

    Usage:
        locks = PathLockRegistry()

        async with locks.lock("/srv/app/settings.py"):
            result = await asyncio.to_thread(editor.apply, path, edits)
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}
        self._stats = {
            "total_acquisitions": 0,
            "contended_acquisitions": 0,
        }

    @staticmethod
    def canonical_key(path: str | PurePath) -> str:
        """Canonical form of ``path`` used as the lock key."""
        return str(Path(path).resolve(strict=False))

    @asynccontextmanager
    async def lock(self, path: str | PurePath) -> AsyncIterator[None]:
        """Hold the lock for ``path`` for the duration of the block."""
        key = self.canonical_key(path)
        path_lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1

        if path_lock.locked():
            self._stats["contended_acquisitions"] += 1
            logger.debug(f"Waiting for in-flight edit session on {key}")

        try:
            async with path_lock:
                self._stats["total_acquisitions"] += 1
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def get_stats(self) -> dict[str, int]:
        """Get lock statistics."""
        return {
            **self._stats,
            "active_paths": len(self._locks),
        }
