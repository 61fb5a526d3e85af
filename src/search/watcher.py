from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from src.errors import DocsError
from src.ingest.parser import discover_documents

logger = logging.getLogger(__name__)


Fingerprint = Dict[str, int]


class StalenessChecker:
    """Poll source-file modification times and trigger a debounced rebuild.

    A change (edit, addition or deletion) marks the tree dirty; the rebuild
    callback fires once the tree has been quiet for ``debounce_seconds``.
    """

    def __init__(
        self,
        root: Path,
        rebuild: Callable[[], object],
        *,
        suffixes: Iterable[str] = (".md",),
        poll_interval: float = 2.0,
        debounce_seconds: float = 0.5,
    ) -> None:
        self.root = Path(root)
        self.rebuild = rebuild
        self.suffixes = tuple(suffixes)
        self.poll_interval = poll_interval
        self.debounce_seconds = debounce_seconds
        self._fingerprint: Fingerprint = self.fingerprint()
        self._dirty_since: Optional[float] = None
        self._task: asyncio.Task[None] | None = None

    def fingerprint(self) -> Fingerprint:
        snapshot: Fingerprint = {}
        for path in discover_documents(self.root, self.suffixes):
            try:
                snapshot[path.relative_to(self.root).as_posix()] = path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return snapshot

    def check(self) -> bool:
        """Return True when the source tree differs from the last observed state."""

        current = self.fingerprint()
        changed = current != self._fingerprint
        self._fingerprint = current
        return changed

    def poll_once(self, now: float | None = None) -> bool:
        """Run one polling step; returns True when a rebuild was triggered."""

        now = time.monotonic() if now is None else now
        if self.check():
            self._dirty_since = now
            return False
        if self._dirty_since is None or now - self._dirty_since < self.debounce_seconds:
            return False
        self._dirty_since = None
        logger.info("Docs changed under %s, rebuilding search index", self.root)
        self.rebuild()
        return True

    # ------------------------------------------------------------------ background task
    def start(self) -> None:
        if self._task is None or self._task.done():
            logger.info("Watching %s for changes every %.1fs", self.root, self.poll_interval)
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await asyncio.to_thread(self.poll_once)
            except DocsError as exc:
                logger.error("Error checking for doc changes: %s", exc)


__all__ = ["StalenessChecker"]
