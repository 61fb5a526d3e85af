from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Optional

from src.ingest.markdown import MarkdownDocumentParser, MarkdownParserConfig
from src.search.storage import SearchIndex, SearchIndexConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexBuildResult:
    """Summarizes one index build."""

    documents_indexed: int
    documents_skipped: int
    duration_ms: float


class SearchIndexBuilder:
    """Parse every source file under a docs root into a fresh SearchIndex."""

    def __init__(
        self,
        config: SearchIndexConfig | None = None,
        *,
        parser_config: MarkdownParserConfig | None = None,
    ) -> None:
        self.config = config or SearchIndexConfig()
        self.parser_config = parser_config
        self.last_result: Optional[IndexBuildResult] = None

    def build(self, root: Path) -> SearchIndex:
        started = perf_counter()
        parser = MarkdownDocumentParser(Path(root), self.parser_config)
        files = parser.discover()

        index = SearchIndex(self.config)
        for path, parsed in parser.parse_many(files):
            index.add(parser.document_id(path), parsed)
        index.commit()

        self.last_result = IndexBuildResult(
            documents_indexed=len(index),
            documents_skipped=len(files) - len(index),
            duration_ms=(perf_counter() - started) * 1000,
        )
        logger.info(
            "Search index built with %d documents (%d skipped) in %.1f ms",
            self.last_result.documents_indexed,
            self.last_result.documents_skipped,
            self.last_result.duration_ms,
        )
        return index


class IndexHolder:
    """Owns the published SearchIndex for a docs root.

    Readers call :meth:`current`; a rebuild constructs a new index off to the side
    and publishes it with a single reference assignment. Rebuild requests that
    arrive while a build is running are folded into one follow-up build.
    """

    def __init__(self, root: Path, builder: SearchIndexBuilder | None = None) -> None:
        self.root = Path(root)
        self.builder = builder or SearchIndexBuilder()
        self._index: Optional[SearchIndex] = None
        self._state_lock = threading.Lock()
        self._building = False
        self._dirty = False
        self.generation = 0

    @property
    def ready(self) -> bool:
        return self._index is not None

    def current(self) -> Optional[SearchIndex]:
        return self._index

    def rebuild(self) -> bool:
        """Build and publish a new index.

        Returns ``False`` when another thread was already building; that build
        runs once more before it returns so this request is not lost.
        """

        with self._state_lock:
            if self._building:
                self._dirty = True
                return False
            self._building = True

        try:
            while True:
                index = self.builder.build(self.root)
                with self._state_lock:
                    self._index = index
                    self.generation += 1
                    if not self._dirty:
                        self._building = False
                        return True
                    self._dirty = False
                logger.debug("Rebuild requested during build; rebuilding %s again", self.root)
        except BaseException:
            with self._state_lock:
                self._building = False
                self._dirty = False
            raise

    def close(self) -> None:
        """Unpublish and close the current index.

        Superseded snapshots are left to readers that may still hold them; only the
        published one is closed here, at shutdown.
        """

        with self._state_lock:
            index, self._index = self._index, None
        if index is not None:
            index.close()


__all__ = ["IndexBuildResult", "IndexHolder", "SearchIndexBuilder"]
