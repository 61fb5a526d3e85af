from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional

from src.errors import NotFoundError
from src.ingest.markdown import MarkdownDocumentParser
from src.ingest.ordering import CURATED_ORDER, OrderTable, load_order_table
from src.ingest.tree import DocTreeBuilder, DocTreeBuilderConfig
from src.models.document import DocTreeNode, ParsedDocument, SearchResult
from src.search.engine import SearchEngine
from src.search.index import IndexHolder, SearchIndexBuilder
from src.search.watcher import StalenessChecker
from src.server.settings import Settings

logger = logging.getLogger(__name__)


class DocsService:
    """Entry point used by the HTTP layer: tree, search and single-document lookup."""

    def __init__(self, settings: Settings, *, order_table: OrderTable | None = None) -> None:
        self.settings = settings
        self.root = Path(settings.docs_root)
        self.parser = MarkdownDocumentParser(self.root)
        self.order_table = order_table or self._load_order_table()
        self.tree_builder = DocTreeBuilder(DocTreeBuilderConfig(order_table=self.order_table))
        self.holder = IndexHolder(self.root, SearchIndexBuilder())
        self.engine = SearchEngine(self.holder)
        self.watcher: Optional[StalenessChecker] = None

    # ------------------------------------------------------------------ lifecycle
    async def start(self) -> None:
        logger.info("Building search index for %s", self.root)
        try:
            await asyncio.to_thread(self.holder.rebuild)
        except OSError:
            logger.exception("Failed to build search index for %s", self.root)
            raise
        if self.settings.watch_enabled:
            self.watcher = StalenessChecker(
                self.root,
                self.holder.rebuild,
                suffixes=self.parser.config.suffixes,
                poll_interval=self.settings.poll_interval_seconds,
                debounce_seconds=self.settings.debounce_seconds,
            )
            self.watcher.start()

    async def stop(self) -> None:
        if self.watcher is not None:
            await self.watcher.stop()
            self.watcher = None
        self.holder.close()

    # ------------------------------------------------------------------ public API
    def tree(self) -> List[DocTreeNode]:
        return self.tree_builder.build(self.root)

    def search(self, query: str, limit: int | None = None) -> List[SearchResult]:
        if not self.holder.ready:
            self.holder.rebuild()
        limit = self.settings.default_search_limit if limit is None else limit
        return self.engine.search(query, limit=min(limit, self.settings.max_search_limit))

    def get_document(self, path: str) -> ParsedDocument:
        """Resolve a tree path to a parsed document.

        A bare category path resolves to that category's index document.
        """

        doc_id = self._normalize(path)
        index = self.holder.current()
        if index is not None:
            cached = index.get(doc_id)
            if cached is not None:
                return cached

        config = self.parser.config
        candidates = [self.root / f"{doc_id}{suffix}" for suffix in config.suffixes]
        candidates += [self.root / doc_id / f"{config.index_stem}{suffix}" for suffix in config.suffixes]
        for candidate in candidates:
            if candidate.is_file() and self._inside_root(candidate):
                return self.parser.parse(candidate)
        raise NotFoundError(doc_id)

    # ------------------------------------------------------------------ helpers
    def _normalize(self, path: str) -> str:
        cleaned = path.strip().strip("/")
        parts = PurePosixPath(cleaned).parts
        if not cleaned or any(part in {"..", "."} for part in parts):
            raise NotFoundError(path or "<empty>")
        return "/".join(parts)

    def _inside_root(self, candidate: Path) -> bool:
        return candidate.resolve().is_relative_to(self.root.resolve())

    def _load_order_table(self) -> OrderTable:
        if self.settings.order_file is None:
            return CURATED_ORDER
        return load_order_table(self.settings.order_file)


__all__ = ["DocsService"]
