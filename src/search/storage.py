from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from src.errors import QueryError
from src.models.document import ParsedDocument


@dataclass(frozen=True, slots=True)
class FieldWeights:
    """bm25 column weights; title ranks highest and the raw body lowest."""

    title: float = 10.0
    description: float = 5.0
    category: float = 4.0
    headings: float = 3.0
    content: float = 1.0


SEARCH_FIELDS = ("title", "description", "headings", "content", "category")


@dataclass(slots=True)
class SearchIndexEntry:
    """Weighted text fields registered for one document."""

    id: str
    title: str
    description: str = ""
    headings: str = ""
    content: str = ""
    category: str = ""

    @classmethod
    def from_document(cls, doc_id: str, parsed: ParsedDocument) -> "SearchIndexEntry":
        return cls(
            id=doc_id,
            title=parsed.meta.title,
            description=parsed.meta.description or "",
            headings=" ".join(heading.text for heading in parsed.headings),
            content=parsed.body,
            category=parsed.meta.category,
        )


@dataclass(slots=True)
class SearchHit:
    ref: str
    score: float


@dataclass(slots=True)
class SearchIndexConfig:
    weights: FieldWeights = field(default_factory=FieldWeights)
    tokenizer: str = "porter unicode61"


class SearchIndex:
    """In-memory SQLite FTS5 index paired with the id -> ParsedDocument side-table.

    An instance is filled once by the index builder and only read afterwards;
    the pair is published and replaced as a single object.
    """

    def __init__(self, config: SearchIndexConfig | None = None) -> None:
        self.config = config or SearchIndexConfig()
        self._conn = sqlite3.connect(":memory:", check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._documents: Dict[str, ParsedDocument] = {}
        self.initialize()

    def initialize(self) -> None:
        """Create the FTS5 table."""

        self._conn.execute(
            f"""
            CREATE VIRTUAL TABLE IF NOT EXISTS documents_fts USING fts5(
                doc_id UNINDEXED,
                title,
                description,
                headings,
                content,
                category,
                tokenize='{self.config.tokenizer}'
            );
            """
        )
        self._conn.commit()

    def add(self, doc_id: str, parsed: ParsedDocument) -> None:
        entry = SearchIndexEntry.from_document(doc_id, parsed)
        with self._lock:
            if doc_id in self._documents:
                self._conn.execute("DELETE FROM documents_fts WHERE doc_id = ?;", (doc_id,))
            self._conn.execute(
                """
                INSERT INTO documents_fts(doc_id, title, description, headings, content, category)
                VALUES (?, ?, ?, ?, ?, ?);
                """,
                (
                    entry.id,
                    entry.title,
                    entry.description,
                    entry.headings,
                    entry.content,
                    entry.category,
                ),
            )
            self._documents[doc_id] = parsed

    def commit(self) -> None:
        with self._lock:
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def search(self, match_query: str, *, limit: int = 10) -> List[SearchHit]:
        """Run an FTS5 MATCH expression and return hits best-first."""

        weights = self.config.weights
        with self._lock:
            try:
                rows = self._conn.execute(
                    """
                    SELECT doc_id,
                           bm25(documents_fts, 0.0, ?, ?, ?, ?, ?) AS score
                    FROM documents_fts
                    WHERE documents_fts MATCH ?
                    ORDER BY score, doc_id
                    LIMIT ?;
                    """,
                    (
                        weights.title,
                        weights.description,
                        weights.headings,
                        weights.content,
                        weights.category,
                        match_query,
                        limit,
                    ),
                ).fetchall()
            except (sqlite3.Error, UnicodeEncodeError) as exc:
                raise QueryError(match_query, str(exc)) from exc
        # bm25() is lower-is-better
        return [SearchHit(ref=row["doc_id"], score=-float(row["score"])) for row in rows]

    def search_excluding(self, match_query: str, *, limit: int = 10) -> List[SearchHit]:
        """Return every document that does not match ``match_query``, ordered by id.

        There is no relevance signal, so each hit scores zero.
        """

        with self._lock:
            try:
                rows = self._conn.execute(
                    """
                    SELECT doc_id
                    FROM documents_fts
                    WHERE doc_id NOT IN (
                        SELECT doc_id FROM documents_fts WHERE documents_fts MATCH ?
                    )
                    ORDER BY doc_id
                    LIMIT ?;
                    """,
                    (match_query, limit),
                ).fetchall()
            except (sqlite3.Error, UnicodeEncodeError) as exc:
                raise QueryError(match_query, str(exc)) from exc
        return [SearchHit(ref=row["doc_id"], score=0.0) for row in rows]

    def get(self, doc_id: str) -> Optional[ParsedDocument]:
        return self._documents.get(doc_id)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)


__all__ = [
    "FieldWeights",
    "SEARCH_FIELDS",
    "SearchHit",
    "SearchIndex",
    "SearchIndexConfig",
    "SearchIndexEntry",
]
