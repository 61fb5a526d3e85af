from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from src.errors import DocsError, QueryError
from src.models.document import ParsedDocument, SearchHighlights, SearchResult
from src.search.index import IndexHolder
from src.search.query import parse_query

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchEngineConfig:
    context_chars: int = 80
    ellipsis: str = "..."
    mark_open: str = "<mark>"
    mark_close: str = "</mark>"


class SearchEngine:
    """Run ranked queries against the published index and build highlighted snippets."""

    def __init__(self, holder: IndexHolder, config: SearchEngineConfig | None = None) -> None:
        self.holder = holder
        self.config = config or SearchEngineConfig()

    def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        if not query or not query.strip() or limit < 1:
            return []
        index = self.holder.current()
        if index is None:
            logger.warning("Search requested before the index was built")
            return []

        try:
            parsed = parse_query(query)
            if parsed.exclusions_only:
                hits = index.search_excluding(parsed.exclusion_fts(), limit=limit)
            else:
                hits = index.search(parsed.to_fts(), limit=limit)
        except QueryError as exc:
            logger.debug("Returning no results: %s", exc)
            return []

        terms = parsed.highlight_terms
        results: List[SearchResult] = []
        for hit in hits:
            doc = index.get(hit.ref)
            if doc is None:
                raise DocsError(f"Indexed document missing from side-table: {hit.ref}")
            highlights = SearchHighlights(
                title=self.highlight_title(doc.meta.title, terms),
                content=self.highlight_content(doc, terms),
            )
            results.append(
                SearchResult(
                    ref=hit.ref,
                    score=hit.score,
                    title=doc.meta.title,
                    description=doc.meta.description,
                    excerpt=highlights.content or doc.excerpt,
                    category=doc.meta.category,
                    highlights=highlights,
                )
            )
        return results

    # ------------------------------------------------------------------ highlighting
    def highlight_title(self, title: str, terms: Sequence[str]) -> Optional[str]:
        highlighted = self._mark(title, terms)
        return highlighted if highlighted != title else None

    def highlight_content(self, doc: ParsedDocument, terms: Sequence[str]) -> Optional[str]:
        """Window the body around the earliest query-term match."""

        body = doc.body
        lowered = body.lower()
        match_at = -1
        match_len = 0
        for term in terms:
            position = lowered.find(term)
            if position != -1 and (match_at == -1 or position < match_at):
                match_at, match_len = position, len(term)
        if match_at == -1:
            return None

        start = max(0, match_at - self.config.context_chars)
        end = min(len(body), match_at + match_len + self.config.context_chars)
        window = f"{self.config.ellipsis}{body[start:end]}{self.config.ellipsis}"
        return self._mark(window, terms)

    def _mark(self, text: str, terms: Sequence[str]) -> str:
        pattern = _terms_pattern(terms)
        if pattern is None:
            return text
        return pattern.sub(lambda m: f"{self.config.mark_open}{m.group(0)}{self.config.mark_close}", text)


def _terms_pattern(terms: Sequence[str]) -> Optional[re.Pattern[str]]:
    cleaned = sorted({term for term in terms if term}, key=len, reverse=True)
    if not cleaned:
        return None
    return re.compile("|".join(re.escape(term) for term in cleaned), re.IGNORECASE)


__all__ = ["SearchEngine", "SearchEngineConfig"]
