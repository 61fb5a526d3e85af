from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from src.errors import QueryError
from src.search.storage import SEARCH_FIELDS


_WORD_PATTERN = re.compile(r"\w")


@dataclass(slots=True)
class QueryTerm:
    text: str
    field: Optional[str] = None
    prefix: bool = False

    def to_fts(self) -> str:
        phrase = '"' + self.text.replace('"', '""') + '"'
        if self.prefix:
            phrase += " *"
        if self.field:
            return f"{self.field} : {phrase}"
        return phrase


@dataclass(slots=True)
class ParsedQuery:
    """Free-text query split by presence: optional, required (``+``) and excluded (``-``)."""

    raw: str
    optional: List[QueryTerm] = field(default_factory=list)
    required: List[QueryTerm] = field(default_factory=list)
    excluded: List[QueryTerm] = field(default_factory=list)

    @property
    def highlight_terms(self) -> List[str]:
        seen: List[str] = []
        for term in [*self.required, *self.optional]:
            lowered = term.text.lower()
            if lowered not in seen:
                seen.append(lowered)
        return seen

    @property
    def exclusions_only(self) -> bool:
        return not self.optional and not self.required

    def to_fts(self) -> str:
        """Translate to an FTS5 MATCH expression.

        Optional terms are OR-combined. When required terms are present they alone
        decide matching and optional terms only add to the bm25 score; excluded
        terms are subtracted with NOT.
        """

        if self.exclusions_only:
            raise QueryError(self.raw, "no positive terms; use exclusion_fts()")
        if self.required:
            expression = " AND ".join(term.to_fts() for term in self.required)
            if self.optional:
                # every match already contains the first required term
                boost = " OR ".join(term.to_fts() for term in [self.required[0], *self.optional])
                expression = f"{expression} AND ({boost})"
        else:
            expression = " OR ".join(term.to_fts() for term in self.optional)
        for term in self.excluded:
            expression = f"({expression}) NOT {term.to_fts()}"
        return expression

    def exclusion_fts(self) -> str:
        """MATCH expression for the documents an exclusion-only query removes."""

        return " OR ".join(term.to_fts() for term in self.excluded)


def parse_query(query: str) -> ParsedQuery:
    """Split a free-text query into presence buckets.

    A query made only of ``-term`` exclusions is valid and selects every
    document except the excluded ones.
    """

    try:
        query.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise QueryError(query, "query is not valid UTF-8 text") from exc

    parsed = ParsedQuery(raw=query)
    for token in query.split():
        bucket = parsed.optional
        if token[0] in "+-":
            bucket = parsed.required if token[0] == "+" else parsed.excluded
            token = token[1:]
            if not token:
                raise QueryError(query, "operator without a term")

        field_name: Optional[str] = None
        if ":" in token:
            field_name, _, token = token.partition(":")
            field_name = field_name.lower()
            if field_name not in SEARCH_FIELDS:
                raise QueryError(query, f"unknown field '{field_name}'")
            if not token:
                raise QueryError(query, f"field '{field_name}' without a term")

        prefix = token.endswith("*")
        token = token.rstrip("*")
        if not _WORD_PATTERN.search(token):
            if prefix:
                raise QueryError(query, "wildcard without a term")
            continue
        bucket.append(QueryTerm(text=token, field=field_name, prefix=prefix))

    if parsed.exclusions_only and not parsed.excluded:
        raise QueryError(query, "no searchable terms")
    return parsed


__all__ = ["ParsedQuery", "QueryTerm", "parse_query"]
