from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_ORDER = 999


@dataclass(slots=True)
class DocMeta:
    """Front-matter metadata merged with values derived from the file location."""

    title: str
    description: Optional[str] = None
    order: int = DEFAULT_ORDER
    tags: List[str] = field(default_factory=list)
    category: str = ""
    slug: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Heading:
    text: str
    level: int
    id: str


@dataclass(slots=True)
class ParsedDocument:
    """Output of the markdown parser for a single source file."""

    meta: DocMeta
    body: str
    html: str
    headings: List[Heading] = field(default_factory=list)
    excerpt: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "html": self.html,
            "headings": [asdict(heading) for heading in self.headings],
            "excerpt": self.excerpt,
        }


@dataclass(slots=True)
class DocTreeNode:
    """Category or document entry of the navigation tree."""

    name: str
    path: str
    meta: DocMeta
    children: Optional[List["DocTreeNode"]] = None

    @property
    def is_category(self) -> bool:
        return self.children is not None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "meta": self.meta.to_dict(),
        }
        if self.children is not None:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass(slots=True)
class SearchHighlights:
    title: Optional[str] = None
    content: Optional[str] = None


@dataclass(slots=True)
class SearchResult:
    ref: str
    score: float
    title: str
    excerpt: str
    description: Optional[str] = None
    category: Optional[str] = None
    highlights: SearchHighlights = field(default_factory=SearchHighlights)

    def to_dict(self) -> Dict[str, Any]:
        highlights = {key: value for key, value in asdict(self.highlights).items() if value is not None}
        return {
            "ref": self.ref,
            "score": self.score,
            "title": self.title,
            "description": self.description,
            "excerpt": self.excerpt,
            "category": self.category,
            "highlights": highlights,
        }


__all__ = [
    "DEFAULT_ORDER",
    "DocMeta",
    "DocTreeNode",
    "Heading",
    "ParsedDocument",
    "SearchHighlights",
    "SearchResult",
]
