from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from src.models.document import DocMeta, DocTreeNode, Heading, ParsedDocument, SearchResult


class DocMetaModel(BaseModel):
    title: str
    description: Optional[str] = None
    order: int = 999
    tags: List[str] = Field(default_factory=list)
    category: str = ""
    slug: str = ""

    @classmethod
    def from_meta(cls, meta: DocMeta) -> "DocMetaModel":
        return cls(**meta.to_dict())


class DocTreeNodeModel(BaseModel):
    name: str
    path: str
    meta: DocMetaModel
    children: Optional[List["DocTreeNodeModel"]] = None

    @classmethod
    def from_node(cls, node: DocTreeNode) -> "DocTreeNodeModel":
        return cls(
            name=node.name,
            path=node.path,
            meta=DocMetaModel.from_meta(node.meta),
            children=None if node.children is None else [cls.from_node(child) for child in node.children],
        )


class TreeResponse(BaseModel):
    tree: List[DocTreeNodeModel]


class HeadingModel(BaseModel):
    text: str
    level: int
    id: str

    @classmethod
    def from_heading(cls, heading: Heading) -> "HeadingModel":
        return cls(text=heading.text, level=heading.level, id=heading.id)


class DocumentResponse(BaseModel):
    meta: DocMetaModel
    html: str
    headings: List[HeadingModel] = Field(default_factory=list)
    excerpt: str = ""

    @classmethod
    def from_document(cls, doc: ParsedDocument) -> "DocumentResponse":
        return cls(
            meta=DocMetaModel.from_meta(doc.meta),
            html=doc.html,
            headings=[HeadingModel.from_heading(heading) for heading in doc.headings],
            excerpt=doc.excerpt,
        )


class HighlightsModel(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class SearchResultModel(BaseModel):
    ref: str
    score: float
    title: str
    description: Optional[str] = None
    excerpt: str
    category: Optional[str] = None
    highlights: HighlightsModel = Field(default_factory=HighlightsModel)

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultModel":
        return cls(
            ref=result.ref,
            score=result.score,
            title=result.title,
            description=result.description,
            excerpt=result.excerpt,
            category=result.category,
            highlights=HighlightsModel(
                title=result.highlights.title,
                content=result.highlights.content,
            ),
        )


class SearchResponse(BaseModel):
    results: List[SearchResultModel]
    query: str


__all__ = [
    "DocMetaModel",
    "DocTreeNodeModel",
    "DocumentResponse",
    "HeadingModel",
    "HighlightsModel",
    "SearchResponse",
    "SearchResultModel",
    "TreeResponse",
]
