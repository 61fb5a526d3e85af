"""Documentation ingestion and search package."""

from .models.document import DocMeta, DocTreeNode, ParsedDocument, SearchResult

__all__ = ["DocMeta", "DocTreeNode", "ParsedDocument", "SearchResult"]
