"""Ingestion utilities for turning a docs tree into parsed documents and navigation."""

from .parser import DocumentParser, DocumentParserConfig, discover_documents
from .markdown import MarkdownDocumentParser, MarkdownParserConfig
from .ordering import CURATED_ORDER, OrderTable, load_order_table
from .tree import DocTreeBuilder, DocTreeBuilderConfig

__all__ = [
    "CURATED_ORDER",
    "DocTreeBuilder",
    "DocTreeBuilderConfig",
    "DocumentParser",
    "DocumentParserConfig",
    "MarkdownDocumentParser",
    "MarkdownParserConfig",
    "OrderTable",
    "discover_documents",
    "load_order_table",
]
