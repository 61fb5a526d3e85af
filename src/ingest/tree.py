from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from src.errors import DocumentIOError, NotFoundError, ParseError
from src.ingest.markdown import MarkdownDocumentParser, MarkdownParserConfig
from src.ingest.ordering import OrderTable
from src.ingest.parser import DocumentParser
from src.ingest.utils import humanize_category, humanize_slug
from src.models.document import DEFAULT_ORDER, DocMeta, DocTreeNode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocTreeBuilderConfig:
    """Configuration for assembling the navigation tree."""

    order_table: OrderTable = field(default_factory=OrderTable)
    acronyms: tuple[str, ...] = ("api",)


class DocTreeBuilder:
    """Scan a docs root and assemble the ordered category/document hierarchy.

    Every call to :meth:`build` performs a fresh directory scan and fresh parses.
    """

    def __init__(
        self,
        config: DocTreeBuilderConfig | None = None,
        *,
        parser_config: MarkdownParserConfig | None = None,
    ) -> None:
        self.config = config or DocTreeBuilderConfig()
        self.parser_config = parser_config

    def build(self, root: Path) -> List[DocTreeNode]:
        parser = MarkdownDocumentParser(Path(root), self.parser_config)
        files = parser.discover()

        # ties keep the position of the first file each node was seen at
        positions: Dict[str, int] = {}
        categories: Dict[str, DocTreeNode] = {}
        for position, path in enumerate(files):
            positions.setdefault(parser.document_id(path), position)
            category, _ = parser.locate(parser.relative_path(path))
            if category and category not in categories:
                categories[category] = self._category_node(parser, category)
                positions.setdefault(category, position)

        # the root index is landing content; category indexes were consumed above
        documents = [path for path in files if not parser.is_index(parser.relative_path(path))]

        tree: List[DocTreeNode] = []
        for path, parsed in parser.parse_many(documents):
            category = parsed.meta.category
            meta = replace(parsed.meta, order=self._document_order(parsed.meta))
            node = DocTreeNode(name=meta.title, path=parser.document_id(path), meta=meta)

            if not category:
                tree.append(node)
                continue
            parent = categories.get(category)
            if parent is None:  # pragma: no cover
                logger.warning("No category node for %s; skipping", path)
                continue
            assert parent.children is not None
            parent.children.append(node)

        tree.extend(categories.values())

        def order_key(node: DocTreeNode) -> tuple[int, int]:
            return node.meta.order, positions.get(node.path, len(files))

        tree.sort(key=order_key)
        for node in tree:
            if node.children:
                node.children.sort(key=order_key)
        return tree

    # ------------------------------------------------------------------ helpers
    def _category_node(self, parser: DocumentParser, category: str) -> DocTreeNode:
        table = self.config.order_table
        curated = table.category_order(category)
        meta = DocMeta(
            title=humanize_category(category, self.config.acronyms),
            category=category,
            slug=category,
            order=DEFAULT_ORDER if curated is None else curated,
        )

        index_path = self._index_path(parser, category)
        if index_path is not None:
            try:
                index = parser.parse(index_path)
            except NotFoundError:
                pass
            except (ParseError, DocumentIOError) as exc:
                logger.warning("Ignoring index document for category %s: %s", category, exc)
            else:
                # an untitled index document keeps the directory-derived name
                untitled = index.meta.title == humanize_slug(index.meta.slug)
                meta = replace(
                    index.meta,
                    title=meta.title if untitled else index.meta.title,
                    category=category,
                    slug=category,
                    order=index.meta.order if curated is None else curated,
                )

        return DocTreeNode(name=meta.title, path=category, meta=meta, children=[])

    def _index_path(self, parser: DocumentParser, category: str) -> Optional[Path]:
        for suffix in parser.config.suffixes:
            candidate = parser.root / category / f"{parser.config.index_stem}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def _document_order(self, meta: DocMeta) -> int:
        curated = self.config.order_table.document_order(meta.category, meta.slug)
        return meta.order if curated is None else curated


__all__ = ["DocTreeBuilder", "DocTreeBuilderConfig"]
