from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml

from src.errors import NotFoundError, ParseError


@dataclass(frozen=True, slots=True)
class OrderTable:
    """Curated display order for categories and for documents within a category.

    ``documents[""]`` pins root-level documents.
    """

    categories: Mapping[str, int] = field(default_factory=dict)
    documents: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    def category_order(self, category: str) -> Optional[int]:
        return self.categories.get(category)

    def document_order(self, category: str, slug: str) -> Optional[int]:
        return self.documents.get(category, {}).get(slug)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OrderTable":
        categories = data.get("categories") or {}
        documents = data.get("documents") or {}
        if not isinstance(categories, Mapping) or not isinstance(documents, Mapping):
            raise ValueError("order table must map 'categories' and 'documents' to mappings")
        try:
            return cls(
                categories=MappingProxyType({str(name): int(order) for name, order in categories.items()}),
                documents=MappingProxyType(
                    {
                        "" if category is None else str(category): MappingProxyType(
                            {str(slug): int(order) for slug, order in (slugs or {}).items()}
                        )
                        for category, slugs in documents.items()
                    }
                ),
            )
        except (TypeError, ValueError, AttributeError) as exc:
            raise ValueError(f"invalid order table: {exc}") from exc


def load_order_table(path: Path) -> OrderTable:
    """Load an order table from YAML (``categories:`` and ``documents:`` mappings)."""

    if not path.exists():
        raise NotFoundError(path, f"Order table not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ParseError(path, f"invalid YAML ({exc})") from exc
    if data is None:
        return OrderTable()
    if not isinstance(data, Mapping):
        raise ParseError(path, "order table must contain a mapping at the top level")
    try:
        return OrderTable.from_mapping(data)
    except ValueError as exc:
        raise ParseError(path, str(exc)) from exc


CURATED_ORDER = OrderTable.from_mapping(
    {
        "categories": {
            "getting-started": 1,
            "guide": 2,
            "features": 3,
            "api": 4,
            "deployment": 5,
            "advanced": 6,
        },
        "documents": {
            "getting-started": {
                "installation": 1,
                "system-requirements": 2,
                "quick-start": 3,
                "first-app": 4,
            },
            "guide": {
                "project-structure": 1,
                "configuration": 2,
                "development": 3,
                "testing": 4,
                "deployment": 5,
            },
            "features": {
                "routing": 1,
                "database": 2,
                "authentication": 3,
                "frontend": 4,
                "security": 5,
                "testing": 6,
            },
            "api": {
                "cli": 1,
                "server-api": 2,
                "middleware": 3,
                "utilities": 4,
            },
            "deployment": {
                "docker": 1,
                "railway": 2,
                "fly-io": 3,
                "vps": 4,
            },
            "advanced": {
                "customization": 1,
                "performance": 2,
                "migrations": 3,
                "security": 4,
            },
        },
    }
)


__all__ = ["CURATED_ORDER", "OrderTable", "load_order_table"]
