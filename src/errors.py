from __future__ import annotations

from pathlib import Path


class DocsError(Exception):
    """Base class for documentation ingestion and search failures."""


class NotFoundError(DocsError):
    """Raised when a document, category or source file does not exist."""

    def __init__(self, path: str | Path, message: str | None = None) -> None:
        self.path = str(path)
        super().__init__(message or f"Document not found: {self.path}")


class ParseError(DocsError):
    """Raised when a source file has malformed front-matter or cannot be decoded."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to parse {self.path}: {reason}")


class DocumentIOError(DocsError, OSError):
    """Raised when the documentation root (or a file in it) cannot be read."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


class QueryError(DocsError):
    """Raised when a search query cannot be translated for the ranking engine."""

    def __init__(self, query: str, reason: str) -> None:
        self.query = query
        self.reason = reason
        super().__init__(f"Invalid search query {query!r}: {reason}")


__all__ = ["DocsError", "DocumentIOError", "NotFoundError", "ParseError", "QueryError"]
