from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Tuple

from src.errors import DocumentIOError, NotFoundError, ParseError
from src.models.document import ParsedDocument

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocumentParserConfig:
    """Configuration shared by all source document parsers."""

    suffixes: Tuple[str, ...] = (".md",)
    index_stem: str = "README"
    excerpt_length: int = 200
    encoding: str = "utf-8-sig"


def discover_documents(root: Path, suffixes: Iterable[str] = (".md",)) -> List[Path]:
    """Return every source file under ``root`` in lexicographic relative-path order.

    Hidden files and directories are ignored.
    """

    if not root.is_dir():
        raise DocumentIOError(root, "documentation root is not a readable directory")

    wanted = {suffix.lower() for suffix in suffixes}
    try:
        candidates = [
            path
            for path in root.rglob("*")
            if path.suffix.lower() in wanted
            and path.is_file()
            and not any(part.startswith(".") for part in path.relative_to(root).parts)
        ]
    except OSError as exc:
        raise DocumentIOError(root, str(exc)) from exc
    return sorted(candidates, key=lambda path: path.relative_to(root).as_posix())


class DocumentParser(ABC):
    """Abstract base class for turning source files under a docs root into ParsedDocuments."""

    def __init__(self, root: Path, config: DocumentParserConfig | None = None) -> None:
        self.root = Path(root)
        self.config = config or DocumentParserConfig()

    @abstractmethod
    def parse_text(self, text: str, relative_path: PurePosixPath) -> ParsedDocument:
        """Parse already-loaded file contents located at ``relative_path``."""

    def parse(self, path: Path | str) -> ParsedDocument:
        """Read and parse a single source file (absolute, or relative to the root)."""

        source = self.resolve(path)
        return self.parse_text(self.read(source), self.relative_path(source))

    def parse_many(self, paths: Iterable[Path]) -> Iterator[Tuple[Path, ParsedDocument]]:
        """Parse several files, logging and skipping the ones that fail."""

        for path in paths:
            try:
                yield path, self.parse(path)
            except (NotFoundError, ParseError, DocumentIOError) as exc:
                logger.warning("Skipping %s: %s", path, exc)

    def discover(self) -> List[Path]:
        return discover_documents(self.root, self.config.suffixes)

    # ------------------------------------------------------------------ paths
    def resolve(self, path: Path | str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return candidate

    def relative_path(self, path: Path) -> PurePosixPath:
        try:
            return PurePosixPath(path.relative_to(self.root).as_posix())
        except ValueError:
            return PurePosixPath(path.name)

    def document_id(self, path: Path) -> str:
        """``guide/install.md`` -> ``guide/install``."""

        relative = self.relative_path(self.resolve(path))
        return relative.with_suffix("").as_posix()

    def is_index(self, path: Path | PurePosixPath) -> bool:
        return path.stem == self.config.index_stem

    @staticmethod
    def locate(relative_path: PurePosixPath) -> Tuple[str, str]:
        """Derive ``(category, slug)`` from a path relative to the docs root.

        Only the first directory is treated as a category; deeper directories are
        folded away and the file stem becomes the slug.
        """

        parts = relative_path.parts
        slug = PurePosixPath(parts[-1]).stem if parts else ""
        category = parts[0] if len(parts) > 1 else ""
        return category, slug

    def read(self, path: Path) -> str:
        try:
            return path.read_text(encoding=self.config.encoding)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFoundError(path) from exc
        except UnicodeDecodeError as exc:
            raise ParseError(path, f"not valid {self.config.encoding} text") from exc
        except OSError as exc:
            raise DocumentIOError(path, str(exc)) from exc


__all__ = ["DocumentParser", "DocumentParserConfig", "discover_documents"]
