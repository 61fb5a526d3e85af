from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from src.ingest.frontmatter import (
    coerce_description,
    coerce_order,
    coerce_tags,
    coerce_title,
    split_front_matter,
)
from src.ingest.parser import DocumentParser, DocumentParserConfig
from src.ingest.utils import humanize_slug, plain_text, slugify
from src.models.document import DEFAULT_ORDER, DocMeta, Heading, ParsedDocument


_PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")


@dataclass(slots=True)
class MarkdownParserConfig(DocumentParserConfig):
    """Configuration for markdown rendering."""

    heading_class: Optional[str] = None
    breaks: bool = True
    allow_html: bool = True


class MarkdownDocumentParser(DocumentParser):
    """Parse front-matter + markdown files into HTML fragments with a heading outline."""

    config: MarkdownParserConfig

    def __init__(self, root: Path, config: MarkdownParserConfig | None = None) -> None:
        super().__init__(root, config or MarkdownParserConfig())
        assert isinstance(self.config, MarkdownParserConfig)
        self._md = MarkdownIt(
            "commonmark",
            {"breaks": self.config.breaks, "html": self.config.allow_html},
        ).enable(["table", "strikethrough"])

    def parse_text(self, text: str, relative_path: PurePosixPath) -> ParsedDocument:
        data, body = split_front_matter(text, relative_path)
        html, headings = self.render(body)
        category, slug = self.locate(relative_path)

        title = coerce_title(data.get("title"), relative_path)
        if title is None:
            title = next((heading.text for heading in headings if heading.level == 1 and heading.text), None)
        if title is None:
            title = humanize_slug(slug)

        order = coerce_order(data.get("order"), relative_path)
        meta = DocMeta(
            title=title,
            description=coerce_description(data.get("description"), relative_path),
            order=DEFAULT_ORDER if order is None else order,
            tags=coerce_tags(data.get("tags"), relative_path),
            category=category,
            slug=slug,
        )
        return ParsedDocument(
            meta=meta,
            body=body,
            html=html,
            headings=headings,
            excerpt=self.excerpt(body),
        )

    def render(self, body: str) -> Tuple[str, List[Heading]]:
        """Render markdown to HTML, collecting headings from the same token stream.

        Each heading's id is written onto the token that gets rendered, so the
        outline and the emitted anchors cannot drift apart. Level-1 headings are
        recorded but dropped from the output.
        """

        env: Dict[str, Any] = {}
        tokens = self._md.parse(body, env)
        headings: List[Heading] = []
        emitted: List[Token] = []

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token.type != "heading_open":
                emitted.append(token)
                index += 1
                continue

            inline = tokens[index + 1]
            level = int(token.tag[1:])
            fragment = self._md.renderer.renderInline(inline.children or [], self._md.options, env)
            text = plain_text(fragment)
            anchor = slugify(text)
            headings.append(Heading(text=text, level=level, id=anchor))

            if level == 1:
                # heading_open, inline, heading_close
                index += 3
                continue

            token.attrSet("id", anchor)
            if self.config.heading_class:
                token.attrSet("class", self.config.heading_class)
            emitted.append(token)
            index += 1

        html = self._md.renderer.render(emitted, self._md.options, env)
        return html, headings

    def excerpt(self, body: str) -> str:
        text = body.lstrip("\r\n")
        limit = self.config.excerpt_length
        boundary = _PARAGRAPH_BREAK.search(text)
        if boundary is not None and boundary.start() <= limit:
            return text[: boundary.start()].rstrip()
        return text[:limit].rstrip()


__all__ = ["MarkdownDocumentParser", "MarkdownParserConfig"]
