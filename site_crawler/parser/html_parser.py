# File: site_crawler/parser/html_parser.py
"""Structural extractor for markup responses.

BeautifulSoup turns the body into a document; walking its ``descendants``
gives the same sequence a tokenizer would: every element in start-tag
order with its text nodes in between. The extractor reacts to three kinds
of start tags:

* ``<a href>``: the href (minus any fragment) becomes a link candidate,
  ``mailto:`` and ``javascript:`` hrefs are ignored.
* ``<meta>`` carrying a description, keywords or author marker: its
  ``content`` attribute is added to the text.
* text-bearing elements (paragraphs, headings, emphasis, quotes, code,
  title, span, ...): the next text node is collected. Start tags met
  while looking for that text are handled first, so anchors nested in a
  paragraph are never lost.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from site_crawler.logger import get_logger
from site_crawler.parser.base import ContentParser, ParsedContent
from site_crawler.utils import strip_fragment

__all__: Sequence[str] = ("HtmlParser", "TEXT_TAGS", "META_CONTENT_KEYS")

logger = get_logger(__name__)

TEXT_TAGS: frozenset[str] = frozenset(
    {
        "p",
        "h",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "s",
        "sub",
        "sup",
        "blockquote",
        "cite",
        "code",
        "pre",
        "title",
        "span",
    }
)

META_CONTENT_KEYS: frozenset[str] = frozenset({"description", "keywords", "author"})

_IGNORED_HREF_PREFIXES = ("mailto:", "javascript:")


def _is_text(node: PageElement) -> bool:
    # comments, doctypes, CDATA and processing instructions are not text
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def parse_href(tag: Tag) -> str:
    """Link candidate of an anchor tag, ``""`` when there is none."""
    href = tag.get("href")
    if not isinstance(href, str):
        return ""
    href = href.strip()
    if "mailto:" in href.lower() or href.lower().startswith(_IGNORED_HREF_PREFIXES):
        return ""
    return strip_fragment(href)


def parse_meta(tag: Tag) -> str:
    """``content`` of a meta tag that describes the page, ``""`` otherwise."""
    content = tag.get("content")
    if not isinstance(content, str):
        return ""
    for key, value in tag.attrs.items():
        if key.lower() in META_CONTENT_KEYS:
            return content
        if key.lower() in ("name", "property") and isinstance(value, str):
            if value.strip().lower() in META_CONTENT_KEYS:
                return content
    return ""


class HtmlParser(ContentParser):
    """Tag-aware extractor; one instance per response body."""

    def __init__(self) -> None:
        self._text: list[str] = []
        self._links: list[str] = []
        # text-bearing elements still waiting for their text node
        self._pending_text = 0

    def extract(self, body: Union[bytes, str], encoding: Optional[str] = None) -> ParsedContent:
        from_encoding = encoding if isinstance(body, bytes) else None
        try:
            soup = BeautifulSoup(body, "html.parser", from_encoding=from_encoding)
        except ParserRejectedMarkup as exc:
            logger.warning("Markup rejected by the parser: %s", exc)
            return ParsedContent(self._text, self._links)

        for node in soup.descendants:
            if isinstance(node, Tag):
                self._parse_start_tag(node)
            elif self._pending_text and _is_text(node):
                self._pending_text -= 1
                content = node.strip()
                if content:
                    self._text.append(content)
        return ParsedContent(self._text, self._links)

    def _parse_start_tag(self, tag: Tag) -> None:
        if tag.name == "a":
            url = parse_href(tag)
            if url:
                self._links.append(url)
        elif tag.name == "meta":
            metadata = parse_meta(tag)
            if metadata:
                self._text.append(metadata)
        elif tag.name in TEXT_TAGS:
            self._pending_text += 1
