"""site_crawler.parser: content-type driven parsing of fetched responses.

The response's ``Content-Type`` header is matched by substring against
:data:`PARSERS`, in order. The first hit decides which extractor runs and
which type label is recorded on the target; anything else is reported as
unsupported and yields neither text nor links.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Type

from site_crawler.crawler.fetcher import FetchResponse
from site_crawler.crawler.link_extractor import normalize_links
from site_crawler.crawler.models import CrawlTarget
from site_crawler.parser.base import ContentParser, ParsedContent
from site_crawler.parser.html_parser import HtmlParser
from site_crawler.parser.text_parser import TextParser

UNSUPPORTED_CONTENT_TYPE = "no parser for content type"

# (content-type substring, extractor) in matching order
PARSERS: Tuple[Tuple[str, Type[ContentParser]], ...] = (
    ("text/html", HtmlParser),
    ("text/plain", TextParser),
    ("text/markdown", TextParser),
    ("text/csv", TextParser),
    ("application/json", TextParser),
    ("application/xml", TextParser),
)


def select_parser(content_type: str) -> Optional[Tuple[str, Type[ContentParser]]]:
    """Return ``(type label, parser class)`` for *content_type* or None."""
    for label, parser_cls in PARSERS:
        if label in content_type:
            return label, parser_cls
    return None


def parse_response(target: CrawlTarget, response: FetchResponse) -> CrawlTarget:
    """
    Fill *target* from *response*: content type, text and normalised links.

    Unsupported content types set ``target.error`` and leave text and links
    empty. The chosen parser runs exactly once.
    """
    content_type = response.headers.get("Content-Type", "")
    selected = select_parser(content_type)
    if selected is None:
        target.content_type = content_type
        target.error = f"{UNSUPPORTED_CONTENT_TYPE}: {content_type}"
        return target

    label, parser_cls = selected
    parsed = parser_cls().extract(response.body, response.charset)
    target.content_type = label
    target.text = parsed.text
    target.links = normalize_links(parsed.links, target.url)
    return target


__all__: Sequence[str] = (
    "PARSERS",
    "UNSUPPORTED_CONTENT_TYPE",
    "ContentParser",
    "ParsedContent",
    "HtmlParser",
    "TextParser",
    "select_parser",
    "parse_response",
)
