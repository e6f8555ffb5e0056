# File: site_crawler/parser/text_parser.py
"""site_crawler.parser.text_parser: verbatim extractor for plain and structured text."""

from __future__ import annotations

import codecs
from typing import Optional, Union

from site_crawler.logger import get_logger
from site_crawler.parser.base import ContentParser, ParsedContent

logger = get_logger(__name__)

FALLBACK_ENCODING = "utf-8"


def resolve_encoding(encoding: Optional[str]) -> str:
    """Codec name for a declared charset; utf-8 when none or unknown."""
    if not encoding:
        return FALLBACK_ENCODING
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        logger.debug("Unknown charset %r, decoding as %s", encoding, FALLBACK_ENCODING)
        return FALLBACK_ENCODING


class TextParser(ContentParser):
    """Keeps the whole body as a single text block and yields no links."""

    def extract(self, body: Union[bytes, str], encoding: Optional[str] = None) -> ParsedContent:
        if isinstance(body, bytes):
            body = body.decode(resolve_encoding(encoding), errors="replace")
        return ParsedContent(text=[body])
