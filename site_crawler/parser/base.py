"""site_crawler.parser.base: common interface of the content extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(slots=True)
class ParsedContent:
    """Text blocks and raw link candidates extracted from one body."""

    text: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)


class ContentParser(ABC):
    """Turns a raw response body into text and links."""

    @abstractmethod
    def extract(self, body: Union[bytes, str], encoding: Optional[str] = None) -> ParsedContent:
        raise NotImplementedError
