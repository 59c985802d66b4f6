"""Line-oriented selector extraction for style blocks."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Protocol

from ..models import Selector, SelectorType

_RULE_PREFIX = re.compile(r"^([^{]+)\s*{")
_ELEMENT = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*$")


class StyleBlock(Protocol):
    content: str


def classify_selectors(blocks: Iterable[StyleBlock]) -> List[Selector]:
    """Return every distinct selector token of ``blocks`` with its category.

    Tokens are deduplicated by exact text and kept in first-encounter order.
    A rule line is anything up to an opening brace; several rules on one line
    are separated at closing braces first.
    """
    tokens: Dict[str, None] = {}
    for block in blocks:
        for raw_line in block.content.split("\n"):
            for segment in raw_line.split("}"):
                match = _RULE_PREFIX.match(segment.strip())
                if match is None:
                    continue
                for selector in match.group(1).split(","):
                    for part in selector.strip().split():
                        tokens.setdefault(part, None)
    return [Selector(type=classify_token(token), name=token) for token in tokens]


def classify_token(token: str) -> SelectorType:
    if token.startswith("."):
        return "class"
    if ":" in token:
        return "pseudo"
    if _ELEMENT.match(token):
        return "element"
    return "other"


__all__ = ["StyleBlock", "classify_selectors", "classify_token"]
