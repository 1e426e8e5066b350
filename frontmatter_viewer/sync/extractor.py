from __future__ import annotations

import logging
import re
from typing import Optional

from .errors import MalformedBlock
from .models import MetadataBlock
from .parser import parse_simple_yaml

logger = logging.getLogger(__name__)

OPENING_LINE = re.compile(r"\A---[ \t]*\r?\n")
BLOCK_PATTERN = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def locate_block(text: str) -> Optional[str]:
    """
    Return the text enclosed by the leading `---` marker lines, or None when
    the document does not open with a marker line. Raises MalformedBlock when
    the opening marker has no closing partner.
    """
    if not OPENING_LINE.match(text):
        return None
    match = BLOCK_PATTERN.match(text)
    if not match:
        raise MalformedBlock("Opening metadata marker without a closing marker")
    return (match.group(1) or "").strip()


def extract_metadata(text: str) -> Optional[MetadataBlock]:
    try:
        raw_text = locate_block(text)
    except MalformedBlock as exc:
        logger.warning("Ignoring metadata block: %s", exc)
        return None
    if raw_text is None:
        return None
    try:
        structured = parse_simple_yaml(raw_text)
    except RecursionError:
        logger.warning("Ignoring metadata block: nesting too deep to parse")
        return None
    return MetadataBlock(raw_text=raw_text, structured=structured)
