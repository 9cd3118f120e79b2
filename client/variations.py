"""Parsing of the numbered list returned by the variations helper.

Format version 1: candidates are separated by a newline followed by one or
more digits, a period and a space (regex ``\\n\\d+\\. ``). Chunks are
stripped and empty chunks dropped; nothing else is rewritten. Bump
`VARIATIONS_FORMAT_VERSION` if the delimiter ever changes.
"""

import re
from typing import List, Optional

VARIATIONS_FORMAT_VERSION = 1
VARIATION_DELIMITER = re.compile(r"\n\d+\. ")


def parse_variations(text: Optional[str]) -> List[str]:
    """Split a numbered-list response into candidate prompts."""
    if not text:
        return []
    return [chunk.strip() for chunk in VARIATION_DELIMITER.split(text) if chunk.strip()]
