"""Shared markdown-it token utilities"""

import re


ALIGN_RE = re.compile(r'text-align\s*:\s*(left|right|center)')


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def list_start(token) -> int:
    """Return the first number of an ordered_list_open token (default 1)."""
    start = token.attrGet('start')
    return int(start) if start is not None else 1


def cell_align(token) -> str | None:
    """Return left/right/center from a th/td token's style attribute, else None."""
    m = ALIGN_RE.search(str(token.attrGet('style') or ''))
    return m.group(1) if m else None


def fence_language(token) -> str | None:
    """Return the first word of a fence info string, or None for indented code."""
    info = (token.info or '').strip()
    return info.split()[0] if info else None
