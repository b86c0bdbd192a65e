"""Leading frontmatter block extraction"""

import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml


FRONTMATTER_RE = re.compile(
    r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)',
    re.DOTALL,
)


@dataclass(frozen=True)
class Document:
    """A source string split into optional frontmatter and body."""
    source:      str
    frontmatter: Optional[str]   # raw text between the delimiters, None if absent
    body:        str
    body_offset: int             # index in source where body begins


def extract_frontmatter(source: str) -> Document:
    """Split a leading ---/--- block off source; no block means offset 0."""
    m = FRONTMATTER_RE.match(source)
    if m is None:
        return Document(source=source, frontmatter=None, body=source, body_offset=0)
    return Document(
        source=source,
        frontmatter=m.group(1) or "",
        body=source[m.end():],
        body_offset=m.end(),
    )


def load_frontmatter(text: Optional[str]) -> dict[str, Any]:
    """Parse frontmatter text as a YAML mapping; empty or missing text gives {}."""
    if not text:
        return {}
    try:
        fm = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm
