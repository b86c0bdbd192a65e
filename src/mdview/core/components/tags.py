"""Raw HTML tag parsing and custom-component classification

A tag name is CUSTOM when it starts with an ASCII uppercase letter, or with
an ASCII lowercase letter and contains a dash. Everything else, including
names starting with a digit or a non-ASCII letter, is a STANDARD element.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from mdview.errors import TagSyntaxError


NAME_RE = re.compile(r'\A\s*</?([^\s/>!?][^\s/>]*)')
TAG_RE = re.compile(r'\A\s*<(/?)([^\s/>]+)(.*?)(/?)>\s*\Z', re.DOTALL)
ATTR_RE = re.compile(
    r'\s*([^\s"\'<>/=]+)'                          # name
    r'(?:\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'=<>`]+)))?'
)


class TagClass(str, Enum):
    custom = "custom"
    standard = "standard"


class TagForm(str, Enum):
    start = "start"           # <Name>
    end = "end"               # </Name>
    self_closing = "inline"   # <Name/>


@dataclass(frozen=True)
class HtmlTag:
    """A parsed tag; attribute ranges are relative to the raw tag string."""
    name:        str
    form:        TagForm
    attributes:  dict[str, str] = field(default_factory=dict)
    value_spans: dict[str, tuple[int, int]] = field(default_factory=dict)


def classify(name: str) -> TagClass:
    """Classify a bare tag name by its first character."""
    if not name:
        return TagClass.standard
    first = name[0]
    if 'A' <= first <= 'Z':
        return TagClass.custom
    if 'a' <= first <= 'z' and '-' in name:
        return TagClass.custom
    return TagClass.standard


def tag_name(raw: str) -> str | None:
    """Return the element name of a raw start, end, or self-closing tag."""
    m = NAME_RE.match(raw)
    return m.group(1) if m else None


def _parse_attributes(raw: str, start: int, end: int, name: str) -> tuple[dict, dict]:
    attributes: dict[str, str] = {}
    spans: dict[str, tuple[int, int]] = {}
    pos = start
    while pos < end:
        if raw[pos:end].isspace():
            break
        m = ATTR_RE.match(raw, pos, end)
        if m is None or m.end() == pos:
            raise TagSyntaxError(f"Malformed attribute list in <{name}>: {raw[pos:end].strip()!r}")
        key = m.group(1)
        for group in (2, 3, 4):
            if m.group(group) is not None:
                attributes[key] = m.group(group)
                spans[key] = m.span(group)
                break
        else:
            attributes[key] = ""
            spans[key] = (m.end(1), m.end(1))
        pos = m.end()
    return attributes, spans


def parse_tag(raw: str) -> HtmlTag | None:
    """Parse a single raw HTML tag; None for comments, text, and declarations."""
    m = TAG_RE.match(raw)
    if m is None or raw.lstrip().startswith(('<!', '<?')):
        return None
    closing, name, _, slash = m.groups()
    if not name[0].isalnum():
        return None
    if closing:
        return HtmlTag(name=name, form=TagForm.end)
    attributes, spans = _parse_attributes(raw, m.start(3), m.end(3), name)
    return HtmlTag(
        name=name,
        form=TagForm.self_closing if slash else TagForm.start,
        attributes=attributes,
        value_spans=spans,
    )
