"""Element model and event types shared by the parse and render stages"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional


class ElementKind(str, Enum):
    """Restrict output nodes to a closed set of element kinds"""
    paragraph = "paragraph"
    heading = "heading"                         # level
    list = "list"                               # ordered, start
    list_item = "list_item"
    code_block = "code_block"                   # language
    inline_code = "inline_code"
    link = "link"                               # href, title
    image = "image"                             # src, alt, title
    emphasis = "emphasis"
    strong = "strong"
    strikethrough = "strikethrough"
    block_quote = "block_quote"
    thematic_break = "thematic_break"
    table = "table"
    table_head = "table_head"
    table_body = "table_body"
    table_row = "table_row"
    table_cell = "table_cell"                   # header, align
    line_break = "line_break"
    checkbox = "checkbox"                       # checked
    footnote_reference = "footnote_reference"   # label
    footnote_definition = "footnote_definition" # label
    math_inline = "math_inline"                 # expression
    math_block = "math_block"                   # expression
    raw_html = "raw_html"                       # html
    custom_component = "custom_component"       # name, props


class EventType(str, Enum):
    start = "start"
    end = "end"
    text = "text"
    code = "code"
    html = "html"
    soft_break = "soft_break"
    hard_break = "hard_break"
    rule = "rule"
    task_marker = "task_marker"
    footnote_ref = "footnote_ref"
    math_inline = "math_inline"
    math_block = "math_block"


@dataclass(frozen=True)
class Event:
    """One structural event; start/end index into the full source."""
    type:  EventType
    start: int
    end:   int
    kind:  Optional[ElementKind] = None      # START/END only
    text:  str = ""
    attrs: dict[str, Any] = field(default_factory=dict)
    block: bool = False                      # html_block fragment

    @property
    def range(self) -> tuple[int, int]:
        return self.start, self.end

    def describe(self) -> str:
        """Single-line summary used by debug output and the events command."""
        label = self.type.value if self.kind is None else f"{self.type.value}:{self.kind.value}"
        parts = [f"{self.start}..{self.end}", label]
        if self.attrs:
            parts.append(" ".join(f"{k}={v!r}" for k, v in self.attrs.items()))
        if self.text:
            parts.append(repr(self.text))
        return " ".join(parts)


class StyleLink(NamedTuple):
    rel:         str
    href:        str
    integrity:   str
    crossorigin: str


MATH_STYLESHEET = StyleLink(
    rel="stylesheet",
    href="https://cdn.jsdelivr.net/npm/katex@0.16.7/dist/katex.min.css",
    integrity="sha384-3UiQGuEI4TTMaFmGIZumfRPtfKQ3trwQE2JgosJxCnGmQpL/lJdjpcHkaaFwHlcI",
    crossorigin="anonymous",
)


@dataclass(frozen=True)
class LinkDescription:
    """A finished link or image, handed to Context.render_link."""
    url:      str
    title:    str
    content:  list                       # rendered child nodes, empty for images
    image:    bool
    wikilink: bool
    attrs:    dict[str, Any]             # the link or image element attributes
    span:     tuple[int, int]
