"""Event source: markdown-it tokens flattened into range-annotated events"""

import logging
import re
from typing import Iterator, Optional

from markdown_it import MarkdownIt
from markdown_it.common.html_re import cdata, close_tag, comment, declaration, open_tag, processing
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin

from mdview.core.models import ElementKind, Event, EventType
from mdview.core.utils.ranges import InlineLocator, LineIndex
from mdview.core.utils.tokens import cell_align, fence_language, heading_level, list_start
from mdview.core.wikilinks import wikilinks_plugin


logger = logging.getLogger(__name__)

# markdown-it's tag grammar; quoted attribute values may contain `>`
HTML_FRAGMENT_RE = re.compile("|".join([open_tag, close_tag, comment, processing, declaration, cdata]))
TASK_RE = re.compile(r'\[([ xX])\](?=\s|$)')

# token type prefix (before _open/_close) -> element kind
CONTAINER_KINDS: dict[str, ElementKind] = {
    'paragraph':    ElementKind.paragraph,
    'heading':      ElementKind.heading,
    'blockquote':   ElementKind.block_quote,
    'bullet_list':  ElementKind.list,
    'ordered_list': ElementKind.list,
    'list_item':    ElementKind.list_item,
    'table':        ElementKind.table,
    'thead':        ElementKind.table_head,
    'tbody':        ElementKind.table_body,
    'tr':           ElementKind.table_row,
    'th':           ElementKind.table_cell,
    'td':           ElementKind.table_cell,
    'footnote':     ElementKind.footnote_definition,
    'em':           ElementKind.emphasis,
    'strong':       ElementKind.strong,
    's':            ElementKind.strikethrough,
    'link':         ElementKind.link,
}

SKIPPED_TOKENS = {'footnote_block_open', 'footnote_block_close', 'footnote_anchor'}


def make_parser(wikilinks: bool = False, preset: str = 'commonmark') -> MarkdownIt:
    """Build a MarkdownIt instance with tables, strikethrough, footnotes, $math$ and optional [[wiki links]].

    Math spans are always tokenized; whether they reach a math renderer is a
    render option. text_join stays off so escapes and entities keep their own
    tokens and can be located by their source markup.
    """
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.enable(["table", "strikethrough"])
    md.disable("text_join")
    md.use(footnote_plugin)
    md.use(dollarmath_plugin, allow_digits=False, double_inline=True)
    if wikilinks:
        md.use(wikilinks_plugin)
    return md


def _container_attrs(token) -> dict:
    """Element attributes carried by an *_open token."""
    base = token.type[:-len('_open')]
    if base == 'heading':
        return {"level": heading_level(token)}
    if base == 'bullet_list':
        return {"ordered": False, "start": None}
    if base == 'ordered_list':
        return {"ordered": True, "start": list_start(token)}
    if base in ('th', 'td'):
        return {"header": base == 'th', "align": cell_align(token)}
    if base == 'link':
        return {"href": token.attrGet('href') or "", "title": token.attrGet('title') or ""}
    if base == 'footnote':
        meta = token.meta or {}
        return {"label": meta.get('label') or str(meta.get('id', 0) + 1)}
    return {}


class EventSource:
    """Single-use iterator of Events for one body text.

    Every range is shifted by offset so it indexes the full source
    rather than the frontmatter-stripped body.
    """

    def __init__(self, body: str, offset: int = 0, wikilinks: bool = False, parser: Optional[MarkdownIt] = None):
        self.body = body
        self.offset = offset
        self.parser = parser or make_parser(wikilinks)
        self.lines = LineIndex(body)
        self._spans: list[tuple[int, int]] = []
        self._locator: Optional[InlineLocator] = None
        self._locator_span: Optional[tuple[int, int]] = None
        self._pending_task = False

    def __iter__(self) -> Iterator[Event]:
        for token in self.parser.parse(self.body):
            yield from self._block(token)

    def _event(self, type_: EventType, start: int, end: int, **fields) -> Event:
        return Event(type=type_, start=start + self.offset, end=end + self.offset, **fields)

    def _span(self, token) -> tuple[int, int]:
        if token.map:
            return self.lines.span(token.map)
        if self._spans:
            return self._spans[-1]
        return 0, len(self.body)

    def _inline_locator(self, token) -> InlineLocator:
        # cells of one table row share a line, so keep searching from the last hit
        span = self._span(token)
        if self._locator is None or self._locator_span != span:
            self._locator = InlineLocator(self.body, *span)
            self._locator_span = span
        return self._locator

    def _block(self, token) -> Iterator[Event]:
        kind = token.type
        if kind not in ('paragraph_open', 'inline'):
            self._pending_task = kind == 'list_item_open'

        if kind in SKIPPED_TOKENS or token.hidden:
            return
        if kind == 'inline':
            yield from self._inline(token)
        elif kind.endswith('_open') and kind[:-len('_open')] in CONTAINER_KINDS:
            span = self._span(token)
            self._spans.append(span)
            yield self._event(
                EventType.start, *span,
                kind=CONTAINER_KINDS[kind[:-len('_open')]],
                attrs=_container_attrs(token),
            )
        elif kind.endswith('_close') and kind[:-len('_close')] in CONTAINER_KINDS:
            _, end = self._spans.pop() if self._spans else (0, len(self.body))
            yield self._event(EventType.end, end, end, kind=CONTAINER_KINDS[kind[:-len('_close')]])
        elif kind in ('fence', 'code_block'):
            yield from self._code_block(token)
        elif kind == 'hr':
            yield self._event(EventType.rule, *self._span(token))
        elif kind == 'html_block':
            yield from self._html_fragments(token)
        elif kind in ('math_block', 'math_block_label'):
            attrs = {"label": token.info} if kind == 'math_block_label' else {}
            yield self._event(EventType.math_block, *self._span(token), text=token.content.strip(), attrs=attrs)
        else:
            logger.debug("Skipping unsupported block token %s", kind)

    def _code_block(self, token) -> Iterator[Event]:
        start, end = self._span(token)
        text_start, text_end = InlineLocator(self.body, start, end).find(token.content)
        attrs = {"language": fence_language(token) if token.type == 'fence' else None}
        yield self._event(EventType.start, start, end, kind=ElementKind.code_block, attrs=attrs)
        yield self._event(EventType.text, text_start, text_end, text=token.content)
        yield self._event(EventType.end, end, end, kind=ElementKind.code_block)

    def _html_fragments(self, token) -> Iterator[Event]:
        """Split an html_block into one HTML event per tag or text run."""
        loc = InlineLocator(self.body, *self._span(token))
        content = token.content
        pos = 0
        for m in HTML_FRAGMENT_RE.finditer(content):
            text = content[pos:m.start()]
            if text.strip():
                yield self._event(EventType.html, *loc.find(text), text=text, block=True)
            yield self._event(EventType.html, *loc.find(m.group(0)), text=m.group(0), block=True)
            pos = m.end()
        text = content[pos:]
        if text.strip():
            yield self._event(EventType.html, *loc.find(text), text=text, block=True)

    def _task_marker(self, child, loc: InlineLocator) -> Iterator[Event]:
        m = TASK_RE.match(child.content)
        if not m:
            yield self._event(EventType.text, *loc.find(child.content), text=child.content)
            return
        yield self._event(EventType.task_marker, *loc.find(m.group(0)), attrs={"checked": m.group(1) != ' '})
        rest = child.content[m.end():].lstrip()
        if rest:
            yield self._event(EventType.text, *loc.find(rest), text=rest)

    def _inline(self, token) -> Iterator[Event]:
        loc = self._inline_locator(token)
        task = self._pending_task
        self._pending_task = False

        for i, child in enumerate(token.children or []):
            kind = child.type
            if kind == 'text' and task and i == 0:
                yield from self._task_marker(child, loc)
            elif kind == 'text':
                yield self._event(EventType.text, *loc.find(child.content), text=child.content)
            elif kind in ('text_special', 'entity'):
                # decoded content differs from the source; locate the markup
                yield self._event(EventType.text, *loc.find(child.markup), text=child.content)
            elif kind == 'softbreak':
                yield self._event(EventType.soft_break, *loc.find('\n'))
            elif kind == 'hardbreak':
                yield self._event(EventType.hard_break, *loc.find('\n'))
            elif kind == 'code_inline':
                yield self._event(EventType.code, *loc.find_between(child.markup, child.markup), text=child.content)
            elif kind == 'html_inline':
                yield self._event(EventType.html, *loc.find(child.content), text=child.content)
            elif kind == 'math_inline':
                yield self._event(EventType.math_inline, *loc.find(f"${child.content}$"), text=child.content)
            elif kind == 'math_inline_double':
                yield self._event(EventType.math_block, *loc.find(f"$${child.content}$$"), text=child.content)
            elif kind == 'footnote_ref':
                meta = child.meta or {}
                label = meta.get('label')
                span = loc.find_between('[^', ']') if label else loc.find_between('^[', ']')
                yield self._event(
                    EventType.footnote_ref, *span,
                    attrs={"label": label or str(meta.get('id', 0) + 1)},
                )
            elif kind == 'image':
                yield from self._image(child, loc)
            elif kind == 'wikilink':
                yield from self._wikilink(child, loc)
            elif kind == 'link_open':
                opener = '<' if child.markup == 'autolink' else '['
                yield self._event(EventType.start, *loc.find(opener), kind=ElementKind.link, attrs=_container_attrs(child))
            elif kind == 'link_close':
                yield self._event(EventType.end, *self._link_end(child, loc), kind=ElementKind.link)
            elif kind.endswith('_open') and kind[:-len('_open')] in CONTAINER_KINDS:
                yield self._event(EventType.start, *loc.find(child.markup), kind=CONTAINER_KINDS[kind[:-len('_open')]])
            elif kind.endswith('_close') and kind[:-len('_close')] in CONTAINER_KINDS:
                yield self._event(EventType.end, *loc.find(child.markup), kind=CONTAINER_KINDS[kind[:-len('_close')]])
            else:
                logger.debug("Skipping unsupported inline token %s", kind)

    def _link_end(self, token, loc: InlineLocator) -> tuple[int, int]:
        if token.markup == 'autolink':
            return loc.find('>')
        start, _ = loc.find(']')
        if loc.cursor < loc.limit and self.body[loc.cursor] == '[':
            loc.find(']')
        else:
            loc.skip_destination()
        return start, loc.cursor

    def _image(self, token, loc: InlineLocator) -> Iterator[Event]:
        start, _ = loc.find('![')
        self._link_end(token, loc)
        attrs = {
            "src": token.attrGet('src') or "",
            "alt": token.content,
            "title": token.attrGet('title') or "",
        }
        yield self._event(EventType.start, start, loc.cursor, kind=ElementKind.image, attrs=attrs)
        yield self._event(EventType.end, loc.cursor, loc.cursor, kind=ElementKind.image)

    def _wikilink(self, token, loc: InlineLocator) -> Iterator[Event]:
        start, end = loc.find(token.markup)
        label_start, label_end = token.meta["label_span"]
        attrs = {"href": token.meta["target"], "title": "", "wikilink": True}
        yield self._event(EventType.start, start, end, kind=ElementKind.link, attrs=attrs)
        yield self._event(EventType.text, start + label_start, start + label_end, text=token.content)
        yield self._event(EventType.end, end, end, kind=ElementKind.link)


def iter_events(body: str, offset: int = 0, wikilinks: bool = False, parser: Optional[MarkdownIt] = None) -> Iterator[Event]:
    """Return a lazy, single-pass event iterator for body text."""
    return iter(EventSource(body, offset=offset, wikilinks=wikilinks, parser=parser))
