"""Render dispatcher: drives a Context from a single pass over the event stream

With maths turned off, math spans are still recognised by the parser but
render as inline code holding their literal `$..$` source.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from markdown_it import MarkdownIt

from mdview.config import RawHtmlPolicy, RenderOptions, UnknownComponentPolicy
from mdview.core.components.props import ComponentProps, ComponentRegistry, PropsBuilder
from mdview.core.components.tags import TagClass, TagForm, classify, parse_tag, tag_name
from mdview.core.context import Context
from mdview.core.events import iter_events
from mdview.core.frontmatter import extract_frontmatter
from mdview.core.highlight import highlight_code
from mdview.core.math import ElementMathDelegate, MathDelegate, math_error_node, math_literal
from mdview.core.models import MATH_STYLESHEET, ElementKind, Event, EventType, LinkDescription
from mdview.errors import (
    ComponentCreationError,
    LinkRenderError,
    MarkdownSyntaxError,
    MathRenderError,
    UnknownComponentError,
)


logger = logging.getLogger(__name__)

Span = tuple[int, int]


@dataclass
class ElementNode:
    """An open element on the render stack."""
    kind:     Optional[ElementKind]          # None for the document root
    start:    int
    attrs:    dict[str, Any] = field(default_factory=dict)
    children: list = field(default_factory=list)
    props:    Optional[PropsBuilder] = None  # custom components only
    text:     str = ""                       # raw text of direct TEXT children

    def describe(self) -> str:
        if self.props is not None:
            return f"<{self.props.name}>"
        return self.kind.value if self.kind else "document"


class Renderer:
    """Stack machine turning one event stream into one Context node tree.

    A Renderer is single use; render() consumes the events exactly once and
    either returns the finalized root or raises without producing one.
    """

    def __init__(
        self,
        context: Context,
        options: Optional[RenderOptions] = None,
        components: Optional[Mapping[str, Callable]] = None,
        math: Optional[MathDelegate] = None,
        source: str = "",
        ):
        self.context = context
        self.options = options or RenderOptions()
        self.components = components if isinstance(components, ComponentRegistry) else ComponentRegistry(components)
        self.math = math or ElementMathDelegate()
        self.source = source
        self._stack: list[ElementNode] = []
        self._handlers = {
            EventType.start:        self._start,
            EventType.end:          self._end,
            EventType.text:         self._text,
            EventType.code:         self._code,
            EventType.html:         self._html,
            EventType.soft_break:   self._soft_break,
            EventType.hard_break:   self._hard_break,
            EventType.rule:         self._rule,
            EventType.task_marker:  self._task_marker,
            EventType.footnote_ref: self._footnote_ref,
            EventType.math_inline:  self._math,
            EventType.math_block:   self._math,
        }

    def render(self, events: Iterable[Event]) -> Any:
        self._stack = [ElementNode(kind=None, start=0)]
        debug_info: list[str] = []
        try:
            for event in events:
                if self.options.debug:
                    line = event.describe()
                    logger.debug(line)
                    debug_info.append(line)
                self._handlers[event.type](event)
        finally:
            if self.options.debug:
                self.context.send_debug_info(debug_info)

        if len(self._stack) > 1:
            top = self._stack[-1]
            raise MarkdownSyntaxError(f"Unclosed {top.describe()}", top.start)
        return self.context.finalize(self._stack[0].children)

    # --- stack ---

    def _append(self, node: Any) -> None:
        self._stack[-1].children.append(node)

    def _push(self, node: ElementNode) -> None:
        if len(self._stack) > self.options.max_depth:
            raise MarkdownSyntaxError(f"Nesting deeper than {self.options.max_depth} elements", node.start)
        self._stack.append(node)

    def _start(self, event: Event) -> None:
        self._push(ElementNode(kind=event.kind, start=event.start, attrs=dict(event.attrs)))

    def _end(self, event: Event) -> None:
        top = self._stack[-1]
        if len(self._stack) == 1:
            raise MarkdownSyntaxError(f"Unexpected end of {event.kind.value}", event.start)
        if top.props is not None or top.kind != event.kind:
            raise MarkdownSyntaxError(f"End of {event.kind.value} while {top.describe()} is open", event.start)
        self._stack.pop()
        span = (top.start, event.end)

        if top.kind in (ElementKind.link, ElementKind.image):
            self._append(self._link(top, span))
            return
        if top.kind == ElementKind.code_block and self.options.theme:
            html = highlight_code(top.text, top.attrs.get("language"), self.options.theme)
            if html is not None:
                top.attrs["html"] = html
        self._append(self.context.create_element(top.kind, top.attrs, top.children, span))

    def _link(self, top: ElementNode, span: Span) -> Any:
        image = top.kind == ElementKind.image
        link = LinkDescription(
            url=top.attrs.get("src" if image else "href", ""),
            title=top.attrs.get("title", ""),
            content=top.children,
            image=image,
            wikilink=top.attrs.get("wikilink", False),
            attrs=top.attrs,
            span=span,
        )
        try:
            return self.context.render_link(link)
        except LinkRenderError as e:
            logger.warning("Link %r at offset %d not rendered: %s", link.url, span[0], e)
            text = self.context.create_text(f"invalid link: {e}", span)
            return self._element(ElementKind.inline_code, span, {"class": "link-error"}, [text])

    # --- leaves ---

    def _text(self, event: Event) -> None:
        self._stack[-1].text += event.text
        self._append(self.context.create_text(event.text, event.range))

    def _code(self, event: Event) -> None:
        text = self.context.create_text(event.text, event.range)
        self._append(self._element(ElementKind.inline_code, event.range, {}, [text]))

    def _soft_break(self, event: Event) -> None:
        if self.options.hard_line_breaks:
            self._hard_break(event)
        else:
            self._append(self.context.create_text(" ", event.range))

    def _hard_break(self, event: Event) -> None:
        self._append(self._element(ElementKind.line_break, event.range))

    def _rule(self, event: Event) -> None:
        self._append(self._element(ElementKind.thematic_break, event.range))

    def _task_marker(self, event: Event) -> None:
        self._append(self._element(ElementKind.checkbox, event.range, {"checked": event.attrs["checked"]}))

    def _footnote_ref(self, event: Event) -> None:
        self._append(self._element(ElementKind.footnote_reference, event.range, {"label": event.attrs["label"]}))

    def _element(self, kind: ElementKind, span: Span, attrs: Optional[dict] = None,
                 children: Optional[list] = None) -> Any:
        return self.context.create_element(kind, attrs or {}, children or [], span)

    def _math(self, event: Event) -> None:
        display = event.type == EventType.math_block
        if not self.options.maths:
            text = self.context.create_text(math_literal(event.text, display), event.range)
            self._append(self._element(ElementKind.inline_code, event.range, {}, [text]))
            return
        try:
            node = self.math.render(self.context, event.text, display, event.range)
        except MathRenderError as e:
            logger.warning("Math rendering failed at offset %d: %s", event.start, e)
            node = math_error_node(self.context, event.text, display, event.range)
        self._append(node)

    # --- raw html and custom components ---

    def _html(self, event: Event) -> None:
        name = tag_name(event.text)
        if name is None or classify(name) == TagClass.standard:
            self._raw_html(event)
            return
        if name not in self.components:
            self._unknown_component(event, name)
            return

        tag = parse_tag(event.text)
        if tag is None:
            self._raw_html(event)
        elif tag.form == TagForm.start:
            builder = PropsBuilder(tag, event.start, event.end, self.source)
            self._push(ElementNode(
                kind=ElementKind.custom_component,
                start=event.start,
                attrs={"name": name},
                props=builder,
            ))
        elif tag.form == TagForm.self_closing:
            props = PropsBuilder(tag, event.start, event.end, self.source).finish()
            self._append(self._construct(props, event.range))
        else:
            top = self._stack[-1]
            if top.props is None or top.props.name != name:
                raise MarkdownSyntaxError(f"Closing </{name}> while {top.describe()} is open", event.start)
            self._stack.pop()
            props = top.props.finish(event.start, tuple(top.children))
            self._append(self._construct(props, (top.start, event.end)))

    def _construct(self, props: ComponentProps, span: Span) -> Any:
        constructor = self.components[props.name]
        try:
            return self.context.create_component(props.name, constructor, props, span)
        except ComponentCreationError:
            raise
        except Exception as e:
            raise ComponentCreationError(props.name, str(e) or type(e).__name__) from e

    def _raw_html(self, event: Event) -> None:
        policy = self.options.raw_html
        if policy == RawHtmlPolicy.passthrough:
            self._append(self._element(ElementKind.raw_html, event.range, {"html": event.text, "block": event.block}))
        elif policy == RawHtmlPolicy.escape:
            self._append(self.context.create_text(event.text, event.range))

    def _unknown_component(self, event: Event, name: str) -> None:
        policy = self.options.unknown_components
        if policy == UnknownComponentPolicy.error:
            raise UnknownComponentError(name)
        logger.warning("No component registered for <%s> at offset %d", name, event.start)
        if policy == UnknownComponentPolicy.html:
            self._raw_html(event)
        else:
            self._append(self.context.create_text(event.text, event.range))


def render_markdown(
    source: str,
    context: Context,
    options: Optional[RenderOptions] = None,
    components: Optional[Mapping[str, Callable]] = None,
    math: Optional[MathDelegate] = None,
    parser: Optional[MarkdownIt] = None,
    ) -> Any:
    """Render markdown source through context and return the document root.

    Raises ComponentCreationError when a component constructor fails and
    MarkdownSyntaxError when the markup is unbalanced; neither returns a tree.
    """
    options = options or RenderOptions()
    document = extract_frontmatter(source)
    if document.frontmatter is not None:
        context.set_frontmatter(document.frontmatter)
    if options.maths:
        context.mount_stylesheet(MATH_STYLESHEET)

    events = iter_events(document.body, offset=document.body_offset, wikilinks=options.wikilinks, parser=parser)
    renderer = Renderer(context, options, components, math, source=source)
    return renderer.render(events)
