"""Reference context rendering straight to an HTML string"""

from html import escape
from typing import Any, Callable, Optional

from mdview.core.components.props import ComponentProps
from mdview.core.context import Context
from mdview.core.models import ElementKind, StyleLink


SIMPLE_TAGS: dict[ElementKind, str] = {
    ElementKind.paragraph:     "p",
    ElementKind.list_item:     "li",
    ElementKind.emphasis:      "em",
    ElementKind.strong:        "strong",
    ElementKind.strikethrough: "del",
    ElementKind.block_quote:   "blockquote",
    ElementKind.table:         "table",
    ElementKind.table_head:    "thead",
    ElementKind.table_body:    "tbody",
    ElementKind.table_row:     "tr",
}


def _attrs(**attrs) -> str:
    """Render non-empty attributes; True renders as a bare attribute."""
    parts = []
    for key, value in attrs.items():
        if value is None or value is False or value == "":
            continue
        name = key.rstrip("_").replace("_", "-")
        parts.append(f" {name}" if value is True else f' {name}="{escape(str(value))}"')
    return "".join(parts)


class HtmlContext(Context):
    """Builds HTML fragments; component constructors return HTML strings."""

    def __init__(self):
        self.frontmatter: Optional[str] = None
        self.stylesheets: list[StyleLink] = []
        self.debug_info: list[str] = []

    def create_text(self, text: str, span: tuple[int, int]) -> str:
        return escape(text, quote=False)

    def create_component(self, name: str, constructor: Callable[[ComponentProps], Any], props: ComponentProps,
                         span: tuple[int, int]) -> str:
        result = constructor(props)
        return "" if result is None else str(result)

    def finalize(self, children: list) -> str:
        links = "".join(
            f"<link{_attrs(rel=link.rel, href=link.href, integrity=link.integrity, crossorigin=link.crossorigin)}>\n"
            for link in self.stylesheets
        )
        return links + "".join(children)

    def set_frontmatter(self, frontmatter: str) -> None:
        self.frontmatter = frontmatter

    def mount_stylesheet(self, link: StyleLink) -> None:
        self.stylesheets.append(link)

    def send_debug_info(self, info: list[str]) -> None:
        self.debug_info.extend(info)

    def create_element(self, kind: ElementKind, attrs: dict[str, Any], children: list, span: tuple[int, int]) -> str:
        inner = "".join(children)
        if kind in SIMPLE_TAGS:
            tag = SIMPLE_TAGS[kind]
            return f"<{tag}>{inner}</{tag}>"
        if kind == ElementKind.heading:
            return f"<h{attrs['level']}>{inner}</h{attrs['level']}>"
        if kind == ElementKind.list:
            if attrs.get("ordered"):
                start = attrs.get("start")
                return f"<ol{_attrs(start=start if start != 1 else None)}>{inner}</ol>"
            return f"<ul>{inner}</ul>"
        if kind == ElementKind.code_block:
            if attrs.get("html"):
                return attrs["html"]
            language = attrs.get("language")
            return f"<pre><code{_attrs(class_=f'language-{language}' if language else None)}>{inner}</code></pre>"
        if kind == ElementKind.inline_code:
            return f"<code{_attrs(class_=attrs.get('class'))}>{inner}</code>"
        if kind == ElementKind.link:
            cls = "wikilink" if attrs.get("wikilink") else None
            return f"<a{_attrs(href=attrs.get('href'), title=attrs.get('title'), class_=cls)}>{inner}</a>"
        if kind == ElementKind.image:
            return f"<img{_attrs(src=attrs.get('src'), alt=attrs.get('alt'), title=attrs.get('title'))}>"
        if kind == ElementKind.table_cell:
            tag = "th" if attrs.get("header") else "td"
            align = attrs.get("align")
            return f"<{tag}{_attrs(style=f'text-align: {align}' if align else None)}>{inner}</{tag}>"
        if kind == ElementKind.thematic_break:
            return "<hr>"
        if kind == ElementKind.line_break:
            return "<br>"
        if kind == ElementKind.checkbox:
            return f"<input{_attrs(type='checkbox', checked=attrs.get('checked', False), disabled=True)}>"
        if kind == ElementKind.footnote_reference:
            label = attrs["label"]
            return f'<sup class="footnote-ref"><a href="#fn-{escape(label)}">{escape(label)}</a></sup>'
        if kind == ElementKind.footnote_definition:
            anchor = f"fn-{attrs['label']}"
            return f'<div class="footnote"{_attrs(id=anchor)}>{inner}</div>'
        if kind in (ElementKind.math_inline, ElementKind.math_block):
            tag, cls = ("div", "math-flow") if kind == ElementKind.math_block else ("span", "math-inline")
            return f'<{tag} class="{cls}">{escape(attrs["expression"], quote=False)}</{tag}>'
        if kind == ElementKind.raw_html:
            return attrs["html"]
        raise ValueError(f"HtmlContext cannot render {kind.value}")
