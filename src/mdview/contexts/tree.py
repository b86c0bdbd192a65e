"""Reference context building a plain, serializable node tree"""

from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel

from mdview.core.components.props import ComponentProps
from mdview.core.context import Context
from mdview.core.models import ElementKind, StyleLink


class Node(BaseModel):
    """A framework-independent output node."""
    kind: str                       # ElementKind value, "text", or "document"
    attrs: dict[str, Any] = {}
    children: list["Node"] = []
    text: Optional[str] = None      # text nodes only
    span: Optional[tuple[int, int]] = None  # source range, None for the document

    def walk(self) -> Iterator["Node"]:
        """Depth-first, document-order traversal including self."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, kind: ElementKind | str) -> list["Node"]:
        kind = kind.value if isinstance(kind, ElementKind) else kind
        return [n for n in self.walk() if n.kind == kind]

    def text_content(self) -> str:
        return "".join(n.text for n in self.walk() if n.text is not None)


class TreeContext(Context):
    """Collects Node objects; useful for tests, tooling, and JSON export."""

    def __init__(self):
        self.frontmatter: Optional[str] = None
        self.stylesheets: list[StyleLink] = []
        self.debug_info: list[str] = []

    def create_element(self, kind: ElementKind, attrs: dict[str, Any], children: list, span: tuple[int, int]) -> Node:
        return Node(kind=kind.value, attrs=attrs, children=children, span=span)

    def create_text(self, text: str, span: tuple[int, int]) -> Node:
        return Node(kind="text", text=text, span=span)

    def create_component(self, name: str, constructor: Callable[[ComponentProps], Any], props: ComponentProps,
                         span: tuple[int, int]) -> Node:
        result = constructor(props)
        if result is None:
            children = []
        elif isinstance(result, Node):
            children = [result]
        else:
            children = [self.create_text(str(result), span)]
        return Node(
            kind=ElementKind.custom_component.value,
            attrs={"name": name, "attributes": props.attributes, "children_range": list(props.children_range)},
            children=children,
            span=span,
        )

    def finalize(self, children: list) -> Node:
        return Node(kind="document", children=children)

    def set_frontmatter(self, frontmatter: str) -> None:
        self.frontmatter = frontmatter

    def mount_stylesheet(self, link: StyleLink) -> None:
        self.stylesheets.append(link)

    def send_debug_info(self, info: list[str]) -> None:
        self.debug_info.extend(info)
