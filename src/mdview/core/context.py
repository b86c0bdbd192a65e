"""The abstract rendering interface a host framework implements"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from mdview.core.components.props import ComponentProps
from mdview.core.models import ElementKind, LinkDescription, StyleLink


logger = logging.getLogger(__name__)


class Context(ABC):
    """Receives node-creation instructions from the renderer.

    Nodes are opaque to the core: whatever create_* returns is stored as a
    child and handed back later in `children` lists. Every span is the
    (start, end) range of the node's markdown in the full source, so a host
    can map a node back to the text that produced it.
    """

    @abstractmethod
    def create_element(self, kind: ElementKind, attrs: dict[str, Any], children: list, span: tuple[int, int]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def create_text(self, text: str, span: tuple[int, int]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def finalize(self, children: list) -> Any:
        """Wrap the top-level nodes into the document root."""
        raise NotImplementedError

    def create_component(self, name: str, constructor: Callable[[ComponentProps], Any], props: ComponentProps,
                         span: tuple[int, int]) -> Any:
        """Build a custom component node; exceptions abort the render."""
        return constructor(props)

    def render_link(self, link: LinkDescription) -> Any:
        """Build a link or image node; override to route links through the host.

        Raise LinkRenderError to show a visible error in place of the link.
        """
        kind = ElementKind.image if link.image else ElementKind.link
        return self.create_element(kind, link.attrs, link.content, link.span)

    def set_frontmatter(self, frontmatter: str) -> None:
        pass

    def mount_stylesheet(self, link: StyleLink) -> None:
        pass

    def send_debug_info(self, info: list[str]) -> None:
        logger.debug("Event stream (%d events):\n%s", len(info), "\n".join(info))
