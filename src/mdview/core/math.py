"""Math delegate: hands $..$ and $$..$$ expressions to a renderer"""

from typing import TYPE_CHECKING, Any, Protocol

from mdview.core.models import ElementKind
from mdview.errors import MathRenderError

if TYPE_CHECKING:
    from mdview.core.context import Context


class MathDelegate(Protocol):
    def render(self, context: "Context", expression: str, display: bool, span: tuple[int, int]) -> Any:
        """Return a node for expression, or raise MathRenderError."""
        ...


class ElementMathDelegate:
    """Emit math_inline / math_block elements for client-side typesetting."""

    def render(self, context: "Context", expression: str, display: bool, span: tuple[int, int]) -> Any:
        if not expression.strip():
            raise MathRenderError("empty math expression")
        kind = ElementKind.math_block if display else ElementKind.math_inline
        return context.create_element(kind, {"expression": expression, "display": display}, [], span)


def math_literal(expression: str, display: bool) -> str:
    return f"$${expression}$$" if display else f"${expression}$"


def math_error_node(context: "Context", expression: str, display: bool, span: tuple[int, int]) -> Any:
    """Visible placeholder for an expression the delegate could not render."""
    return context.create_element(
        ElementKind.inline_code,
        {"class": "math-error"},
        [context.create_text(math_literal(expression, display), span)],
        span,
    )
