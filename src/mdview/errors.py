"""Exception hierarchy for the render engine"""


class MarkdownRenderError(Exception):
    """Base exception for all render failures."""


class ComponentCreationError(MarkdownRenderError):
    """A custom component constructor rejected its props."""

    def __init__(self, name: str, message: str):
        super().__init__(f"Custom component `{name}` failed: {message}")
        self.name = name
        self.message = message


class UnknownComponentError(ComponentCreationError):
    """A custom-looking tag has no registered constructor."""

    def __init__(self, name: str):
        super().__init__(name, "no component registered under this name")


class MarkdownSyntaxError(MarkdownRenderError):
    """The event stream is unbalanced, mismatched, or nested too deeply."""

    def __init__(self, message: str, position: int | None = None):
        where = f" at offset {position}" if position is not None else ""
        super().__init__(f"{message}{where}")
        self.position = position


class TagSyntaxError(MarkdownSyntaxError):
    """A component tag could not be parsed."""


class MathRenderError(MarkdownRenderError):
    """A math expression could not be rendered; never aborts a render."""


class LinkRenderError(MarkdownRenderError):
    """A host link hook rejected a link; never aborts a render."""
