"""Root test configuration: shared contexts and component registries"""

import pytest

from mdview.contexts.tree import Node, TreeContext
from mdview.core.components.props import ComponentRegistry


class RecordingContext(TreeContext):
    """TreeContext that records every call, in order."""

    def __init__(self):
        super().__init__()
        self.calls: list[tuple] = []
        self.finalized = False

    def create_element(self, kind, attrs, children, span):
        self.calls.append(("element", kind.value))
        return super().create_element(kind, attrs, children, span)

    def create_text(self, text, span):
        self.calls.append(("text", text))
        return super().create_text(text, span)

    def create_component(self, name, constructor, props, span):
        self.calls.append(("component", name))
        return super().create_component(name, constructor, props, span)

    def finalize(self, children):
        self.finalized = True
        return super().finalize(children)


@pytest.fixture(name="context")
def context_fixture():
    return RecordingContext()


@pytest.fixture(name="captured")
def captured_fixture():
    """Props handed to constructors built by the `registry` fixture."""
    return []


@pytest.fixture(name="registry")
def registry_fixture(captured):
    def make(name):
        def constructor(props):
            captured.append(props)
            return Node(kind="text", text=f"[{name}]")
        return constructor

    return ComponentRegistry({name: make(name) for name in ("Counter", "Outer", "Inner", "Box", "my-widget")})
