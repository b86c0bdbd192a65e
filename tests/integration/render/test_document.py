"""Integration tests for the frontmatter -> events -> render pipeline.

Each test renders the canonical document below through TreeContext and
asserts stable expected values. Read this file top-to-bottom as a reference
for what a full render produces.

Canonical document
------------------
    ---
    title: Render Test
    ---

    # Introduction

    <Note kind="info">

    Some **bold** advice.

    </Note>

    - [x] shipped
    - [ ] pending

    Inline <Counter initial="3"/> and $e^x$.

Top-level layout with maths enabled:
    [heading level=1]     "Introduction"
    [custom_component]    Note, children = [paragraph]
    [list ordered=False]  two items, each starting with a checkbox
    [paragraph]           text, custom_component Counter, text, math_inline, text

Construction order: Note before Counter (document order, inner first).
"""

import pytest

from mdview.config import RenderOptions
from mdview.contexts.tree import Node, TreeContext
from mdview.core.models import ElementKind
from mdview.core.render import render_markdown


SOURCE = """\
---
title: Render Test
---

# Introduction

<Note kind="info">

Some **bold** advice.

</Note>

- [x] shipped
- [ ] pending

Inline <Counter initial="3"/> and $e^x$.
"""


@pytest.fixture(name="built")
def built_fixture():
    """Constructor calls in order, as (name, props)."""
    return []


@pytest.fixture(name="components")
def components_fixture(built):
    def note(props):
        built.append(("Note", props))
        return Node(kind="note", attrs={"kind": props.get("kind")}, children=list(props.children))

    def counter(props):
        built.append(("Counter", props))
        return Node(kind="text", text=str(props.get_parsed("initial", int) * 2))

    return {"Note": note, "Counter": counter}


@pytest.fixture(name="rendered")
def rendered_fixture(components):
    context = TreeContext()
    root = render_markdown(SOURCE, context, options=RenderOptions(maths=True), components=components)
    return context, root


def test_top_level_layout(rendered):
    _, root = rendered
    assert [c.kind for c in root.children] == ["heading", "custom_component", "list", "paragraph"]


def test_frontmatter_passed_verbatim(rendered):
    context, _ = rendered
    assert context.frontmatter == "title: Render Test"


def test_block_component_wraps_markdown(rendered, built):
    _, root = rendered
    name, props = built[0]
    assert name == "Note"
    assert props.attributes == {"kind": "info"}
    assert props.children_source.strip() == "Some **bold** advice."
    note = root.children[1].children[0]
    assert note.kind == "note"
    assert note.children[0].kind == "paragraph"
    assert note.text_content() == "Some bold advice."


def test_attribute_range_points_into_source(rendered, built):
    assert built
    for _, props in built:
        for name in props.attributes:
            start, end = props.get_attribute(name).range
            assert SOURCE[start:end] == props.get(name)


def test_task_list(rendered):
    _, root = rendered
    items = root.find_all(ElementKind.list_item)
    assert [i.children[0].attrs["checked"] for i in items] == [True, False]
    assert [i.text_content() for i in items] == ["shipped", "pending"]


def test_inline_component_and_math(rendered, built):
    _, root = rendered
    para = root.children[3]
    assert [c.kind for c in para.children] == ["text", "custom_component", "text", "math_inline", "text"]
    assert para.children[1].text_content() == "6"
    assert para.children[3].attrs["expression"] == "e^x"
    assert [name for name, _ in built] == ["Note", "Counter"]


def test_render_is_deterministic(components):
    first = render_markdown(SOURCE, TreeContext(), options=RenderOptions(maths=True), components=components)
    second = render_markdown(SOURCE, TreeContext(), options=RenderOptions(maths=True), components=components)
    assert first == second
    assert first.span is None

    heading, note, _, para = first.children
    assert SOURCE[slice(*heading.span)] == "# Introduction\n"
    assert SOURCE[slice(*note.span)].startswith('<Note kind="info">')
    assert SOURCE[slice(*note.span)].endswith("</Note>")
    counter, math = para.children[1], para.children[3]
    assert SOURCE[slice(*counter.span)] == '<Counter initial="3"/>'
    assert SOURCE[slice(*math.span)] == "$e^x$"
    assert [n.span for n in first.walk()] == [n.span for n in second.walk()]
