"""Unit tests for core/components/props.py"""

import pytest

from mdview.core.components.props import Attribute, ComponentProps, ComponentRegistry, PropsBuilder
from mdview.core.components.tags import parse_tag
from mdview.errors import ComponentCreationError


def _props(source: str, tag_start: int, tag_end: int, children_end=None, children=()):
    tag = parse_tag(source[tag_start:tag_end])
    return PropsBuilder(tag, tag_start, tag_end, source).finish(children_end, children)


@pytest.fixture(name="counter")
def counter_fixture():
    source = 'Some text <Counter initial="5" step="x"/>'
    return _props(source, 10, len(source))


def test_props_cannot_be_constructed_directly():
    with pytest.raises(TypeError):
        ComponentProps()


def test_props_attributes(counter):
    """attributes is a fresh {name: value} dict."""
    assert counter.name == "Counter"
    assert counter.attributes == {"initial": "5", "step": "x"}
    counter.attributes["initial"] = "9"
    assert counter.get("initial") == "5"


def test_get_attribute_range_in_source(counter):
    """Attribute ranges index the full source, not the tag."""
    attr = counter.get_attribute("initial")
    assert attr == Attribute("5", (28, 29))
    assert 'Some text <Counter initial="5" step="x"/>'[28:29] == "5"
    assert counter.get_attribute("missing") is None


def test_get_with_default(counter):
    assert counter.get("missing") is None
    assert counter.get("missing", "d") == "d"


def test_get_parsed(counter):
    assert counter.get_parsed("initial", int) == 5


def test_get_parsed_missing(counter):
    """A missing required attribute names the component and the attribute."""
    with pytest.raises(ComponentCreationError, match="please provide the attribute `count`") as exc:
        counter.get_parsed("count", int)
    assert exc.value.name == "Counter"


def test_get_parsed_invalid(counter):
    with pytest.raises(ComponentCreationError, match="invalid value 'x' for `step`"):
        counter.get_parsed("step", int)


def test_get_parsed_optional(counter):
    assert counter.get_parsed_optional("missing", int) is None
    assert counter.get_parsed_optional("initial", float) == 5.0
    with pytest.raises(ComponentCreationError):
        counter.get_parsed_optional("step", int)


def test_self_closing_children_range_is_empty(counter):
    """A self-closing tag gets an empty range at the tag end."""
    assert counter.children_range == (41, 41)
    assert counter.children_source == ""
    assert counter.children == ()


def test_children_range_between_tags():
    source = "<Box>**hi**</Box>"
    props = _props(source, 0, 5, children_end=11, children=("node",))
    assert props.children_range == (5, 11)
    assert props.children_source == "**hi**"
    assert props.children == ("node",)


def test_props_are_immutable(counter):
    with pytest.raises(AttributeError):
        counter.name = "Other"
    with pytest.raises(AttributeError):
        counter._attributes = {}
    with pytest.raises(AttributeError):
        del counter._name


def test_registry_lookup():
    registry = ComponentRegistry({"Box": lambda props: "box"}, Counter=lambda props: "counter")
    assert set(registry) == {"Box", "Counter"}
    assert len(registry) == 2
    assert "Box" in registry
    assert "box" not in registry
    assert registry["Counter"](None) == "counter"


def test_registry_is_read_only():
    registry = ComponentRegistry({"Box": lambda props: "box"})
    with pytest.raises(TypeError):
        registry["Other"] = lambda props: None


def test_registry_rejects_non_callables():
    with pytest.raises(TypeError, match="not callable"):
        ComponentRegistry({"Box": "not a function"})
