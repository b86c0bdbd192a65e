"""Custom component props, their builder, and the component registry"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Iterator, NamedTuple, Optional, TypeVar

from mdview.core.components.tags import HtmlTag, TagForm
from mdview.errors import ComponentCreationError


T = TypeVar("T")


class Attribute(NamedTuple):
    value: str
    range: tuple[int, int]   # value location in the full source


class ComponentProps:
    """Immutable arguments handed to a component constructor.

    For example,

        <MyBox color="blue">

        **hey !**

        </MyBox>

    gives props named "MyBox" with attributes {"color": "blue"}, the rendered
    paragraph as children, and children_range spanning the markdown between
    the two tags. Only the renderer builds these; calling the class raises.
    """

    __slots__ = ("_name", "_attributes", "_children", "_children_range", "_source")

    def __init__(self, *args, **kwargs):
        raise TypeError("ComponentProps are created by the renderer, not by callers")

    @classmethod
    def _create(cls, name: str, attributes: dict[str, Attribute], children: tuple,
                children_range: tuple[int, int], source: str) -> "ComponentProps":
        props = object.__new__(cls)
        object.__setattr__(props, "_name", name)
        object.__setattr__(props, "_attributes", MappingProxyType(dict(attributes)))
        object.__setattr__(props, "_children", tuple(children))
        object.__setattr__(props, "_children_range", children_range)
        object.__setattr__(props, "_source", source)
        return props

    def __setattr__(self, key, value):
        raise AttributeError("ComponentProps are immutable")

    def __delattr__(self, key):
        raise AttributeError("ComponentProps are immutable")

    def __repr__(self) -> str:
        return f"ComponentProps(name={self._name!r}, attributes={self.attributes!r}, children_range={self._children_range!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def attributes(self) -> dict[str, str]:
        """A fresh {name: value} dict."""
        return {k: a.value for k, a in self._attributes.items()}

    @property
    def children(self) -> tuple:
        """Finalized child nodes, already built by the context."""
        return self._children

    @property
    def children_range(self) -> tuple[int, int]:
        return self._children_range

    @property
    def children_source(self) -> str:
        """Markdown source between the opening and closing tags."""
        start, end = self._children_range
        return self._source[start:end]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        attr = self._attributes.get(name)
        return attr.value if attr is not None else default

    def get_attribute(self, name: str) -> Optional[Attribute]:
        return self._attributes.get(name)

    def get_parsed(self, name: str, parse: Callable[[str], T]) -> T:
        """Return attribute `name` converted by `parse`; missing or bad values raise."""
        value = self.get(name)
        if value is None:
            raise ComponentCreationError(self._name, f"please provide the attribute `{name}`")
        return self._convert(name, value, parse)

    def get_parsed_optional(self, name: str, parse: Callable[[str], T]) -> Optional[T]:
        """Like get_parsed, but a missing attribute gives None."""
        value = self.get(name)
        if value is None:
            return None
        return self._convert(name, value, parse)

    def _convert(self, name: str, value: str, parse: Callable[[str], T]) -> T:
        try:
            return parse(value)
        except (TypeError, ValueError) as e:
            raise ComponentCreationError(self._name, f"invalid value {value!r} for `{name}`: {e}") from e


class PropsBuilder:
    """Accumulates one custom tag's props between its start and end events."""

    def __init__(self, tag: HtmlTag, tag_start: int, tag_end: int, source: str):
        self.name = tag.name
        self.source = source
        self.children_start = tag_end
        self.attributes = {
            key: Attribute(value, (tag_start + tag.value_spans[key][0], tag_start + tag.value_spans[key][1]))
            for key, value in tag.attributes.items()
        }
        self.self_closing = tag.form == TagForm.self_closing

    def finish(self, children_end: Optional[int] = None, children: tuple = ()) -> ComponentProps:
        """Freeze the props; a self-closing tag gets an empty range at its end."""
        if self.self_closing or children_end is None:
            children_end = self.children_start
        return ComponentProps._create(
            name=self.name,
            attributes=self.attributes,
            children=children,
            children_range=(self.children_start, children_end),
            source=self.source,
        )


class ComponentRegistry(Mapping):
    """Read-only mapping of exact component name to constructor."""

    def __init__(self, components: Optional[Mapping[str, Callable[[ComponentProps], Any]]] = None, **kwargs):
        entries = dict(components or {}, **kwargs)
        for name, constructor in entries.items():
            if not callable(constructor):
                raise TypeError(f"Component {name!r} constructor is not callable")
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> Callable[[ComponentProps], Any]:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ComponentRegistry({sorted(self._entries)!r})"
