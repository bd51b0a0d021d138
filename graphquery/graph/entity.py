"""Typed graph entities that query results are projected into."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    """Kinds of graph entities."""

    NODE = "node"
    EDGE = "edge"


def label_name(label: Any) -> str:
    """Return the label string for a label given as text, enum or class.

    Classes may override the derived name with a ``__label__`` attribute.
    """
    if isinstance(label, Enum):
        return str(label.value)
    if isinstance(label, str):
        return label
    if isinstance(label, type):
        return getattr(label, "__label__", label.__name__)
    raise TypeError(f"Unsupported label {label!r}")


def label_names(labels: Any) -> tuple[str, ...]:
    """Normalize one label or an iterable of labels to a tuple of names."""
    if labels is None:
        return ()
    if isinstance(labels, (str, Enum, type)):
        return (label_name(labels),)
    return tuple(label_name(label) for label in labels)


def _string_keys(properties: Mapping[Any, Any] | None) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in (properties or {}).items():
        name = key.value if isinstance(key, Enum) else str(key)
        if name in result:
            raise ValueError(f"Duplicate property key '{name}'")
        result[name] = value
    return result


@dataclass(frozen=True)
class Node:
    """Node-like entity: a label set and string-keyed properties."""

    labels: tuple[str, ...] = ()
    properties: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "labels", label_names(self.labels))
        object.__setattr__(self, "properties", _string_keys(self.properties))

    def __getitem__(self, key: str) -> Any:
        return self.properties[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def has_label(self, label: Any) -> bool:
        return label_name(label) in self.labels

    @classmethod
    def from_value(cls, value: Any, labels: Iterable[Any] = ()) -> "Node":
        """Build a node from a property mapping or a node payload.

        Args:
            value: Property mapping or ``Node`` returned by an adapter.
            labels: Labels to attach ahead of any the payload already has.

        Raises:
            TypeError: If the value is not node-shaped.
        """
        declared = label_names(labels)
        if isinstance(value, Node):
            extra = tuple(label for label in value.labels if label not in declared)
            return cls(declared + extra, value.properties, value.id)
        if isinstance(value, Mapping):
            return cls(declared, value)
        raise TypeError(f"Cannot build a node from {type(value).__name__}")


@dataclass(frozen=True)
class Edge:
    """Edge-like entity: a type, properties and its two endpoint ids."""

    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    start: str | None = None
    end: str | None = None
    id: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "type", label_name(self.type))
        object.__setattr__(self, "properties", _string_keys(self.properties))

    def __getitem__(self, key: str) -> Any:
        return self.properties[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    @property
    def labels(self) -> tuple[str, ...]:
        return (self.type,)

    @classmethod
    def from_value(cls, value: Any, types: Iterable[Any] = ()) -> "Edge":
        """Build an edge from a property mapping or an edge payload.

        Args:
            value: Property mapping or ``Edge`` returned by an adapter.
            types: Accepted relationship types. A bare mapping takes the first.

        Raises:
            TypeError: If the value is not edge-shaped or its type is not accepted.
        """
        accepted = label_names(types)
        if isinstance(value, Edge):
            if accepted and value.type not in accepted:
                raise TypeError(f"Edge has type {value.type}, expected one of {accepted}")
            return value
        if isinstance(value, Mapping):
            if not accepted:
                raise TypeError("An edge type is required to build an edge from properties")
            return cls(accepted[0], value)
        raise TypeError(f"Cannot build an edge from {type(value).__name__}")


def to_plain(value: Any) -> Any:
    """Convert entities nested in a value into JSON-friendly dicts."""
    if isinstance(value, Node):
        return {"id": value.id, "labels": list(value.labels), "properties": to_plain(value.properties)}
    if isinstance(value, Edge):
        return {
            "id": value.id,
            "type": value.type,
            "start": value.start,
            "end": value.end,
            "properties": to_plain(value.properties),
        }
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
