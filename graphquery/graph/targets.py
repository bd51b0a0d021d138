"""Projection targets declared per return column."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .entity import EntityKind, label_names


@dataclass(frozen=True)
class Raw:
    """Pass the backend value through unchanged."""

    def __repr__(self) -> str:
        return "RAW"


@dataclass(frozen=True)
class AnonymousEntity:
    """Wrap the value as a node without declared labels."""

    def __repr__(self) -> str:
        return "ANONYMOUS"


@dataclass(frozen=True)
class TypedEntity:
    """Wrap the value as an entity carrying the given labels.

    ``labels`` keeps what the caller passed (strings, enums or classes) so
    class labels can still act as decoders; ``names`` holds the label text.
    """

    labels: tuple[Any, ...]
    kind: EntityKind = EntityKind.NODE

    def __post_init__(self):
        labels = self.labels
        if isinstance(labels, (str, Enum, type)):
            labels = (labels,)
        object.__setattr__(self, "labels", tuple(labels))
        object.__setattr__(self, "kind", EntityKind(self.kind))
        if self.kind is EntityKind.EDGE and not self.labels:
            raise ValueError("Edge targets need at least one relationship type")

    @property
    def names(self) -> tuple[str, ...]:
        return label_names(self.labels)


RAW = Raw()
ANONYMOUS = AnonymousEntity()

ProjectionTarget = Raw | AnonymousEntity | TypedEntity


def as_target(value: Any) -> ProjectionTarget:
    """Coerce return-column shorthand into a projection target.

    ``None`` means raw, ``True`` means an anonymous node, and a label, class
    or sequence of labels means a typed node.
    """
    if isinstance(value, (Raw, AnonymousEntity, TypedEntity)):
        return value
    if value is None:
        return RAW
    if value is True:
        return ANONYMOUS
    if isinstance(value, (str, Enum, type)):
        return TypedEntity((value,))
    if isinstance(value, Iterable) and not isinstance(value, (bytes, dict)):
        labels = tuple(value)
        if all(isinstance(label, (str, Enum, type)) for label in labels):
            return TypedEntity(labels)
    raise TypeError(f"Cannot use {value!r} as a projection target")
