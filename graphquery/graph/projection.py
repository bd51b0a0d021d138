"""Projection of raw backend rows into typed results."""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from .entity import Edge, EntityKind, Node, label_name, label_names
from .errors import DecodeFailed, ShapeMismatch
from .targets import AnonymousEntity, ProjectionTarget, Raw, TypedEntity

logger = logging.getLogger(__name__)

Decoder = Callable[[Node | Edge], Any]
RawRow = Mapping[str, Any]
ReturnSpec = Mapping[str, ProjectionTarget] | Sequence[tuple[str, ProjectionTarget]]


class _Missing:
    """Marker for a declared column absent from a backend row."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


class DecoderRegistry:
    """Maps label sets to functions that turn entities into domain values."""

    def __init__(self):
        self._decoders: dict[frozenset[str], Decoder] = {}

    def register(self, labels: Any, decoder: Decoder | None = None):
        """Register a decoder for a label set.

        Can be used directly or as a decorator::

            @registry.register(["Disease"])
            def disease(node):
                return Disease(**node.properties)
        """
        key = frozenset(label_names(labels))

        if decoder is None:
            def decorator(func: Decoder) -> Decoder:
                self._decoders[key] = func
                return func

            return decorator

        self._decoders[key] = decoder
        return decoder

    def lookup(self, labels: Iterable[Any]) -> Decoder | None:
        """Find the decoder for a target's labels.

        Explicit registrations win; otherwise the first class label that can
        build itself from an entity is used.
        """
        labels = tuple(labels)
        decoder = self._decoders.get(frozenset(label_names(labels)))
        if decoder is not None:
            return decoder
        for label in labels:
            if isinstance(label, type):
                implicit = _class_decoder(label)
                if implicit is not None:
                    return implicit
        return None

    def __contains__(self, labels: Any) -> bool:
        return frozenset(label_names(labels)) in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)


def _class_decoder(cls: type) -> Decoder | None:
    from_entity = getattr(cls, "from_entity", None)
    if callable(from_entity):
        return from_entity
    if issubclass(cls, BaseModel):
        return lambda entity: cls.model_validate(entity.properties)
    return None


class ProjectionEngine:
    """Turns raw rows into projected rows following a return specification."""

    def __init__(self, decoders: DecoderRegistry | None = None):
        """Initialize the engine.

        Args:
            decoders: Registry consulted for typed targets. Empty if not provided.
        """
        self._decoders = decoders or DecoderRegistry()

    @property
    def decoders(self) -> DecoderRegistry:
        return self._decoders

    def project(self, rows: Sequence[RawRow], returns: ReturnSpec | None) -> list[Any]:
        """Project every row, preserving order and count.

        Args:
            rows: Raw rows from the adapter. Never modified.
            returns: Return specification. Empty or None passes rows through.

        Returns:
            One projected row per raw row, or the raw rows themselves.

        Raises:
            ShapeMismatch: A value cannot be wrapped as the requested entity.
            DecodeFailed: A registered decoder raised.
        """
        spec = list(returns.items() if isinstance(returns, Mapping) else returns or ())
        if not spec:
            return list(rows)

        projected = [self.project_row(row, spec) for row in rows]
        logger.debug(f"Projected {len(projected)} rows over {len(spec)} columns")
        return projected

    def project_row(
        self,
        row: RawRow,
        spec: Iterable[tuple[str, ProjectionTarget]],
    ) -> dict[str, Any]:
        result = {}
        for column, target in spec:
            if column not in row:
                result[column] = MISSING
                continue
            result[column] = self.project_value(column, row[column], target)
        return result

    def project_value(self, column: str, value: Any, target: ProjectionTarget) -> Any:
        """Project one value according to its column's target."""
        if isinstance(target, Raw):
            return value
        if value is None:
            # OPTIONAL MATCH without a match
            return None

        if isinstance(target, AnonymousEntity):
            if isinstance(value, Edge):
                return value
            return self._build(column, value, Node.from_value)

        if isinstance(target, TypedEntity):
            if target.kind is EntityKind.EDGE:
                entity = self._build(column, value, Edge.from_value, target.labels)
            else:
                entity = self._build(column, value, Node.from_value, target.labels)
            return self._decode(entity, target)

        raise TypeError(f"Unknown projection target {target!r}")

    @staticmethod
    def _build(column: str, value: Any, factory: Callable[..., Any], *args: Any) -> Any:
        try:
            return factory(value, *args)
        except (TypeError, ValueError) as e:
            raise ShapeMismatch(column, value) from e

    def _decode(self, entity: Node | Edge, target: TypedEntity) -> Any:
        decoder = self._decoders.lookup(target.labels)
        if decoder is None:
            return entity
        try:
            return decoder(entity)
        except Exception as e:
            names = tuple(label_name(label) for label in target.labels)
            logger.warning(f"Decoder for {':'.join(names)} failed: {e}")
            raise DecodeFailed(names, e) from e
