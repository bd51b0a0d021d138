"""Statements behind the client's count, exists and get helpers.

Caller-supplied property values are always bound as parameters; only labels,
relationship types and property keys reach the text, quoted when needed.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import replace
from enum import Enum
from typing import Any

from .entity import Edge, EntityKind, Node, label_names
from .errors import InvalidTarget
from .statement import Statement, quote_identifier
from .targets import RAW, TypedEntity

Properties = Mapping[str, Any] | Sequence[tuple[str, Any]] | None


def _property_items(properties: Properties) -> list[tuple[str, Any]]:
    if properties is None:
        return []
    if isinstance(properties, Mapping):
        return [(str(k), v) for k, v in properties.items()]
    return [(str(k), v) for k, v in properties]


def _property_map(variable: str, properties: Properties) -> tuple[str, dict[str, Any]]:
    items = _property_items(properties)
    if not items:
        return "", {}

    prefix = re.sub(r"\W", "_", variable)
    fragments = []
    parameters = {}
    for index, (key, value) in enumerate(items):
        param = f"{prefix}_p{index}"
        fragments.append(f"{quote_identifier(key)}: ${param}")
        parameters[param] = value
    return " {" + ", ".join(fragments) + "}", parameters


def node_pattern(
    variable: str,
    labels: Any = (),
    properties: Properties = None,
) -> tuple[str, dict[str, Any]]:
    """Build ``(x:A:B {k: $x_p0})`` and its parameters."""
    names = "".join(f":{quote_identifier(name)}" for name in label_names(labels))
    props, parameters = _property_map(variable, properties)
    return f"({quote_identifier(variable)}{names}{props})", parameters


def edge_pattern(
    variable: str,
    types: Any = (),
    properties: Properties = None,
) -> tuple[str, dict[str, Any]]:
    """Build ``()-[x:A|B {k: $x_p0}]->()`` and its parameters."""
    names = "|".join(quote_identifier(name) for name in label_names(types))
    props, parameters = _property_map(variable, properties)
    type_part = f":{names}" if names else ""
    return f"()-[{quote_identifier(variable)}{type_part}{props}]->()", parameters


def entity_kind(kind: Any) -> EntityKind:
    """Accept EntityKind values, their names, or the Node / Edge classes."""
    if kind is Node:
        return EntityKind.NODE
    if kind is Edge:
        return EntityKind.EDGE
    return EntityKind(kind)


def _matcher(matcher: str | Statement) -> Statement:
    """Read-only MATCH over the matcher's pattern, conditions and parameters.

    Clauses, updates and return settings of a statement matcher are dropped.
    """
    if isinstance(matcher, Statement):
        return replace(
            Statement.match(matcher.pattern),
            conditions=matcher.conditions,
            parameters=dict(matcher.parameters),
        )
    return Statement.match(matcher)


def count_statement(matcher: str | Statement, variable: str = "x") -> Statement:
    """Count the matches of a pattern bound to ``variable``."""
    return _matcher(matcher).returning(
        "count", RAW, expression=f"count({quote_identifier(variable)})"
    )


def exists_statement(matcher: str | Statement, variable: str = "x") -> Statement:
    """Return at most one match of a pattern bound to ``variable``."""
    return _matcher(matcher).returning(variable, RAW).paginate(limit=1)


def target_labels(labels: Any) -> tuple[Any, ...]:
    """Normalise labels to a tuple, keeping classes so they can still decode.

    Raises:
        InvalidTarget: If a label is not text, an enum or a class.
    """
    if labels is None:
        return ()
    if isinstance(labels, (str, Enum, type)):
        return (labels,)
    try:
        labels = tuple(labels)
        label_names(labels)
    except TypeError as e:
        raise InvalidTarget(labels, str(e)) from e
    return labels


def get_statement(
    kind: EntityKind | str | type,
    labels: Any,
    properties: Properties = None,
    variable: str = "x",
) -> Statement:
    """Match nodes or edges by label/type and properties, typed on return.

    Raises:
        InvalidTarget: If the kind or labels cannot form a typed target.
    """
    try:
        kind = entity_kind(kind)
    except ValueError as e:
        raise InvalidTarget(kind, "unknown entity kind") from e
    labels = target_labels(labels)

    if kind is EntityKind.NODE:
        pattern, parameters = node_pattern(variable, labels, properties)
    else:
        if not labels:
            raise InvalidTarget(labels, "edges need at least one relationship type")
        pattern, parameters = edge_pattern(variable, labels, properties)

    return (
        Statement.match(pattern)
        .with_parameters(**parameters)
        .returning(variable, TypedEntity(labels, kind))
    )
