"""Structured Cypher statements with a declared return specification.

A ``Statement`` is an immutable value. Every builder method returns a new
statement, so a base statement can be shared and extended freely::

    diseases = (
        Statement.match("(x:Disease)")
        .where("x.name = $name", name="Flu")
        .returning("x", ["Disease"])
    )
    text, parameters = diseases.render()

Parameter values never appear in the rendered text; they travel to the
adapter in the separate parameter mapping.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .targets import ProjectionTarget, as_target

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Clause(str, Enum):
    """Leading clause of a statement."""

    MATCH = "MATCH"
    OPTIONAL_MATCH = "OPTIONAL MATCH"
    CREATE = "CREATE"
    MERGE = "MERGE"


def quote_identifier(name: str) -> str:
    """Back-tick quote a name unless it is a plain Cypher identifier."""
    if _IDENTIFIER.match(name):
        return name
    return "`" + name.replace("`", "``") + "`"


@dataclass(frozen=True)
class Statement:
    """One query intent: pattern, filters, updates and return specification."""

    pattern: str
    clause: Clause = Clause.MATCH
    conditions: tuple[str, ...] = ()
    parameters: Mapping[str, Any] = field(default_factory=dict)
    returns: tuple[tuple[str, ProjectionTarget], ...] = ()
    expressions: Mapping[str, str] = field(default_factory=dict)
    updates: tuple[str, ...] = ()
    order_by: tuple[str, ...] = ()
    skip: int | None = None
    limit: int | None = None
    distinct: bool = False

    # Constructors

    @classmethod
    def match(cls, pattern: str) -> "Statement":
        return cls(pattern)

    @classmethod
    def optional_match(cls, pattern: str) -> "Statement":
        return cls(pattern, clause=Clause.OPTIONAL_MATCH)

    @classmethod
    def create(cls, pattern: str) -> "Statement":
        return cls(pattern, clause=Clause.CREATE)

    @classmethod
    def merge(cls, pattern: str) -> "Statement":
        return cls(pattern, clause=Clause.MERGE)

    # Return specification

    @property
    def return_spec(self) -> dict[str, ProjectionTarget]:
        """Return specification as an ordered mapping."""
        return dict(self.returns)

    def returning(
        self,
        column: str,
        target: Any = None,
        expression: str | None = None,
    ) -> "Statement":
        """Add or overwrite one return column.

        Args:
            column: Result column name.
            target: Projection target or shorthand accepted by ``as_target``.
            expression: Cypher expression for the column. Defaults to the
                column name itself, i.e. returning a bound variable.

        Returns:
            New statement; an overwritten column keeps its position.
        """
        entry = (column, as_target(target))
        columns = [name for name, _ in self.returns]
        if column in columns:
            returns = list(self.returns)
            returns[columns.index(column)] = entry
        else:
            returns = [*self.returns, entry]

        expressions = {k: v for k, v in self.expressions.items() if k != column}
        if expression is not None:
            expressions[column] = expression
        return replace(self, returns=tuple(returns), expressions=expressions)

    def returning_many(self, **columns: Any) -> "Statement":
        """Add several return columns in keyword order."""
        statement = self
        for column, target in columns.items():
            statement = statement.returning(column, target)
        return statement

    # Filters and parameters

    def where(self, condition: str, **parameters: Any) -> "Statement":
        """Add a WHERE condition (AND-ed with existing ones) and bind its parameters."""
        return replace(
            self,
            conditions=(*self.conditions, condition),
            parameters={**self.parameters, **parameters},
        )

    def with_parameters(self, **parameters: Any) -> "Statement":
        return replace(self, parameters={**self.parameters, **parameters})

    # Updates

    def set_properties(self, variable: str, properties: Mapping[str, Any]) -> "Statement":
        """Merge a property mapping into a bound variable with ``SET v += $v_props``."""
        param = f"{variable}_props"
        return replace(
            self,
            updates=(*self.updates, f"SET {quote_identifier(variable)} += ${param}"),
            parameters={**self.parameters, param: dict(properties)},
        )

    def delete(self, *variables: str, detach: bool = False) -> "Statement":
        keyword = "DETACH DELETE" if detach else "DELETE"
        names = ", ".join(quote_identifier(v) for v in variables)
        return replace(self, updates=(*self.updates, f"{keyword} {names}"))

    # Ordering and paging

    def order(self, *expressions: str) -> "Statement":
        return replace(self, order_by=(*self.order_by, *expressions))

    def paginate(self, skip: int | None = None, limit: int | None = None) -> "Statement":
        if skip is not None and int(skip) < 0:
            raise ValueError("skip must be non-negative")
        if limit is not None and int(limit) < 0:
            raise ValueError("limit must be non-negative")
        return replace(
            self,
            skip=int(skip) if skip is not None else self.skip,
            limit=int(limit) if limit is not None else self.limit,
        )

    def unique(self) -> "Statement":
        return replace(self, distinct=True)

    # Rendering

    def render(self) -> tuple[str, dict[str, Any]]:
        """Render to Cypher text and a separate parameter mapping."""
        lines = [f"{self.clause.value} {self.pattern}"]
        parameters = dict(self.parameters)

        if self.conditions:
            lines.append("WHERE " + " AND ".join(f"({c})" for c in self.conditions))
        lines.extend(self.updates)

        if self.returns:
            items = []
            for column, _ in self.returns:
                name = quote_identifier(column)
                expression = self.expressions.get(column)
                items.append(f"{expression} AS {name}" if expression else name)
            keyword = "RETURN DISTINCT" if self.distinct else "RETURN"
            lines.append(f"{keyword} " + ", ".join(items))

            if self.order_by:
                lines.append("ORDER BY " + ", ".join(self.order_by))
            if self.skip is not None:
                lines.append("SKIP $_skip")
                parameters["_skip"] = self.skip
            if self.limit is not None:
                lines.append("LIMIT $_limit")
                parameters["_limit"] = self.limit

        return "\n".join(lines), parameters


def new_statement(pattern: str) -> Statement:
    """Create a MATCH statement with no filter and no return specification."""
    return Statement.match(pattern)


def with_return(
    statement: Statement,
    column: str,
    target: Any = None,
    expression: str | None = None,
) -> Statement:
    return statement.returning(column, target, expression)


def render(statement: Statement) -> tuple[str, dict[str, Any]]:
    return statement.render()
