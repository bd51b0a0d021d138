"""Unit tests for statements and convenience queries."""

import pytest

from graphquery.graph.entity import Edge, EntityKind
from graphquery.graph.errors import InvalidTarget
from graphquery.graph.queries import (
    count_statement,
    edge_pattern,
    exists_statement,
    get_statement,
    node_pattern,
)
from graphquery.graph.statement import (
    Statement,
    new_statement,
    quote_identifier,
    render,
    with_return,
)
from graphquery.graph.targets import ANONYMOUS, RAW, TypedEntity


class TestStatement:
    """Tests for Statement building and rendering."""

    def test_new_statement_is_empty(self):
        """Test that a new statement has no filter or return spec."""
        statement = new_statement("(x:Disease)")

        assert statement.parameters == {}
        assert statement.returns == ()
        assert render(statement) == ("MATCH (x:Disease)", {})

    def test_with_return_does_not_mutate(self):
        """Test that adding a return column yields a new statement."""
        base = new_statement("(x)")
        extended = with_return(base, "x", ["Disease"])

        assert base.returns == ()
        assert extended.returns == (("x", TypedEntity(("Disease",))),)

    def test_overwrite_keeps_position(self):
        """Test that overwriting a column keeps insertion order."""
        statement = (
            Statement.match("(a)-->(b)")
            .returning("a")
            .returning("b", True)
            .returning("a", "Disease")
        )

        assert list(statement.return_spec) == ["a", "b"]
        assert statement.return_spec["a"] == TypedEntity(("Disease",))
        assert statement.return_spec["b"] is ANONYMOUS

    def test_returning_many(self):
        """Test keyword return columns keep their order."""
        statement = Statement.match("(a)-->(b)").returning_many(b=None, a=True)

        assert list(statement.return_spec) == ["b", "a"]

    def test_render_full(self):
        """Test rendering every clause."""
        statement = (
            Statement.match("(x:Disease)")
            .where("x.name = $name", name="Flu")
            .where("x.severity > $min", min=2)
            .returning("x", "Disease")
            .returning("total", RAW, expression="count(*)")
            .order("x.name")
            .paginate(skip=5, limit=10)
            .unique()
        )

        text, parameters = statement.render()

        assert text == (
            "MATCH (x:Disease)\n"
            "WHERE (x.name = $name) AND (x.severity > $min)\n"
            "RETURN DISTINCT x, count(*) AS total\n"
            "ORDER BY x.name\n"
            "SKIP $_skip\n"
            "LIMIT $_limit"
        )
        assert parameters == {"name": "Flu", "min": 2, "_skip": 5, "_limit": 10}

    def test_values_never_inlined(self):
        """Test that parameter values stay out of the text."""
        statement = Statement.match("(x)").where("x.name = $name", name="'; DROP")

        text, parameters = statement.render()

        assert "DROP" not in text
        assert parameters["name"] == "'; DROP"

    def test_render_is_idempotent(self):
        """Test that rendering twice yields identical pairs."""
        statement = Statement.match("(x)").where("x.id = $id", id=1).returning("x").paginate(limit=3)

        first = statement.render()
        second = statement.render()

        assert first == second
        assert first[1] is not second[1]

    def test_updates(self):
        """Test SET and DELETE fragments."""
        statement = (
            Statement.merge("(x:Claim {id: $id})")
            .with_parameters(id="c-1")
            .set_properties("x", {"status": "open"})
        )
        text, parameters = statement.render()

        assert text == "MERGE (x:Claim {id: $id})\nSET x += $x_props"
        assert parameters == {"id": "c-1", "x_props": {"status": "open"}}

        text, _ = Statement.match("(x:Claim)").delete("x", detach=True).render()
        assert text == "MATCH (x:Claim)\nDETACH DELETE x"

    def test_optional_match_and_create(self):
        """Test the alternative leading clauses."""
        assert Statement.optional_match("(x)").render()[0] == "OPTIONAL MATCH (x)"
        assert Statement.create("(x:Claim)").render()[0] == "CREATE (x:Claim)"

    def test_negative_paging_rejected(self):
        """Test that negative skip or limit fails."""
        with pytest.raises(ValueError):
            Statement.match("(x)").paginate(limit=-1)

    def test_quote_identifier(self):
        """Test back-tick quoting of unusual names."""
        assert quote_identifier("name") == "name"
        assert quote_identifier("first name") == "`first name`"
        assert quote_identifier("we`ird") == "`we``ird`"


class TestQueries:
    """Tests for count, exists and get statements."""

    def test_node_pattern(self):
        """Test that property values are parameter-bound."""
        pattern, parameters = node_pattern("x", ["Disease", "Chronic"], {"name": "Gout"})

        assert pattern == "(x:Disease:Chronic {name: $x_p0})"
        assert parameters == {"x_p0": "Gout"}

    def test_pattern_from_pairs(self):
        """Test that property filters may be a sequence of pairs."""
        pattern, parameters = node_pattern("x", "Disease", [("name", "Gout"), ("icd", "M10")])

        assert pattern == "(x:Disease {name: $x_p0, icd: $x_p1})"
        assert parameters == {"x_p0": "Gout", "x_p1": "M10"}

    def test_edge_pattern(self):
        """Test relationship patterns with several types."""
        pattern, parameters = edge_pattern("r", ["COVERS", "INSURES"], {"since": 2020})

        assert pattern == "()-[r:COVERS|INSURES {since: $r_p0}]->()"
        assert parameters == {"r_p0": 2020}

    def test_count_statement(self):
        """Test counting a plain pattern."""
        text, parameters = count_statement("(x:Disease)").render()

        assert text == "MATCH (x:Disease)\nRETURN count(x) AS count"
        assert parameters == {}

    def test_count_statement_from_statement(self):
        """Test that a statement matcher keeps its filter but not its returns."""
        matcher = Statement.match("(x:Disease)").where("x.name = $name", name="Flu").returning("x")

        text, parameters = count_statement(matcher).render()

        assert text == "MATCH (x:Disease)\nWHERE (x.name = $name)\nRETURN count(x) AS count"
        assert parameters == {"name": "Flu"}

    def test_exists_statement(self):
        """Test that exists asks for at most one row."""
        text, parameters = exists_statement("(x:Claim)").render()

        assert text == "MATCH (x:Claim)\nRETURN x\nLIMIT $_limit"
        assert parameters == {"_limit": 1}

    def test_get_nodes(self):
        """Test get for nodes."""
        statement = get_statement(EntityKind.NODE, ["Disease"], {"name": "Flu"})
        text, parameters = statement.render()

        assert text == "MATCH (x:Disease {name: $x_p0})\nRETURN x"
        assert parameters == {"x_p0": "Flu"}
        assert statement.return_spec == {"x": TypedEntity(("Disease",))}

    def test_get_edges(self):
        """Test get for edges using the Edge class as kind."""
        statement = get_statement(Edge, "COVERS")
        text, _ = statement.render()

        assert text == "MATCH ()-[x:COVERS]->()\nRETURN x"
        assert statement.return_spec["x"].kind is EntityKind.EDGE

    def test_count_statement_drops_updates(self):
        """Test that a statement matcher never carries its writes into a count."""
        matcher = Statement.optional_match("(x:Claim)").where("x.amount > $min", min=10).delete("x", detach=True)

        text, parameters = count_statement(matcher).render()

        assert text == "MATCH (x:Claim)\nWHERE (x.amount > $min)\nRETURN count(x) AS count"
        assert parameters == {"min": 10}

    def test_exists_statement_drops_updates(self):
        """Test that exists on a CREATE or SET statement only matches."""
        matcher = Statement.create("(x:Claim)").set_properties("x", {"amount": 1})

        text, _ = exists_statement(matcher).render()

        assert text == "MATCH (x:Claim)\nRETURN x\nLIMIT $_limit"

    def test_get_labels_from_set(self):
        """Test that any iterable of labels is normalised."""
        statement = get_statement(EntityKind.NODE, {"Disease"})

        assert statement.render()[0] == "MATCH (x:Disease)\nRETURN x"
        assert statement.return_spec == {"x": TypedEntity(("Disease",))}

    def test_get_invalid_labels(self):
        """Test that labels are validated before the statement is built."""
        with pytest.raises(InvalidTarget):
            get_statement(EntityKind.NODE, [42])
        with pytest.raises(InvalidTarget):
            get_statement(EntityKind.EDGE, [])
        with pytest.raises(InvalidTarget):
            get_statement("vertex", "Disease")
