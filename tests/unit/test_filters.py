"""Unit tests for weaviate_hub.orch.filters."""

import pytest

from weaviate_hub.orch.filters import conjoin, equal_text, like_text, to_graphql_value


class TestScalars:
    """Primitive values serialize to GraphQL literals."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (3, "3"),
            (2.5, "2.5"),
            ("report.pdf", '"report.pdf"'),
            ('say "hi"', '"say \\"hi\\""'),
        ],
    )
    def test_literal_form(self, value, expected: str) -> None:
        """Each primitive has one literal rendering."""
        assert to_graphql_value(value) == expected


class TestOperatorSymbol:
    """The `operator` key carries an enum, not a string."""

    def test_operator_is_bare(self) -> None:
        """An identifier-shaped operator value is emitted unquoted."""
        out = to_graphql_value({"path": ["source"], "operator": "Equal", "valueText": "a"})
        assert out == '{path: ["source"], operator: Equal, valueText: "a"}'

    def test_other_keys_stay_quoted(self) -> None:
        """Identifier-shaped values under any other key remain strings."""
        out = to_graphql_value({"valueText": "Equal"})
        assert out == '{valueText: "Equal"}'

    @pytest.mark.parametrize("value", ["equal", "Not Equal", "1Equal", ""])
    def test_non_identifier_operator_is_quoted(self, value: str) -> None:
        """Operator values that are not identifier-shaped fall back to strings."""
        assert to_graphql_value({"operator": value}) == '{operator: "' + value + '"}'

    def test_nested_operands(self) -> None:
        """The rule applies at every nesting depth."""
        where = {
            "operator": "Or",
            "operands": [
                {"path": ["page_number"], "operator": "GreaterThan", "valueInt": 2},
                {"path": ["draft"], "operator": "Equal", "valueBoolean": False},
            ],
        }
        assert to_graphql_value(where) == (
            "{operator: Or, operands: ["
            '{path: ["page_number"], operator: GreaterThan, valueInt: 2}, '
            '{path: ["draft"], operator: Equal, valueBoolean: false}]}'
        )


class TestFallback:
    """Malformed filters still serialize."""

    def test_unknown_object_is_quoted(self) -> None:
        """Non-JSON values become quoted text."""

        class Odd:
            def __str__(self) -> str:
                return "odd"

        assert to_graphql_value({"valueText": Odd()}) == '{valueText: "odd"}'

    def test_bare_string_filter(self) -> None:
        """A string where an object is expected is emitted as a string literal."""
        assert to_graphql_value("not a filter") == '"not a filter"'

    def test_invalid_key_is_quoted(self) -> None:
        """Keys that are not GraphQL names are quoted rather than dropped."""
        assert to_graphql_value({"bad key": 1}) == '{"bad key": 1}'


class TestClauses:
    """Helpers that build doc_chunk_id clauses."""

    def test_equal_text(self) -> None:
        """equal_text builds an Equal clause on one path."""
        assert equal_text("doc_chunk_id", "D1_4") == {
            "path": ["doc_chunk_id"],
            "operator": "Equal",
            "valueText": "D1_4",
        }

    def test_like_text(self) -> None:
        """like_text builds a Like clause."""
        assert like_text("doc_chunk_id", "D1_*")["operator"] == "Like"

    def test_conjoin_without_filter(self) -> None:
        """No caller filter leaves the clause untouched."""
        clause = equal_text("doc_chunk_id", "D1_4")
        assert conjoin(clause, None) is clause

    def test_conjoin_with_filter(self) -> None:
        """A caller filter is ANDed after the clause."""
        clause = equal_text("doc_chunk_id", "D1_4")
        where = {"path": ["source"], "operator": "Equal", "valueText": "a.pdf"}
        assert conjoin(clause, where) == {"operator": "And", "operands": [clause, where]}
