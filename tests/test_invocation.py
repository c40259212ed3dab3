"""
Procedure call tests.
Tests for name|value parsing, identifier quoting and EXEC text.
"""

import pytest

from procschema.core.invocation import (
    ProcedureCall,
    parse_parameter,
    quote_identifier,
    quote_object_name,
)
from procschema.errors import ParameterFormatError, UsageError


class TestParseParameter:
    """Test splitting of name|value tokens."""

    def test_adds_at_prefix(self):
        assert parse_parameter("Region|West") == ("@Region", "West")

    def test_keeps_existing_at_prefix(self):
        assert parse_parameter("@Year|2024") == ("@Year", "2024")

    def test_empty_value_is_allowed(self):
        assert parse_parameter("Region|") == ("@Region", "")

    def test_missing_separator_fails(self):
        with pytest.raises(ParameterFormatError):
            parse_parameter("justkey")

    def test_extra_separator_fails(self):
        """Values containing '|' are rejected rather than truncated."""
        with pytest.raises(ParameterFormatError):
            parse_parameter("a|b|c")

    def test_empty_name_fails(self):
        with pytest.raises(ParameterFormatError):
            parse_parameter("|value")

    def test_name_with_sql_fails(self):
        with pytest.raises(ParameterFormatError):
            parse_parameter("x = 1; DROP TABLE t --|v")


class TestQuoting:
    """Test bracket quoting of identifiers."""

    def test_quote_identifier_doubles_closing_bracket(self):
        assert quote_identifier("a]b") == "[a]]b]"

    def test_schema_qualified_name(self):
        assert quote_object_name("dbo.GetWidgets") == "[dbo].[GetWidgets]"

    def test_already_quoted_name(self):
        assert quote_object_name("[dbo].[Get Widgets]") == "[dbo].[Get Widgets]"

    def test_empty_name_fails(self):
        with pytest.raises(UsageError):
            quote_object_name("  ")


class TestProcedureCall:
    """Test EXEC text generation."""

    def test_from_tokens_preserves_order(self):
        call = ProcedureCall.from_tokens("GetWidgets", ["b|2", "a|1"])
        assert call.parameters == (("@b", "2"), ("@a", "1"))
        assert call.values == ["2", "1"]

    def test_from_tokens_validates_before_anything_else(self):
        with pytest.raises(ParameterFormatError):
            ProcedureCall.from_tokens("GetWidgets", ["ok|1", "justkey"])

    def test_to_sql_without_parameters(self):
        assert ProcedureCall("dbo.GetWidgets").to_sql() == "EXEC [dbo].[GetWidgets]"

    def test_to_sql_binds_values(self):
        call = ProcedureCall.from_tokens("dbo.GetWidgets", ["Region|West", "@Year|2024"])
        assert call.to_sql() == "EXEC [dbo].[GetWidgets] @Region = ?, @Year = ?"
        assert "West" not in call.to_sql()

    def test_to_describe_sql(self):
        call = ProcedureCall.from_tokens("dbo.GetWidgets", ["Region|West", "Year|2024"])
        tsql, params = call.to_describe_sql()
        assert tsql == "EXEC [dbo].[GetWidgets] @Region = @p1, @Year = @p2"
        assert params == "@p1 nvarchar(max), @p2 nvarchar(max)"

    def test_to_describe_sql_without_parameters(self):
        tsql, params = ProcedureCall("GetWidgets").to_describe_sql()
        assert tsql == "EXEC [GetWidgets]"
        assert params == ""

    def test_empty_name_fails_on_construction(self):
        with pytest.raises(UsageError):
            ProcedureCall.from_tokens("", [])

    def test_empty_name_part_fails_on_construction(self):
        with pytest.raises(UsageError):
            ProcedureCall("dbo.")

    def test_repr(self):
        call = ProcedureCall.from_tokens("dbo.GetWidgets", ["Region|West"])
        assert repr(call) == "ProcedureCall([dbo].[GetWidgets], params=[@Region])"

    def test_equality(self):
        assert ProcedureCall("p", [("@a", "1")]) == ProcedureCall("p", (("@a", "1"),))
