"""
Type classification tests.
"""

import datetime
import decimal
import uuid

from procschema.utils.type_classifier import (
    DATE,
    NUMBER,
    OTHER,
    STRING,
    UNBOUNDED_SIZE,
    TypeClassifier,
)


class TestClassify:
    """Test logical type classification of DB-API type codes."""

    def test_string(self):
        assert TypeClassifier.classify(str) == STRING

    def test_numbers(self):
        for type_code in (int, float, decimal.Decimal, bool):
            assert TypeClassifier.classify(type_code) == NUMBER

    def test_dates(self):
        for type_code in (datetime.datetime, datetime.date, datetime.time):
            assert TypeClassifier.classify(type_code) == DATE

    def test_other(self):
        assert TypeClassifier.classify(bytearray) == OTHER
        assert TypeClassifier.classify(uuid.UUID) == OTHER

    def test_non_type_is_other(self):
        assert TypeClassifier.classify(None) == OTHER


class TestTypeNames:
    """Test parsing of declared type names."""

    def test_split_sized(self):
        assert TypeClassifier.split_type_name("nvarchar(50)") == ("nvarchar", "50")

    def test_split_precision_scale(self):
        assert TypeClassifier.split_type_name("decimal(18,2)") == ("decimal", "18,2")

    def test_split_plain(self):
        assert TypeClassifier.split_type_name("int") == ("int", None)

    def test_split_lowercases(self):
        assert TypeClassifier.split_type_name("VARCHAR(MAX)") == ("varchar", "MAX")

    def test_parse_max(self):
        assert TypeClassifier.parse_character_size("max") == UNBOUNDED_SIZE
        assert TypeClassifier.parse_character_size("MAX") == UNBOUNDED_SIZE

    def test_parse_number(self):
        assert TypeClassifier.parse_character_size("50") == 50

    def test_parse_missing(self):
        assert TypeClassifier.parse_character_size(None) is None

    def test_sized_character(self):
        assert TypeClassifier.is_sized_character("nvarchar", STRING)
        assert TypeClassifier.is_sized_character("char", STRING)
        assert not TypeClassifier.is_sized_character("text", STRING)
        assert not TypeClassifier.is_sized_character("int", NUMBER)


class TestNativeTypeName:
    """Test SQL Server type names derived from driver type codes."""

    def test_string(self):
        assert TypeClassifier.native_type_name(str, 50) == "nvarchar"

    def test_integers(self):
        assert TypeClassifier.native_type_name(int, 10) == "int"
        assert TypeClassifier.native_type_name(int, 19) == "bigint"
        assert TypeClassifier.native_type_name(bool, 1) == "bit"

    def test_numbers(self):
        assert TypeClassifier.native_type_name(float, 53) == "float"
        assert TypeClassifier.native_type_name(decimal.Decimal, 18) == "decimal"

    def test_dates(self):
        assert TypeClassifier.native_type_name(datetime.datetime) == "datetime2"
        assert TypeClassifier.native_type_name(datetime.date) == "date"
        assert TypeClassifier.native_type_name(datetime.time) == "time"

    def test_other(self):
        assert TypeClassifier.native_type_name(bytearray, 16) == "varbinary"
        assert TypeClassifier.native_type_name(uuid.UUID, 16) == "uniqueidentifier"
        assert TypeClassifier.native_type_name(complex) == "sql_variant"
        assert TypeClassifier.native_type_name(None) == "sql_variant"
