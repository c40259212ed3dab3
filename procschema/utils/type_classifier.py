"""
Type classification utilities for result set columns.

This module maps the driver's native type information onto the logical
types the renderers work with, and parses SQL Server declared type names
such as ``nvarchar(50)`` or ``varchar(max)``.
"""

import datetime
import decimal
import re
import uuid
from typing import Optional, Tuple

STRING = "string"
NUMBER = "number"
DATE = "date"
OTHER = "other"

# Size reported for (max) character columns
UNBOUNDED_SIZE = 2147483647

SIZED_CHARACTER_TYPES = ("char", "varchar", "nchar", "nvarchar")

_TYPE_NAME = re.compile(r"^\s*([^(\s]+)\s*(?:\(\s*([^)]*?)\s*\))?\s*$")


class TypeClassifier:
    """Classifier from driver type information to logical column types."""

    @staticmethod
    def classify(type_code) -> str:
        """Classify a DB-API type code into a logical type.

        Args:
            type_code: Python type reported in ``cursor.description``

        Returns:
            One of ``string``, ``number``, ``date`` or ``other``
        """
        if not isinstance(type_code, type):
            return OTHER

        if issubclass(type_code, str):
            return STRING

        if issubclass(type_code, (int, float, decimal.Decimal)):
            return NUMBER

        if issubclass(type_code, (datetime.datetime, datetime.date, datetime.time)):
            return DATE

        return OTHER

    @staticmethod
    def split_type_name(system_type_name: str) -> Tuple[str, Optional[str]]:
        """Split a declared type into base name and size argument.

        ``nvarchar(50)`` -> ``("nvarchar", "50")``,
        ``decimal(18,2)`` -> ``("decimal", "18,2")``, ``int`` -> ``("int", None)``.
        """
        match = _TYPE_NAME.match(system_type_name or "")
        if not match:
            return (system_type_name or "").strip().lower(), None
        return match.group(1).lower(), match.group(2)

    @staticmethod
    def parse_character_size(size_arg: Optional[str]) -> Optional[int]:
        """Parse the length argument of a character type.

        Returns:
            The length, UNBOUNDED_SIZE for ``max``, or None if absent/invalid
        """
        if size_arg is None:
            return None
        if size_arg.strip().lower() == "max":
            return UNBOUNDED_SIZE
        try:
            return int(size_arg)
        except ValueError:
            return None

    @staticmethod
    def is_sized_character(type_name: str, logical_type: str) -> bool:
        """Whether the type takes a length qualifier in a column definition."""
        return logical_type == STRING and type_name.lower() in SIZED_CHARACTER_TYPES

    @staticmethod
    def native_type_name(type_code, internal_size: Optional[int] = None) -> str:
        """Best SQL Server type name for a DB-API type code.

        Used when the server cannot describe a result set and only the
        driver's description is available.

        Args:
            type_code: Python type reported in ``cursor.description``
            internal_size: Column size reported by the driver

        Returns:
            SQL Server type name, ``sql_variant`` when nothing fits
        """
        if not isinstance(type_code, type):
            return "sql_variant"

        if issubclass(type_code, str):
            return "nvarchar"
        if issubclass(type_code, bool):
            return "bit"
        if issubclass(type_code, int):
            # pyodbc reports precision 19 for bigint, 10 for int
            return "bigint" if (internal_size or 0) > 10 else "int"
        if issubclass(type_code, float):
            return "float"
        if issubclass(type_code, decimal.Decimal):
            return "decimal"
        # datetime is a date subclass
        if issubclass(type_code, datetime.datetime):
            return "datetime2"
        if issubclass(type_code, datetime.date):
            return "date"
        if issubclass(type_code, datetime.time):
            return "time"
        if issubclass(type_code, (bytes, bytearray)):
            return "varbinary"
        if issubclass(type_code, uuid.UUID):
            return "uniqueidentifier"

        return "sql_variant"
