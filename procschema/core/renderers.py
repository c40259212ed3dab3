"""
Output renderers for procschema.

RawSchemaRenderer dumps the server's schema-description rows as
pipe-delimited text. ScriptRenderer generates a T-SQL script with a table,
a matching table type and a load procedure for the described result set.
Both write to an explicit writer (any object with ``write(str)``).
"""

import io
from typing import Any, Iterable, List, Sequence, TextIO

from .columns import ColumnDescriptor, ResultSchema
from .invocation import quote_identifier

BATCH_SEPARATOR = "GO"
DATE_INSERTED_COLUMN = "[DateInserted] [datetime] NOT NULL"
TABLE_PARAMETER = "@Data"


def format_dump_value(value: Any) -> str:
    """Format a schema table value; NULL becomes an empty field."""
    if value is None:
        return ""
    return str(value)


def column_type_sql(column: ColumnDescriptor) -> str:
    """Bracketed type name with a length qualifier for sized character types."""
    type_sql = quote_identifier(column.type_name)
    if column.is_sized_character and column.max_size is not None:
        size = "max" if column.is_unbounded else str(column.max_size)
        type_sql += f"({size})"
    return type_sql


def column_definition(column: ColumnDescriptor) -> str:
    """``[Name] [varchar](50) NULL`` style column definition."""
    null = "NULL" if column.nullable else "NOT NULL"
    return f"{quote_identifier(column.name)} {column_type_sql(column)} {null}"


class RawSchemaRenderer:
    """Pipe-delimited dump of a result set's schema-description rows."""

    def __init__(self, writer: TextIO):
        self.writer = writer

    def render(self, result: ResultSchema):
        """Write the column-name header line, then one line per schema row.

        Embedded ``|`` characters in values are written as-is.
        """
        self.writer.write("|".join(result.column_names) + "\n")
        for row in result.schema_table.rows:
            self.writer.write("|".join(format_dump_value(value) for value in row) + "\n")


class ScriptRenderer:
    """T-SQL table, table type and load procedure generator."""

    def __init__(self, writer: TextIO, schema_name: str, object_name: str):
        """Initialize script renderer.

        Args:
            writer: Output sink
            schema_name: Target schema for every generated object
            object_name: Base name; objects are ``<Name>``, ``<Name>Type``
                and ``Load<Name>``
        """
        self.writer = writer
        self.schema_name = schema_name
        self.object_name = object_name

    @property
    def table_name(self) -> str:
        return self._qualified(self.object_name)

    @property
    def type_name(self) -> str:
        return self._qualified(f"{self.object_name}Type")

    @property
    def procedure_name(self) -> str:
        return self._qualified(f"Load{self.object_name}")

    def render(self, columns: Sequence[ColumnDescriptor]):
        """Write the complete script for ``columns``."""
        self._write_lines(self.drop_statements())
        self._write_lines(self.create_table(columns))
        self._write_lines(self.create_type(columns))
        self._write_lines(["SET ANSI_NULLS ON", BATCH_SEPARATOR,
                           "SET QUOTED_IDENTIFIER ON", BATCH_SEPARATOR])
        self._write_lines(self.create_procedure(columns))

    def drop_statements(self) -> List[str]:
        """Drop the load procedure, table and table type if they exist."""
        return [
            f"IF OBJECT_ID(N'{_literal(self.procedure_name)}', N'P') IS NOT NULL",
            f"    DROP PROCEDURE {self.procedure_name}",
            BATCH_SEPARATOR,
            f"IF OBJECT_ID(N'{_literal(self.table_name)}', N'U') IS NOT NULL",
            f"    DROP TABLE {self.table_name}",
            BATCH_SEPARATOR,
            f"IF TYPE_ID(N'{_literal(self.type_name)}') IS NOT NULL",
            f"    DROP TYPE {self.type_name}",
            BATCH_SEPARATOR,
        ]

    def create_table(self, columns: Sequence[ColumnDescriptor]) -> List[str]:
        lines = [f"CREATE TABLE {self.table_name} ("]
        lines.extend(f"    {column_definition(col)}," for col in columns)
        lines.append(f"    {DATE_INSERTED_COLUMN}")
        lines.extend([")", BATCH_SEPARATOR])
        return lines

    def create_type(self, columns: Sequence[ColumnDescriptor]) -> List[str]:
        lines = [f"CREATE TYPE {self.type_name} AS TABLE ("]
        lines.append(",\n".join(f"    {column_definition(col)}" for col in columns))
        lines.extend([")", BATCH_SEPARATOR])
        return lines

    def create_procedure(self, columns: Sequence[ColumnDescriptor]) -> List[str]:
        names = [quote_identifier(col.name) for col in columns]
        insert_columns = names + ["[DateInserted]"]
        select_columns = names + ["GETDATE()"]
        return [
            f"CREATE PROCEDURE {self.procedure_name}",
            f"    {TABLE_PARAMETER} {self.type_name} READONLY",
            "AS",
            "BEGIN",
            "    SET NOCOUNT ON;",
            "",
            f"    INSERT INTO {self.table_name} (",
            ",\n".join(f"        {name}" for name in insert_columns),
            "    )",
            "    SELECT",
            ",\n".join(f"        {name}" for name in select_columns),
            f"    FROM {TABLE_PARAMETER};",
            "END",
            BATCH_SEPARATOR,
        ]

    def _qualified(self, name: str) -> str:
        return f"{quote_identifier(self.schema_name)}.{quote_identifier(name)}"

    def _write_lines(self, lines: Iterable[str]):
        for line in lines:
            self.writer.write(line + "\n")


def _literal(value: str) -> str:
    return value.replace("'", "''")


def render_raw_schema(result: ResultSchema) -> str:
    """Render the raw schema dump to a string."""
    buffer = io.StringIO()
    RawSchemaRenderer(buffer).render(result)
    return buffer.getvalue()


def render_script(columns: Sequence[ColumnDescriptor], schema_name: str, object_name: str) -> str:
    """Render the generated script to a string."""
    buffer = io.StringIO()
    ScriptRenderer(buffer, schema_name, object_name).render(columns)
    return buffer.getvalue()
