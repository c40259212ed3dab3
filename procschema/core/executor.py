"""
Stored procedure execution for procschema.

This module opens a SQL Server connection through pyodbc, invokes a stored
procedure with bound parameters and describes the shape of its first result
set without fetching any data rows.
"""

import logging
import re
from contextlib import closing
from typing import Any, List, Optional, Sequence, Tuple

import pyodbc

from .columns import ColumnDescriptor, ResultSchema, SchemaTable
from .invocation import ProcedureCall
from ..errors import (
    DatabaseConnectionError,
    ParameterBindingError,
    ProcedureExecutionError,
)
from ..utils.db_config import DatabaseConfig
from ..utils.type_classifier import STRING, TypeClassifier, UNBOUNDED_SIZE

logger = logging.getLogger(__name__)

DESCRIBE_SQL = "EXEC sys.sp_describe_first_result_set @tsql = ?, @params = ?"

# 201: expects parameter not supplied, 8144: too many arguments,
# 8145: is not a parameter for procedure
BINDING_ERRORS = {201, 8144, 8145}

# sp_describe_first_result_set errors (temp tables, dynamic SQL, ...)
DESCRIBE_ERRORS = range(11500, 11600)

# Field names of a DB-API cursor.description entry
DESCRIPTION_HEADERS = ["name", "type_code", "display_size", "internal_size",
                       "precision", "scale", "null_ok"]

_NATIVE_ERROR = re.compile(r"\((\d+)\)")


def native_error_number(exc: pyodbc.Error) -> Optional[int]:
    """Extract the SQL Server error number from a pyodbc error message.

    The driver formats messages as ``[SQLSTATE] [driver][SQL Server]text (number) (SQLExecDirectW)``.
    """
    message = exc.args[1] if len(exc.args) > 1 else str(exc)
    numbers = _NATIVE_ERROR.findall(str(message))
    return int(numbers[-1]) if numbers else None


def sqlstate(exc: pyodbc.Error) -> str:
    return str(exc.args[0]) if exc.args else ""


def error_message(exc: pyodbc.Error) -> str:
    return str(exc.args[1]) if len(exc.args) > 1 else str(exc)


class ProcedureExecutor:
    """Runs a stored procedure and reports the schema of its result set."""

    def __init__(self, connection_string: Optional[str] = None,
                 db_config: Optional[DatabaseConfig] = None):
        """Initialize executor.

        Args:
            connection_string: ODBC connection string
            db_config: Configuration to resolve the connection string from
                when none is given directly
        """
        self.db_config = db_config or DatabaseConfig(connection_string=connection_string)

    def describe(self, call: ProcedureCall) -> ResultSchema:
        """Execute ``call`` and describe its first result set.

        The connection and cursor are released on every exit path.

        Raises:
            DatabaseConnectionError: If the connection cannot be opened
            ParameterBindingError: If a parameter does not match the procedure
            ProcedureExecutionError: If the procedure fails or returns no result set
        """
        with closing(self._connect()) as conn:
            with closing(conn.cursor()) as cur:
                description = self._execute(cur, call)
                schema_table = self._describe_first_result_set(cur, call)

        if schema_table is None:
            schema_table = self._description_table(description)
            columns = self._build_columns(description)
        else:
            columns = self._build_columns(description, schema_table)

        logger.info("Described %d column(s) from %s", len(columns), call.quoted_name)
        return ResultSchema(columns, schema_table)

    def _connect(self) -> pyodbc.Connection:
        logger.info("Connecting to %s", self.db_config.masked_connection_string())
        try:
            return pyodbc.connect(self.db_config.connection_string)
        except pyodbc.Error as e:
            raise DatabaseConnectionError(error_message(e)) from e

    def _execute(self, cur: pyodbc.Cursor, call: ProcedureCall) -> List[Tuple[Any, ...]]:
        """Invoke the procedure and return the description of its first result set."""
        logger.info("Executing %r", call)
        try:
            cur.execute(call.to_sql(), *call.values)
            # Row counts from statements before the first SELECT have no description
            while cur.description is None:
                if not cur.nextset():
                    raise ProcedureExecutionError(
                        f"Stored procedure {call.quoted_name} did not return a result set")
            return [tuple(col) for col in cur.description]
        except pyodbc.Error as e:
            raise self._translate(e) from e

    def _describe_first_result_set(self, cur: pyodbc.Cursor,
                                   call: ProcedureCall) -> Optional[SchemaTable]:
        """Ask the server for the declared types of the call's first result set.

        Returns:
            The server's schema rows, or None if it cannot determine them
            statically
        """
        tsql, params = call.to_describe_sql()
        try:
            cur.execute(DESCRIBE_SQL, tsql, params)
            headers = [col[0] for col in cur.description]
            rows = cur.fetchall()
        except pyodbc.Error as e:
            if native_error_number(e) in DESCRIBE_ERRORS and not sqlstate(e).startswith("08"):
                logger.warning("Server could not describe %s, using driver metadata: %s",
                               call.quoted_name, error_message(e))
                return None
            raise self._translate(e) from e
        return SchemaTable(headers, rows)

    @staticmethod
    def _description_table(description: Sequence[Tuple[Any, ...]]) -> SchemaTable:
        """Schema rows built from the driver's description of the executed result."""
        rows = []
        for desc in description:
            row = list(desc[:7])
            if isinstance(row[1], type):
                row[1] = row[1].__name__
            rows.append(row)
        return SchemaTable(DESCRIPTION_HEADERS, rows)

    def _build_columns(self, description: Sequence[Tuple[Any, ...]],
                       schema_table: Optional[SchemaTable] = None) -> List[ColumnDescriptor]:
        """Merge the executed description with the server's declared types.

        Without a schema table, type names are derived from the driver's
        type codes.
        """
        if schema_table is None:
            described = [{} for _ in description]
        else:
            described = [dict(zip(schema_table.headers, row)) for row in schema_table.rows]
            described = [row for row in described if not row.get("is_hidden")]
            described.sort(key=lambda row: row.get("column_ordinal") or 0)

        if len(described) != len(description):
            raise ProcedureExecutionError(
                f"Result set has {len(description)} column(s) but the server described {len(described)}")

        columns = []
        for desc, info in zip(description, described):
            name, type_code, _display_size, internal_size, _precision, _scale, null_ok = desc[:7]
            logical_type = TypeClassifier.classify(type_code)

            system_type_name = info.get("system_type_name")
            if system_type_name:
                type_name, size_arg = TypeClassifier.split_type_name(system_type_name)
            else:
                type_name, size_arg = TypeClassifier.native_type_name(type_code, internal_size), None

            max_size = internal_size
            if logical_type == STRING:
                parsed = TypeClassifier.parse_character_size(size_arg)
                if parsed is not None:
                    max_size = parsed
                elif not internal_size:
                    max_size = UNBOUNDED_SIZE

            nullable = info.get("is_nullable")
            if nullable is None:
                nullable = null_ok

            columns.append(ColumnDescriptor(
                name=name,
                type_name=type_name,
                logical_type=logical_type,
                max_size=max_size,
                nullable=bool(nullable)
            ))

        return columns

    @staticmethod
    def _translate(exc: pyodbc.Error) -> Exception:
        """Map a driver error raised during execution onto the error taxonomy."""
        message = error_message(exc)
        if sqlstate(exc).startswith("08"):
            return DatabaseConnectionError(message)
        if native_error_number(exc) in BINDING_ERRORS:
            return ParameterBindingError(message)
        return ProcedureExecutionError(message)

    def __repr__(self) -> str:
        """String representation."""
        return f"ProcedureExecutor({self.db_config})"
