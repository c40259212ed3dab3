"""
procschema - Stored Procedure Result Schema Reporter

Executes a SQL Server stored procedure, inspects the shape of its result
set and reports it either as a pipe-delimited schema dump or as a T-SQL
script with a matching table, table type and load procedure.

Main Classes:
    ProcedureCall: Stored procedure name and bound parameters
    ProcedureExecutor: Runs the call and describes its result set
    RawSchemaRenderer: Pipe-delimited schema dump
    ScriptRenderer: Table / table type / load procedure script

Quick Start:
    from procschema import ProcedureCall, describe_procedure, render_script

    result = describe_procedure(conn_str, "dbo.GetWidgets", ["Region|West"])
    print(render_script(result.columns, "dbo", "Widget"))

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .core.columns import ColumnDescriptor, ResultSchema, SchemaTable
from .core.executor import ProcedureExecutor
from .core.invocation import ProcedureCall
from .core.renderers import RawSchemaRenderer, ScriptRenderer, render_raw_schema, render_script
from .utils.db_config import DatabaseConfig
from .errors import (
    SchemaReporterError,
    UsageError,
    ParameterFormatError,
    DatabaseConnectionError,
    ProcedureExecutionError,
    ParameterBindingError,
)

__all__ = [
    "ColumnDescriptor",
    "ResultSchema",
    "SchemaTable",
    "ProcedureExecutor",
    "ProcedureCall",
    "RawSchemaRenderer",
    "ScriptRenderer",
    "render_raw_schema",
    "render_script",
    "DatabaseConfig",
    "SchemaReporterError",
    "UsageError",
    "ParameterFormatError",
    "DatabaseConnectionError",
    "ProcedureExecutionError",
    "ParameterBindingError",
    "describe_procedure",
]


# Convenience function for quick usage
def describe_procedure(connection_string: str, name: str, params=()):
    """Quick describe function.

    Args:
        connection_string: ODBC connection string
        name: Stored procedure name
        params: ``name|value`` tokens

    Returns:
        ResultSchema with the column descriptors and raw schema rows
    """
    call = ProcedureCall.from_tokens(name, params)
    return ProcedureExecutor(connection_string).describe(call)
