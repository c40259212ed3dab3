"""Core modules for procschema."""

from .columns import ColumnDescriptor, ResultSchema, SchemaTable
from .executor import ProcedureExecutor
from .invocation import ProcedureCall
from .renderers import RawSchemaRenderer, ScriptRenderer

__all__ = ["ColumnDescriptor", "ResultSchema", "SchemaTable", "ProcedureExecutor",
           "ProcedureCall", "RawSchemaRenderer", "ScriptRenderer"]
