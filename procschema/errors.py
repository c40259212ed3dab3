"""
Error types for procschema.

Every failure is fatal to a single run; the CLI maps these classes to
exit codes and prints their message on stderr.
"""


class SchemaReporterError(Exception):
    """Base class for all procschema errors."""

    exit_code = 1


class UsageError(SchemaReporterError):
    """Missing or malformed command-line input."""

    exit_code = 2


class ParameterFormatError(SchemaReporterError):
    """A stored procedure parameter token is not of the form ``name|value``."""

    exit_code = 2


class DatabaseConnectionError(SchemaReporterError):
    """The database could not be reached or refused the login."""


class ProcedureExecutionError(SchemaReporterError):
    """The stored procedure failed, does not exist, or returned no result set."""


class ParameterBindingError(SchemaReporterError):
    """A supplied parameter does not match the procedure's signature."""
