"""
Database configuration utilities for procschema.

This module resolves the ODBC connection string from either a direct value
or a dotenv file, and masks credentials for display.
"""

import os
import re
from typing import Optional

from dotenv import dotenv_values

from ..errors import UsageError

CONNECTION_STRING_KEY = "CONNECTION_STRING"

_SECRET = re.compile(r"((?:^|;)\s*(?:PWD|Password)\s*=\s*)(\{(?:[^}]|\}\})*\}|[^;]*)", re.IGNORECASE)


class DatabaseConfig:
    """Connection string resolution for SQL Server connections."""

    def __init__(self, connection_string: Optional[str] = None, env_path: Optional[str] = None):
        """Initialize database configuration.

        Args:
            connection_string: ODBC connection string; takes precedence
            env_path: Path to a dotenv file with a CONNECTION_STRING entry
        """
        self.env_path = env_path
        self._connection_string = connection_string or None

    def load_config(self, env_path: Optional[str] = None) -> str:
        """Resolve the connection string.

        The dotenv file is parsed without reading or touching ``os.environ``;
        ``${VAR}`` references are kept literally.

        Args:
            env_path: Path to dotenv file (overrides instance default)

        Returns:
            The connection string

        Raises:
            UsageError: If no connection string can be found
        """
        if self._connection_string:
            return self._connection_string

        if env_path:
            self.env_path = env_path

        if not self.env_path:
            raise UsageError("the following arguments are required: -c/--connection-string")

        if not os.path.exists(self.env_path):
            raise UsageError(f"Environment file not found: {self.env_path}")

        value = dotenv_values(self.env_path, interpolate=False).get(CONNECTION_STRING_KEY)
        if not value:
            raise UsageError(
                f"Missing {CONNECTION_STRING_KEY} in {self.env_path}\n"
                f"Provide --connection-string or add {CONNECTION_STRING_KEY}=... to the file")

        self._connection_string = value
        return value

    @property
    def connection_string(self) -> str:
        """Get current connection string, loading it if necessary."""
        return self.load_config()

    def masked_connection_string(self) -> str:
        """Connection string with password values replaced by ``***``."""
        return mask_connection_string(self.connection_string)

    def __repr__(self) -> str:
        """String representation of database config."""
        if self._connection_string:
            return f"DatabaseConfig('{mask_connection_string(self._connection_string)}')"
        return f"DatabaseConfig(env_path='{self.env_path}')"


def mask_connection_string(connection_string: str) -> str:
    """Hide PWD/Password values in an ODBC connection string."""
    return _SECRET.sub(lambda m: m.group(1) + "***", connection_string)
