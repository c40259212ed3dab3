"""
Stored procedure invocation model.

Turns the raw CLI inputs (procedure name and ``name|value`` tokens) into an
immutable ProcedureCall and renders the EXEC text used to invoke it.
"""

import re
from typing import Iterable, List, Tuple

from ..errors import ParameterFormatError, UsageError

_PARAM_NAME = re.compile(r"^@?[A-Za-z_][A-Za-z0-9_@$#]*$")


def quote_identifier(name: str) -> str:
    """Bracket-quote a single identifier, doubling any closing bracket."""
    return "[" + name.replace("]", "]]") + "]"


def quote_object_name(name: str) -> str:
    """Quote a possibly schema-qualified object name.

    ``dbo.GetWidgets`` and ``[dbo].[GetWidgets]`` both become
    ``[dbo].[GetWidgets]``.
    """
    name = name.strip()
    if not name:
        raise UsageError("Stored procedure name must not be empty")

    parts = []
    for part in name.split("."):
        part = part.strip()
        if part.startswith("[") and part.endswith("]"):
            part = part[1:-1].replace("]]", "]")
        if not part:
            raise UsageError(f"Invalid stored procedure name: {name}")
        parts.append(quote_identifier(part))
    return ".".join(parts)


def parse_parameter(token: str) -> Tuple[str, str]:
    """Split a ``name|value`` token into a (name, value) pair.

    The name gets a leading ``@`` if it lacks one. The value may be empty.

    Raises:
        ParameterFormatError: If the token does not have exactly two parts
            or the name is not a plain identifier
    """
    parts = token.split("|")
    if len(parts) != 2:
        raise ParameterFormatError(
            f"Invalid parameter '{token}': expected exactly one '|' separating name and value")

    name, value = parts[0].strip(), parts[1]
    if not _PARAM_NAME.match(name):
        raise ParameterFormatError(f"Invalid parameter name '{parts[0]}' in '{token}'")

    if not name.startswith("@"):
        name = "@" + name
    return name, value


class ProcedureCall:
    """A stored procedure name plus its ordered parameter assignments."""

    def __init__(self, name: str, parameters: Iterable[Tuple[str, str]] = ()):
        """Initialize call.

        Args:
            name: Procedure name, optionally schema-qualified
            parameters: Ordered (name, value) pairs

        Raises:
            UsageError: If the name is empty or has an empty part
        """
        self.name = name
        self.quoted_name = quote_object_name(name)
        self.parameters = tuple(parameters)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProcedureCall):
            return NotImplemented
        return (self.name, self.parameters) == (other.name, other.parameters)

    def __hash__(self) -> int:
        return hash((self.name, self.parameters))

    @classmethod
    def from_tokens(cls, name: str, tokens: Iterable[str]) -> "ProcedureCall":
        """Build a call from CLI tokens, validating every ``name|value`` pair."""
        return cls(name, tuple(parse_parameter(token) for token in tokens))

    @property
    def values(self) -> List[str]:
        return [value for _, value in self.parameters]

    def to_sql(self) -> str:
        """EXEC text with one ``?`` placeholder per parameter."""
        return self._exec_text(["?"] * len(self.parameters))

    def to_describe_sql(self) -> Tuple[str, str]:
        """EXEC text and parameter declarations for sp_describe_first_result_set.

        Placeholders become ``@p1``, ``@p2``... declared as nvarchar(max),
        matching how values are bound on execution.
        """
        placeholders = [f"@p{i}" for i in range(1, len(self.parameters) + 1)]
        declarations = ", ".join(f"{p} nvarchar(max)" for p in placeholders)
        return self._exec_text(placeholders), declarations

    def _exec_text(self, placeholders: List[str]) -> str:
        sql = f"EXEC {self.quoted_name}"
        if self.parameters:
            assignments = [f"{name} = {placeholder}"
                           for (name, _), placeholder in zip(self.parameters, placeholders)]
            sql += " " + ", ".join(assignments)
        return sql

    def __repr__(self) -> str:
        names = ", ".join(name for name, _ in self.parameters)
        return f"ProcedureCall({self.quoted_name}, params=[{names}])"
