"""
Result set schema model.

ColumnDescriptor describes one result set column independently of the
driver; SchemaTable holds the server's own schema-description rows as
they were returned; ResultSchema bundles both for the renderers.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..utils.type_classifier import TypeClassifier, UNBOUNDED_SIZE


class ColumnDescriptor:
    """One column of a stored procedure's result set."""

    def __init__(self, name: str, type_name: str, logical_type: str,
                 max_size: Optional[int] = None, nullable: bool = True):
        """Initialize column descriptor.

        Args:
            name: Column name as returned by the procedure
            type_name: Declared SQL Server type name (e.g. ``varchar``)
            logical_type: ``string``, ``number``, ``date`` or ``other``
            max_size: Maximum size; UNBOUNDED_SIZE for (max) columns
            nullable: Whether the column allows NULL
        """
        self.name = name
        self.type_name = type_name
        self.logical_type = logical_type
        self.max_size = max_size
        self.nullable = nullable

    @property
    def is_unbounded(self) -> bool:
        return self.max_size == UNBOUNDED_SIZE

    @property
    def is_sized_character(self) -> bool:
        return TypeClassifier.is_sized_character(self.type_name, self.logical_type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert column to dictionary representation."""
        return {
            "name": self.name,
            "type_name": self.type_name,
            "logical_type": self.logical_type,
            "max_size": self.max_size,
            "nullable": self.nullable
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColumnDescriptor):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        """String representation."""
        null = "NULL" if self.nullable else "NOT NULL"
        return f"ColumnDescriptor({self.name!r}, {self.type_name}, {self.logical_type}, size={self.max_size}, {null})"


class SchemaTable:
    """Schema-description rows exactly as the server reported them."""

    def __init__(self, headers: Sequence[str], rows: Sequence[Sequence[Any]]):
        self.headers = list(headers)
        self.rows = [tuple(row) for row in rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"SchemaTable(headers={len(self.headers)}, rows={len(self.rows)})"


class ResultSchema:
    """Everything known about a procedure's first result set."""

    def __init__(self, columns: List[ColumnDescriptor], schema_table: SchemaTable):
        self.columns = list(columns)
        self.schema_table = schema_table

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def __repr__(self) -> str:
        return f"ResultSchema(columns={self.column_names})"
