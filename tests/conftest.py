"""
Shared fixtures: a fake pyodbc connection that answers a procedure call
and the follow-up sp_describe_first_result_set query.
"""

import pytest

from procschema.core.columns import ColumnDescriptor
from procschema.utils.type_classifier import NUMBER, STRING

DESCRIBE_HEADERS = [
    "is_hidden", "column_ordinal", "name", "is_nullable", "system_type_id",
    "system_type_name", "max_length", "precision", "scale",
]

# Id int NOT NULL, Name varchar(50) NULL
WIDGET_DESCRIPTION = [
    ("Id", int, 11, 10, 10, 0, False),
    ("Name", str, 50, 50, 50, 0, True),
]
WIDGET_DESCRIBE_ROWS = [
    (False, 1, "Id", False, 56, "int", 4, 10, 0),
    (False, 2, "Name", True, 167, "varchar(50)", 50, 0, 0),
]


class FakeCursor:
    """Minimal pyodbc cursor stand-in."""

    def __init__(self, description=None, describe_rows=(), describe_headers=DESCRIBE_HEADERS,
                 execute_error=None, describe_error=None, leading_rowcounts=0):
        self.result_description = description
        self.describe_rows = list(describe_rows)
        self.describe_headers = describe_headers
        self.execute_error = execute_error
        self.describe_error = describe_error
        self.leading_rowcounts = leading_rowcounts
        self.description = None
        self.executed = []
        self.closed = False
        self._pending = 0

    def execute(self, sql, *params):
        self.executed.append((sql, params))
        if sql.startswith("EXEC sys.sp_describe_first_result_set"):
            if self.describe_error is not None:
                raise self.describe_error
            self.description = [(h, str, None, 128, 128, 0, True) for h in self.describe_headers]
            return self

        if self.execute_error is not None:
            raise self.execute_error
        self._pending = self.leading_rowcounts
        self.description = None if self._pending else self.result_description
        return self

    def nextset(self):
        if self._pending:
            self._pending -= 1
            if not self._pending:
                self.description = self.result_description
            return True
        return False

    def fetchall(self):
        return list(self.describe_rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.closed = False

    def cursor(self):
        return self._cursor

    def close(self):
        self.closed = True


@pytest.fixture
def widget_cursor():
    return FakeCursor(WIDGET_DESCRIPTION, WIDGET_DESCRIBE_ROWS)


@pytest.fixture
def widget_columns():
    return [
        ColumnDescriptor("Id", "int", NUMBER, 10, nullable=False),
        ColumnDescriptor("Name", "varchar", STRING, 50, nullable=True),
    ]
