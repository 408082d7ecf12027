"""
Store Interface

The persistence capability every agent reads context from and writes
records to. Two operations only: ``select`` and ``insert``. Inserts are
atomic per row; there are no cross-row transactions.
"""

from typing import Any, Optional, Protocol, runtime_checkable


Row = dict[str, Any]


@runtime_checkable
class Store(Protocol):
    """Protocol defining the store adapter interface."""

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Row]:
        """
        Read rows from a table.

        Args:
            table: Table name
            filters: Column equality filters
            order_by: Column to sort by
            descending: Sort direction when order_by is given
            limit: Maximum number of rows

        Returns:
            Matching rows (copies; mutating them does not touch the store)

        Raises:
            StoreReadException: If the read fails
        """
        ...

    def insert(self, table: str, row: Row) -> Row:
        """
        Insert one row.

        The store assigns ``id`` and, when absent, ``created_at``.

        Returns:
            The stored row including assigned fields

        Raises:
            StoreWriteException: If the write fails
        """
        ...
