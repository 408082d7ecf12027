"""
In-Memory Store

Process-local store used for tests and for running the service without a
database. Rows live in per-table lists guarded by a single lock.
"""

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from itertools import count
from typing import Any, Callable, Optional

from .base import Row


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    """
    Store backed by Python lists.

    Usage:
        store = InMemoryStore()
        store.insert("alerts", {"alert_type": "climate", ...})
        rows = store.select("alerts", filters={"is_active": True})
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        seed: Optional[dict[str, list[Row]]] = None,
    ) -> None:
        """
        Args:
            clock: Source of ``created_at`` for rows inserted without one
            seed: Initial rows per table
        """
        self._clock = clock or _utc_now
        self._lock = threading.Lock()
        self._tables: dict[str, list[tuple[int, Row]]] = {}
        self._seq = count()
        for table, rows in (seed or {}).items():
            for row in rows:
                self.insert(table, row)

    def insert(self, table: str, row: Row) -> Row:
        stored = copy.deepcopy(dict(row))
        if not stored.get("id"):
            stored["id"] = str(uuid.uuid4())
        if not stored.get("created_at"):
            stored["created_at"] = self._clock().isoformat()
        with self._lock:
            self._tables.setdefault(table, []).append((next(self._seq), stored))
        return copy.deepcopy(stored)

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Row]:
        with self._lock:
            entries = list(self._tables.get(table, []))

        if filters:
            entries = [
                (seq, row) for seq, row in entries
                if all(row.get(col) == val for col, val in filters.items())
            ]

        if order_by:
            # Rows missing the column sort last; insertion order breaks ties
            present = [(seq, row) for seq, row in entries if row.get(order_by) is not None]
            missing = [(seq, row) for seq, row in entries if row.get(order_by) is None]
            present.sort(key=lambda e: (e[1][order_by], e[0]), reverse=descending)
            entries = present + missing

        if limit is not None:
            entries = entries[:limit]

        return [copy.deepcopy(row) for _, row in entries]

    def count(self, table: str) -> int:
        """Number of rows in a table."""
        with self._lock:
            return len(self._tables.get(table, []))

    def clear(self) -> None:
        """Drop every row in every table."""
        with self._lock:
            self._tables.clear()
