"""
Supabase Store

Store adapter over the supabase-py client. Reads and writes go through
the PostgREST query builder:

    client.table("climate_data").select("*").eq("region", "Nakuru")
          .order("recorded_at", desc=True).limit(5).execute()
    client.table("alerts").insert(row).execute()

The client is created on first use, so building a store never touches
the network.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from postgrest import APIError
from supabase import Client, ClientOptions, create_client

from core.schemas.errors import StoreReadException, StoreWriteException

from .base import Row

logger = logging.getLogger(__name__)

# PostgREST rejections and transport failures both surface as store errors
_CLIENT_ERRORS = (APIError, httpx.HTTPError)


def _error_details(error: Exception) -> dict[str, Any]:
    if isinstance(error, APIError):
        return {"code": error.code, "hint": error.hint, "details": error.details}
    return {"error_type": type(error).__name__}


class SupabaseStore:
    """
    Store backed by a Supabase project.

    Usage:
        store = SupabaseStore(url="https://xyz.supabase.co", api_key=service_role_key)
        rows = store.select("climate_data", filters={"region": "Nakuru"},
                            order_by="recorded_at", limit=5)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 15.0,
        client: Optional[Client] = None,
    ) -> None:
        if not url:
            raise ValueError("Supabase URL is required")
        if not api_key:
            raise ValueError("Supabase API key is required")
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(
                self.url,
                self._api_key,
                options=ClientOptions(postgrest_client_timeout=self.timeout),
            )
        return self._client

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Row]:
        try:
            query = self.client.table(table).select("*")
            for column, value in (filters or {}).items():
                if value is None:
                    query = query.is_(column, "null")
                elif isinstance(value, bool):
                    query = query.eq(column, "true" if value else "false")
                else:
                    query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.limit(limit)
            data = query.execute().data
        except _CLIENT_ERRORS as e:
            logger.warning("Select from %s failed: %s", table, e)
            raise StoreReadException(
                f"Select from {table} failed: {e}", table=table, details=_error_details(e)
            ) from e

        if not isinstance(data, list):
            raise StoreReadException(f"Select from {table} returned {type(data).__name__}", table=table)
        return data

    def insert(self, table: str, row: Row) -> Row:
        # Let the database assign these when we have nothing to say
        body = {k: v for k, v in row.items() if not (k in ("id", "created_at") and v is None)}

        try:
            data = self.client.table(table).insert(body).execute().data
        except _CLIENT_ERRORS as e:
            logger.warning("Insert into %s failed: %s", table, e)
            raise StoreWriteException(
                f"Insert into {table} failed: {e}", table=table, details=_error_details(e)
            ) from e

        # The client asks for the stored representation, a one-row list
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        if data == []:
            raise StoreWriteException(f"Insert into {table} returned no row", table=table)
        raise StoreWriteException(f"Insert into {table} returned {type(data).__name__}", table=table)

    def close(self) -> None:
        self._client = None
