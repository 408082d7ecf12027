"""
Store Module

Persistence capability shared by every agent:
- Store: the select/insert protocol
- InMemoryStore: process-local backend
- SupabaseStore: Supabase backend over supabase-py
"""

from typing import Optional

from .base import Row, Store
from .memory import InMemoryStore
from .supabase import SupabaseStore


def create_store(config: Optional["StoreConfig"] = None) -> Store:
    """
    Build a store from configuration.

    Raises:
        ValueError: If the backend is unknown or missing credentials
    """
    from core.config.runtime import StoreConfig

    config = config or StoreConfig()
    backend = config.backend.lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "supabase":
        return SupabaseStore(config.url or "", config.api_key or "", timeout=config.timeout)
    raise ValueError(f"Unknown store backend: {config.backend}")


__all__ = [
    "Row",
    "Store",
    "InMemoryStore",
    "SupabaseStore",
    "create_store",
]
