"""Supabase implementation of the remote query and insert services."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from macro_sync.services.remote import (
    InsertError,
    QueryError,
    RemoteInsertService,
    RemoteQuery,
    RemoteQueryService,
)


@dataclass
class SupabaseRemoteService(RemoteQueryService, RemoteInsertService):
    """Runs owner-scoped Supabase requests in a worker thread."""

    client: Client
    owner_column: str = "clerk_user_id"

    async def query(self, query: RemoteQuery) -> list[dict[str, object]]:
        """Return rows for the query, wrapping driver errors in QueryError."""
        try:
            return await asyncio.to_thread(self._select, query)
        except Exception as exc:
            raise QueryError(f"Query on {query.table} failed: {exc}") from exc

    async def insert(
        self, table: str, record: dict[str, object]
    ) -> list[dict[str, object]]:
        """Insert a row, wrapping driver errors in InsertError."""
        try:
            return await asyncio.to_thread(self._insert, table, record)
        except Exception as exc:
            raise InsertError(f"Insert into {table} failed: {exc}") from exc

    def _select(self, query: RemoteQuery) -> list[dict[str, object]]:
        request = (
            self.client.table(query.table)
            .select("*")
            .eq(self.owner_column, query.owner_id)
        )
        if query.date_column and query.date_from is not None:
            request = request.gte(query.date_column, query.date_from.isoformat())
        if query.date_column and query.date_to is not None:
            request = request.lte(query.date_column, query.date_to.isoformat())
        response = request.order(query.order_by, desc=query.descending).execute()
        return list(response.data or [])

    def _insert(self, table: str, record: dict[str, object]) -> list[dict[str, object]]:
        response = self.client.table(table).insert(record).execute()
        if not response.data:
            raise RuntimeError(f"Insert into {table} returned no rows")
        return list(response.data)
