"""Remote query and insert interfaces."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol


class RemoteError(Exception):
    """Base error for remote store failures."""


class QueryError(RemoteError):
    """Raised when a remote query fails."""


class InsertError(RemoteError):
    """Raised when a remote insert fails."""


@dataclass(frozen=True)
class RemoteQuery:
    """Owner-scoped query against one remote table."""

    table: str
    owner_id: str
    order_by: str
    descending: bool = True
    date_column: str | None = None
    date_from: date | None = None
    date_to: date | None = None


class RemoteQueryService(Protocol):
    """Read interface to the remote store."""

    async def query(self, query: RemoteQuery) -> list[dict[str, object]]:
        """Return rows matching the query or raise QueryError."""


class RemoteInsertService(Protocol):
    """Write interface to the remote store."""

    async def insert(
        self, table: str, record: dict[str, object]
    ) -> list[dict[str, object]]:
        """Insert a row and return the stored rows, or raise InsertError."""
