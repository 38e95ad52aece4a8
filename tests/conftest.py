"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from macro_sync.config import Settings
from macro_sync.domain.entries import LocalEntry, Nutrition
from macro_sync.services.remote import (
    InsertError,
    RemoteInsertService,
    RemoteQuery,
    RemoteQueryService,
)
from macro_sync.services.store import InMemoryStore

TODAY = date(2024, 6, 30)
OWNER_ID = "user_123"


@dataclass
class FakeRemoteService(RemoteQueryService, RemoteInsertService):
    """Fake remote store serving canned rows per table."""

    rows: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    insert_error: InsertError | None = None
    queries: list[RemoteQuery] = field(default_factory=list)
    inserted: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    async def query(self, query: RemoteQuery) -> list[dict[str, object]]:
        self.queries.append(query)
        if query.table in self.failures:
            raise self.failures[query.table]
        return [dict(row) for row in self.rows.get(query.table, [])]

    async def insert(
        self, table: str, record: dict[str, object]
    ) -> list[dict[str, object]]:
        if self.insert_error is not None:
            raise self.insert_error
        self.inserted.append((table, record))
        return [{"id": len(self.inserted), **record}]


def food_row(  # noqa: PLR0913
    row_id: int,
    day: str,
    name: str = "Oats",
    calories: float | None = 100,
    protein: float | None = 5,
    fat: float | None = 2,
    carbs: float | None = 15,
) -> dict[str, object]:
    """Build a remote food entry row."""
    return {
        "id": row_id,
        "clerk_user_id": OWNER_ID,
        "date": day,
        "name": name,
        "calories": calories,
        "protein": protein,
        "fat": fat,
        "carbs": carbs,
    }


def plan_row(row_id: int, plan_id: str, title: str = "Plan") -> dict[str, object]:
    """Build a remote plan row wrapping its payload."""
    return {
        "id": row_id,
        "clerk_user_id": OWNER_ID,
        "created_at": "2024-06-01T08:00:00+00:00",
        "plan_data": {"id": plan_id, "title": title},
    }


def local_entry(entry_id: str, calories: float = 100, **nutrition: float) -> LocalEntry:
    """Build a locally logged entry."""
    return LocalEntry(
        id=entry_id,
        timestamp="2024-06-30T12:00:00+00:00",
        name=f"entry {entry_id}",
        nutrition=Nutrition(
            calories=calories,
            protein_g=nutrition.get("protein_g", 0.0),
            fat_g=nutrition.get("fat_g", 0.0),
            carbs_g=nutrition.get("carbs_g", 0.0),
        ),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="header.payload.signature",
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def remote() -> FakeRemoteService:
    return FakeRemoteService()
