"""Macro journal for live entry logging and cached day views."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

from macro_sync.domain.entries import (
    DayBucket,
    LocalEntry,
    MacroTotals,
    Nutrition,
    read_number_or_zero,
)
from macro_sync.domain.sync import SyncDomain
from macro_sync.services.merge import insert_entry, remove_entry
from macro_sync.services.remote import InsertError, RemoteInsertService
from macro_sync.services.store import LocalStore
from macro_sync.services.sync import utc_today

_logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def week_start(reference: date) -> date:
    """Return the Monday of the week containing the reference date."""
    return reference - timedelta(days=reference.weekday())


@dataclass
class MacroJournal:
    """Reads and writes the local macro cache outside of sync."""

    store: LocalStore
    cache_key: str = "caltrax-macros"
    remote: RemoteInsertService | None = None
    owner_column: str = "clerk_user_id"
    today: Callable[[], date] = utc_today
    now: Callable[[], datetime] = _utc_now

    async def add_food_entry(
        self, food: dict[str, object], owner_id: str | None = None
    ) -> LocalEntry:
        """Log a food entry for today and mirror it to the remote store.

        The entry is cached locally first. When an owner id and an insert
        service are available the row is also inserted remotely; an
        InsertError from that write is re-raised so the caller knows the
        entry was not saved remotely.
        """
        day = self.today().isoformat()
        raw_nutrition = food.get("nutrition")
        nutrition = Nutrition.from_dict(
            raw_nutrition if isinstance(raw_nutrition, dict) else {}
        )
        entry = LocalEntry(
            id=str(uuid4()),
            timestamp=self.now().isoformat(),
            name=str(food.get("name") or ""),
            nutrition=nutrition,
            health_score=read_number_or_zero(food.get("score")),
            confidence=read_number_or_zero(food.get("confidence")),
        )

        cache = self.store.get(self.cache_key)
        bucket = _bucket_from_cache(cache, day)
        cache[day] = insert_entry(bucket, entry).to_dict()
        await asyncio.to_thread(self.store.set, self.cache_key, cache)

        if owner_id and self.remote is not None:
            record = {
                self.owner_column: owner_id,
                "date": day,
                "name": entry.name,
                "calories": nutrition.calories,
                "protein": nutrition.protein_g,
                "fat": nutrition.fat_g,
                "carbs": nutrition.carbs_g,
            }
            try:
                await self.remote.insert(SyncDomain.FOOD_ENTRIES.table, record)
            except InsertError:
                _logger.exception(
                    "Failed to save food entry remotely", extra={"owner_id": owner_id}
                )
                raise
        return entry

    async def delete_entry(self, day: str, entry_id: str) -> bool:
        """Remove an entry from a day; return False if it was not found."""
        cache = self.store.get(self.cache_key)
        if not isinstance(cache.get(day), dict):
            return False
        bucket, removed = remove_entry(_bucket_from_cache(cache, day), entry_id)
        if not removed:
            return False
        cache[day] = bucket.to_dict()
        await asyncio.to_thread(self.store.set, self.cache_key, cache)
        return True

    def get_day(self, day: str) -> DayBucket:
        """Return the cached bucket for a date, or an empty one."""
        return _bucket_from_cache(self.store.get(self.cache_key), day)

    def get_today(self) -> DayBucket:
        """Return today's cached bucket."""
        return self.get_day(self.today().isoformat())

    def get_week(self, reference: date | None = None) -> list[DayBucket]:
        """Return seven buckets starting on the Monday of the reference week."""
        start = week_start(reference or self.today())
        cache = self.store.get(self.cache_key)
        return [
            _bucket_from_cache(cache, (start + timedelta(days=offset)).isoformat())
            for offset in range(DAYS_PER_WEEK)
        ]

    def get_weekly_totals(self, reference: date | None = None) -> MacroTotals:
        """Return summed totals for the reference week."""
        totals = MacroTotals()
        for bucket in self.get_week(reference):
            totals = MacroTotals(
                calories=totals.calories + bucket.totals.calories,
                protein=totals.protein + bucket.totals.protein,
                fat=totals.fat + bucket.totals.fat,
                carbs=totals.carbs + bucket.totals.carbs,
            )
        return totals


def _bucket_from_cache(cache: dict[str, object], day: str) -> DayBucket:
    raw = cache.get(day)
    if not isinstance(raw, dict):
        return DayBucket.empty(day)
    return DayBucket.from_dict(raw, date=day)
