"""Per-domain sync orchestrators and the coordinator that runs them."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import ClassVar, Protocol

from macro_sync.domain.entries import DayBucket, LocalEntry
from macro_sync.domain.sync import SyncDomain, SyncOutcome, SyncReport
from macro_sync.services.merge import merge_day, merge_plans
from macro_sync.services.normalizer import normalize_food_entry, normalize_plan
from macro_sync.services.remote import RemoteQuery, RemoteQueryService
from macro_sync.services.store import LocalStore

_logger = logging.getLogger(__name__)

_MISSING_PRECONDITION = "missing owner id or remote service"


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(tz=UTC).date()


class DomainSync(Protocol):
    """Interface shared by the per-domain orchestrators."""

    domain: SyncDomain

    async def sync(self, owner_id: str | None) -> SyncOutcome:
        """Sync one domain for the owner, never raising."""


@dataclass
class _GuardedSync(ABC):
    """Fail-fast and error containment shared by the orchestrators."""

    remote: RemoteQueryService | None
    store: LocalStore
    cache_key: str

    async def sync(self, owner_id: str | None) -> SyncOutcome:
        """Sync the domain, converting any failure into a failed outcome."""
        if not owner_id or self.remote is None:
            _logger.info(
                "Skipping %s sync: %s", self.domain.value, _MISSING_PRECONDITION
            )
            return SyncOutcome.failure(self.domain, _MISSING_PRECONDITION)
        try:
            return await self._sync(self.remote, owner_id)
        except Exception as exc:
            _logger.exception(
                "Failed to sync %s", self.domain.value, extra={"owner_id": owner_id}
            )
            return SyncOutcome.failure(self.domain, str(exc) or type(exc).__name__)

    async def sync_domain(self, owner_id: str | None) -> bool:
        """Return True when the domain synced without a fatal error."""
        outcome = await self.sync(owner_id)
        return outcome.ok

    @abstractmethod
    async def _sync(self, remote: RemoteQueryService, owner_id: str) -> SyncOutcome:
        """Fetch, merge and persist one domain; errors propagate to sync."""

    async def _persist(self, value: dict[str, object]) -> None:
        await asyncio.to_thread(self.store.set, self.cache_key, value)


@dataclass
class FoodEntrySync(_GuardedSync):
    """Pulls a trailing window of logged food entries into the macro cache."""

    window_days: int = 30
    today: Callable[[], date] = utc_today

    domain: ClassVar[SyncDomain] = SyncDomain.FOOD_ENTRIES

    def window(self) -> tuple[date, date]:
        """Return the inclusive date range fetched from the remote store."""
        end = self.today()
        start = end - timedelta(days=max(self.window_days, 1) - 1)
        return start, end

    async def _sync(self, remote: RemoteQueryService, owner_id: str) -> SyncOutcome:
        start, end = self.window()
        rows = await remote.query(
            RemoteQuery(
                table=self.domain.table,
                owner_id=owner_id,
                order_by="date",
                date_column="date",
                date_from=start,
                date_to=end,
            )
        )
        if not rows:
            _logger.info("No remote food entries for %s to %s", start, end)
            return SyncOutcome(domain=self.domain, ok=True)

        by_date: dict[str, list[LocalEntry]] = {}
        for row in rows:
            entry = normalize_food_entry(row)
            by_date.setdefault(entry.timestamp, []).append(entry)

        cache = self.store.get(self.cache_key)
        added = 0
        for day, entries in by_date.items():
            raw = cache.get(day)
            existing = None
            if isinstance(raw, dict):
                existing = DayBucket.from_dict(raw, date=day)
            bucket, changed = merge_day(existing, entries, day)
            if not changed:
                continue
            added += len(bucket.entries) - (len(existing.entries) if existing else 0)
            cache[day] = bucket.to_dict()

        if added:
            await self._persist(cache)
            _logger.info("Added %s remote food entries", added)
        return SyncOutcome(domain=self.domain, ok=True, changed=added > 0, added=added)


@dataclass
class PlanSync(_GuardedSync):
    """Pulls an owner's plans of one kind into the plan cache."""

    domain: SyncDomain = SyncDomain.WORKOUT_PLANS

    def __post_init__(self) -> None:
        if self.domain is SyncDomain.FOOD_ENTRIES:
            raise ValueError("PlanSync requires a plan domain")

    async def _sync(self, remote: RemoteQueryService, owner_id: str) -> SyncOutcome:
        rows = await remote.query(
            RemoteQuery(
                table=self.domain.table, owner_id=owner_id, order_by="created_at"
            )
        )
        if not rows:
            _logger.info("No remote %s for owner", self.domain.value)
            return SyncOutcome(domain=self.domain, ok=True)

        incoming = [normalize_plan(row) for row in rows]
        cache = self.store.get(self.cache_key)
        existing = cache.get(owner_id) or []
        if not isinstance(existing, list):
            raise ValueError(f"Cached {self.domain.value} for owner is not a list")

        merged, changed = merge_plans(existing, incoming)
        if not changed:
            return SyncOutcome(domain=self.domain, ok=True)

        added = len(merged) - len(existing)
        cache[owner_id] = merged
        await self._persist(cache)
        _logger.info("Added %s remote %s", added, self.domain.value)
        return SyncOutcome(domain=self.domain, ok=True, changed=True, added=added)


@dataclass
class SyncCoordinator:
    """Runs every domain orchestrator concurrently and aggregates results."""

    orchestrators: list[DomainSync]

    async def run(self, owner_id: str | None) -> SyncReport:
        """Sync all domains, waiting for each regardless of failures."""
        if not owner_id:
            _logger.info("Skipping sync: no owner id provided")
            return SyncReport()

        results = await asyncio.gather(
            *(orchestrator.sync(owner_id) for orchestrator in self.orchestrators),
            return_exceptions=True,
        )
        outcomes: list[SyncOutcome] = []
        for orchestrator, result in zip(self.orchestrators, results, strict=True):
            if not isinstance(result, BaseException):
                outcomes.append(result)
                continue
            if not isinstance(result, Exception):
                raise result
            _logger.error(
                "Unexpected failure syncing %s",
                orchestrator.domain.value,
                exc_info=result,
            )
            error = str(result) or type(result).__name__
            outcomes.append(SyncOutcome.failure(orchestrator.domain, error))

        for outcome in outcomes:
            _logger.info(
                "Sync %s: %s",
                outcome.domain.value,
                "ok" if outcome.ok else f"failed ({outcome.error})",
            )
        report = SyncReport(outcomes=outcomes)
        if not report.ok:
            _logger.warning("Some domains failed to sync")
        return report

    async def sync_all(self, owner_id: str | None) -> bool:
        """Return True only if every domain synced successfully."""
        report = await self.run(owner_id)
        return report.ok
