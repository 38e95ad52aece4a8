"""Merge engine for reconciling remote records with cached state.

Every function here is pure: inputs are never mutated and nothing is kept
between calls. On an id collision the local record always wins; incoming
records are never merged field by field.
"""

from collections.abc import Iterable

from macro_sync.domain.entries import DayBucket, LocalEntry, MacroTotals


def compute_totals(entries: Iterable[LocalEntry]) -> MacroTotals:
    """Sum the nutrition of all entries."""
    totals = MacroTotals()
    for entry in entries:
        totals = totals.plus(entry.nutrition)
    return totals


def merge_day(
    existing: DayBucket | None, incoming: list[LocalEntry], date: str
) -> tuple[DayBucket, bool]:
    """Append incoming entries whose ids are new to the day's bucket.

    Returns the resulting bucket and whether anything was added. When nothing
    is new the existing bucket is returned as-is, stored totals included.
    """
    bucket = existing if existing is not None else DayBucket.empty(date)
    seen = bucket.entry_ids()
    novel: list[LocalEntry] = []
    for entry in incoming:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        novel.append(entry)

    if not novel:
        return bucket, False

    entries = [*bucket.entries, *novel]
    totals = compute_totals(entries)
    return DayBucket(date=bucket.date, entries=entries, totals=totals), True


def merge_plans(
    existing: list[dict[str, object]], incoming: list[dict[str, object]]
) -> tuple[list[dict[str, object]], bool]:
    """Prepend incoming plans whose ids are new, keeping incoming order."""
    seen = {_plan_id(plan) for plan in existing}
    novel: list[dict[str, object]] = []
    for plan in incoming:
        plan_id = _plan_id(plan)
        if plan_id in seen:
            continue
        seen.add(plan_id)
        novel.append(plan)

    if not novel:
        return list(existing), False
    return [*novel, *existing], True


def insert_entry(bucket: DayBucket, entry: LocalEntry) -> DayBucket:
    """Append one entry, updating totals incrementally."""
    return DayBucket(
        date=bucket.date,
        entries=[*bucket.entries, entry],
        totals=bucket.totals.plus(entry.nutrition),
    )


def remove_entry(bucket: DayBucket, entry_id: str) -> tuple[DayBucket, bool]:
    """Remove an entry by id and recompute totals from the remaining entries."""
    remaining = [entry for entry in bucket.entries if entry.id != entry_id]
    if len(remaining) == len(bucket.entries):
        return bucket, False
    totals = compute_totals(remaining)
    return DayBucket(date=bucket.date, entries=remaining, totals=totals), True


def _plan_id(plan: dict[str, object]) -> str:
    return str(plan.get("id"))
