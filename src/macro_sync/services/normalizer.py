"""Mapping of remote rows into local cache records."""

from macro_sync.domain.entries import LocalEntry, Nutrition, read_number_or_zero
from macro_sync.domain.sync import SyncDomain

__all__ = [
    "normalize",
    "normalize_food_entry",
    "normalize_plan",
    "read_number_or_zero",
]


def normalize_food_entry(row: dict[str, object]) -> LocalEntry:
    """Convert a remote food entry row into a local entry.

    The remote schema has no creation timestamp, so the calendar date doubles
    as the entry timestamp. Health score and confidence are not stored
    remotely and default to zero.
    """
    if row.get("id") is None:
        raise ValueError("Remote food entry has no id")
    return LocalEntry(
        id=str(row["id"]),
        timestamp=str(row.get("date") or ""),
        name=str(row.get("name") or ""),
        nutrition=Nutrition(
            calories=read_number_or_zero(row.get("calories")),
            protein_g=read_number_or_zero(row.get("protein")),
            fat_g=read_number_or_zero(row.get("fat")),
            carbs_g=read_number_or_zero(row.get("carbs")),
        ),
        health_score=0.0,
        confidence=0.0,
        synced_from_remote=True,
    )


def normalize_plan(row: dict[str, object]) -> dict[str, object]:
    """Return the plan payload embedded in a remote plan row."""
    plan = row.get("plan_data")
    if not isinstance(plan, dict):
        raise ValueError(f"Remote plan row {row.get('id')} has no plan_data object")
    if plan.get("id") is None:
        raise ValueError(f"Remote plan row {row.get('id')} has a plan without an id")
    return dict(plan)


def normalize(
    row: dict[str, object], domain: SyncDomain
) -> LocalEntry | dict[str, object]:
    """Normalize a remote row for the given domain."""
    if domain is SyncDomain.FOOD_ENTRIES:
        return normalize_food_entry(row)
    return normalize_plan(row)
