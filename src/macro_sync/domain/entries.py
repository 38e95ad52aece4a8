"""Domain models for logged food entries and daily buckets."""

import logging
import math
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)

_NUTRITION_KEYS = ("calories", "protein_g", "fat_g", "carbs_g")
_ENTRY_KEYS = (
    "id",
    "timestamp",
    "name",
    "nutrition",
    "healthScore",
    "confidence",
    "syncedFromRemote",
)


@dataclass(frozen=True)
class Nutrition:
    """Macronutrients recorded for a single entry."""

    calories: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0
    extras: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "Nutrition":
        """Build nutrition from its cached form."""
        return cls(
            calories=read_number_or_zero(payload.get("calories")),
            protein_g=read_number_or_zero(payload.get("protein_g")),
            fat_g=read_number_or_zero(payload.get("fat_g")),
            carbs_g=read_number_or_zero(payload.get("carbs_g")),
            extras={k: v for k, v in payload.items() if k not in _NUTRITION_KEYS},
        )

    def to_dict(self) -> dict[str, object]:
        """Return the cached form."""
        return {
            **self.extras,
            "calories": self.calories,
            "protein_g": self.protein_g,
            "fat_g": self.fat_g,
            "carbs_g": self.carbs_g,
        }


@dataclass(frozen=True)
class LocalEntry:
    """Canonical locally cached food entry."""

    id: str
    timestamp: str
    name: str
    nutrition: Nutrition
    health_score: float = 0.0
    confidence: float = 0.0
    synced_from_remote: bool = False
    extras: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "LocalEntry":
        """Build an entry from its cached form."""
        nutrition = payload.get("nutrition")
        if not isinstance(nutrition, dict):
            nutrition = {}
        return cls(
            id=str(payload["id"]),
            timestamp=str(payload.get("timestamp") or ""),
            name=str(payload.get("name") or ""),
            nutrition=Nutrition.from_dict(nutrition),
            health_score=read_number_or_zero(payload.get("healthScore")),
            confidence=read_number_or_zero(payload.get("confidence")),
            synced_from_remote=bool(payload.get("syncedFromRemote", False)),
            extras={k: v for k, v in payload.items() if k not in _ENTRY_KEYS},
        )

    def to_dict(self) -> dict[str, object]:
        """Return the cached form."""
        return {
            **self.extras,
            "id": self.id,
            "timestamp": self.timestamp,
            "name": self.name,
            "nutrition": self.nutrition.to_dict(),
            "healthScore": self.health_score,
            "confidence": self.confidence,
            "syncedFromRemote": self.synced_from_remote,
        }


@dataclass(frozen=True)
class MacroTotals:
    """Summed macros for a day or a period."""

    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "MacroTotals":
        """Build totals from their cached form."""
        return cls(
            calories=read_number_or_zero(payload.get("calories")),
            protein=read_number_or_zero(payload.get("protein")),
            fat=read_number_or_zero(payload.get("fat")),
            carbs=read_number_or_zero(payload.get("carbs")),
        )

    def to_dict(self) -> dict[str, float]:
        """Return the cached form."""
        return {
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
        }

    def plus(self, nutrition: Nutrition) -> "MacroTotals":
        """Return totals with one entry's nutrition added."""
        return MacroTotals(
            calories=self.calories + nutrition.calories,
            protein=self.protein + nutrition.protein_g,
            fat=self.fat + nutrition.fat_g,
            carbs=self.carbs + nutrition.carbs_g,
        )


@dataclass(frozen=True)
class DayBucket:
    """Entries logged on one calendar date with their totals."""

    date: str
    entries: list[LocalEntry] = field(default_factory=list)
    totals: MacroTotals = field(default_factory=MacroTotals)

    @classmethod
    def empty(cls, date: str) -> "DayBucket":
        """Return a bucket with no entries and zero totals."""
        return cls(date=date, entries=[], totals=MacroTotals())

    @classmethod
    def from_dict(cls, payload: dict[str, object], date: str = "") -> "DayBucket":
        """Build a bucket from its cached form.

        Cached entries that are not objects or have no id are dropped, and the
        totals are then recomputed from the entries that remain.
        """
        bucket_date = str(payload.get("date") or date)
        raw_entries = payload.get("entries")
        if not isinstance(raw_entries, list):
            raw_entries = []
        entries = [
            LocalEntry.from_dict(entry)
            for entry in raw_entries
            if isinstance(entry, dict) and entry.get("id") is not None
        ]
        raw_totals = payload.get("totals")
        totals = MacroTotals.from_dict(
            raw_totals if isinstance(raw_totals, dict) else {}
        )
        if len(entries) != len(raw_entries):
            _logger.warning(
                "Dropped %s malformed cached entries for %s",
                len(raw_entries) - len(entries),
                bucket_date,
            )
            totals = MacroTotals()
            for entry in entries:
                totals = totals.plus(entry.nutrition)
        return cls(date=bucket_date, entries=entries, totals=totals)

    def to_dict(self) -> dict[str, object]:
        """Return the cached form."""
        return {
            "date": self.date,
            "entries": [entry.to_dict() for entry in self.entries],
            "totals": self.totals.to_dict(),
        }

    def entry_ids(self) -> set[str]:
        """Return the ids of all entries in the bucket."""
        return {entry.id for entry in self.entries}


def read_number_or_zero(value: object) -> float:
    """Return value as a float, or 0.0 when it is missing or not numeric."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number
