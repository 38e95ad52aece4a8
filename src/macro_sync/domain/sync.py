"""Domain models for sync domains and their outcomes."""

from dataclasses import dataclass, field
from enum import Enum


class SyncDomain(Enum):
    """Record kinds synced independently from the remote store."""

    FOOD_ENTRIES = "food_entries"
    WORKOUT_PLANS = "workout_plans"
    MEAL_PLANS = "meal_plans"

    @property
    def table(self) -> str:
        """Return the remote table backing this domain."""
        return self.value


@dataclass(frozen=True)
class SyncOutcome:
    """Result of syncing one domain for one owner."""

    domain: SyncDomain
    ok: bool
    changed: bool = False
    added: int = 0
    error: str | None = None

    @classmethod
    def failure(cls, domain: SyncDomain, error: str) -> "SyncOutcome":
        """Return a failed outcome carrying an error description."""
        return cls(domain=domain, ok=False, error=error)


@dataclass(frozen=True)
class SyncReport:
    """Aggregated outcomes of a full sync pass."""

    outcomes: list[SyncOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True only if every domain synced and at least one ran."""
        return bool(self.outcomes) and all(outcome.ok for outcome in self.outcomes)

    def outcome_for(self, domain: SyncDomain) -> SyncOutcome | None:
        """Return the outcome recorded for a domain, if any."""
        for outcome in self.outcomes:
            if outcome.domain is domain:
                return outcome
        return None
