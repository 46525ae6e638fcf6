"""Three-tier trip budget arithmetic."""

from dataclasses import dataclass, field
import math
from typing import Any, Dict, Mapping

from agent_kit.errors import InvalidArgument


TIERS = ("budget", "mid_range", "luxury")


@dataclass(frozen = True)
class RateTable:
    """Per person, per day rates in USD."""

    accommodation: Mapping[str, float] = field(
        default_factory = lambda: {"budget": 50, "mid_range": 120, "luxury": 300}
    )
    meals: Mapping[str, float] = field(
        default_factory = lambda: {"budget": 35, "mid_range": 75, "luxury": 150}
    )
    activities: float = 50
    local_transport: float = 20
    miscellaneous: float = 30

    def daily_rate(self, tier: str) -> float:
        if tier not in TIERS:
            raise InvalidArgument(f"Unknown budget tier: {tier}")
        return (
            self.accommodation[tier]
            + self.meals[tier]
            + self.activities
            + self.local_transport
            + self.miscellaneous
        )


DEFAULT_RATES = RateTable()


@dataclass(frozen = True)
class BudgetTier:
    name: str
    daily_rate: float
    total: float

    def per_person_per_day(self, days: int, people: int) -> int:
        # Halves round up.
        return math.floor(self.total / people / days + 0.5)


@dataclass(frozen = True)
class BudgetBreakdown:
    budget: BudgetTier
    mid_range: BudgetTier
    luxury: BudgetTier
    duration_days: int
    group_size: int

    def tiers(self):
        return (self.budget, self.mid_range, self.luxury)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "budget": self.budget.total,
            "mid_range": self.mid_range.total,
            "luxury": self.luxury.total,
            "duration_days": self.duration_days,
            "group_size": self.group_size,
        }


def compute_budget(days: int, people: int, rates: RateTable = DEFAULT_RATES) -> BudgetBreakdown:
    """
    Price a trip in three tiers.

    Each tier total is its daily rate times ``days`` times ``people``.
    Raises InvalidArgument unless both counts are positive integers.
    """
    days = _positive_int("days", days)
    people = _positive_int("people", people)

    tiers = {}
    for tier in TIERS:
        daily = rates.daily_rate(tier)
        tiers[tier] = BudgetTier(name = tier, daily_rate = daily, total = daily * days * people)

    return BudgetBreakdown(
        budget = tiers["budget"],
        mid_range = tiers["mid_range"],
        luxury = tiers["luxury"],
        duration_days = days,
        group_size = people,
    )


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    return value
