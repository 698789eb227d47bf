"""
Carryover propagation.

Walks the timeline month by month and decides, per category, where the
month-end balance goes:

- a negative balance always stays on the category as debt;
- ``rollover`` keeps a positive balance on the category;
- ``sweep`` moves a positive balance onto the sweep target;
- ``none`` (or ``sweep`` without a usable target) forfeits it back to the
  To Be Budgeted pool.

Each month is one pure transition ``step(policies, carryover, month) ->
carryover``. A swept amount lands in the target's carry for the *next*
month, so sweep chains advance one hop per month.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

from components.budget.timeline import MonthEntry, Timeline, ZERO
from components.category.models import RolloverStrategy
from components.core.log_config import get_logger

logger = get_logger(__name__)

CarryoverMap = Dict[int, Decimal]

_EMPTY_ENTRY = MonthEntry()


@dataclass(frozen=True)
class CategoryPolicy:
    """Snapshot of a category's rollover configuration."""
    category_id: int
    strategy: RolloverStrategy = RolloverStrategy.NONE
    sweep_target_id: Optional[int] = None

    @classmethod
    def from_category(cls, category) -> "CategoryPolicy":
        return cls(
            category_id=category.id,
            strategy=RolloverStrategy(category.rollover_strategy or RolloverStrategy.NONE.value),
            sweep_target_id=category.sweep_target_id,
        )


def policy_index(policies: Iterable[CategoryPolicy]) -> Dict[int, CategoryPolicy]:
    return {policy.category_id: policy for policy in policies}


def _destination(
    policy: CategoryPolicy,
    balance: Decimal,
    policies: Mapping[int, CategoryPolicy],
) -> Optional[int]:
    """Category that receives ``balance`` next month, or None if forfeited."""
    if balance < ZERO:
        return policy.category_id
    if policy.strategy is RolloverStrategy.ROLLOVER:
        return policy.category_id
    if policy.strategy is RolloverStrategy.SWEEP and policy.sweep_target_id in policies:
        return policy.sweep_target_id
    return None


def step(
    policies: Mapping[int, CategoryPolicy],
    carryover: Mapping[int, Decimal],
    month: Mapping[int, MonthEntry],
) -> CarryoverMap:
    """Apply one month to ``carryover`` and return the next carryover map."""
    # All balances are read before any redirection is written.
    balances = {}
    for category_id in policies:
        entry = month.get(category_id, _EMPTY_ENTRY)
        balances[category_id] = carryover.get(category_id, ZERO) + entry.assigned + entry.activity

    next_carryover: CarryoverMap = {}
    for category_id, balance in balances.items():
        policy = policies[category_id]
        destination = _destination(policy, balance, policies)
        if destination is None:
            continue
        if destination != category_id:
            logger.debug(
                "Sweeping balance",
                extra={"category_id": category_id, "target_id": destination, "amount": balance},
            )
        next_carryover[destination] = next_carryover.get(destination, ZERO) + balance
    return next_carryover


def propagate(
    policies: Mapping[int, CategoryPolicy],
    timeline: Timeline,
) -> CarryoverMap:
    """Fold every timeline month in chronological order into a carryover map."""
    carryover: CarryoverMap = {}
    for month in sorted(timeline):
        carryover = step(policies, carryover, timeline[month])
    logger.debug("Carryover propagated", extra={"months": len(timeline), "categories": len(policies)})
    return carryover
