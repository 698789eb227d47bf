"""Timeline builder: group raw allocations and activity by month and category."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional

from components.budget.months import month_of, month_start

ZERO = Decimal("0")


@dataclass(frozen=True)
class AllocationRecord:
    """One allocation row as read from the record store."""
    category_id: int
    month: str
    assigned: Decimal


@dataclass(frozen=True)
class ActivityRecord:
    """One categorized transaction as read from the record store."""
    category_id: int
    date: str
    amount: Decimal


@dataclass(frozen=True)
class MonthEntry:
    """Assigned and activity totals for one category in one month."""
    assigned: Decimal = ZERO
    activity: Decimal = ZERO

    def plus(self, assigned: Decimal = ZERO, activity: Decimal = ZERO) -> "MonthEntry":
        return MonthEntry(self.assigned + assigned, self.activity + activity)


# month -> category_id -> entry
Timeline = Dict[str, Dict[int, MonthEntry]]


def build_timeline(
    allocations: Iterable[AllocationRecord],
    transactions: Iterable[ActivityRecord],
    before_month: Optional[str] = None,
) -> Timeline:
    """
    Aggregate allocations and categorized transactions per month and category.

    Only months strictly before ``before_month`` are kept when it is given.
    A month appears only if it has at least one allocation or transaction.
    Transactions without a category are skipped.
    """
    cutoff_date = month_start(before_month) if before_month else None
    timeline: Timeline = {}

    for allocation in allocations:
        if before_month and allocation.month >= before_month:
            continue
        month = timeline.setdefault(allocation.month, {})
        entry = month.get(allocation.category_id, MonthEntry())
        month[allocation.category_id] = entry.plus(assigned=allocation.assigned)

    for txn in transactions:
        if txn.category_id is None:
            continue
        if cutoff_date and txn.date >= cutoff_date:
            continue
        month = timeline.setdefault(month_of(txn.date), {})
        entry = month.get(txn.category_id, MonthEntry())
        month[txn.category_id] = entry.plus(activity=txn.amount)

    return timeline
