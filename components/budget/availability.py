"""Availability aggregation and the To Be Budgeted figure."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from components.budget.timeline import MonthEntry, ZERO

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Availability:
    """Per-category figures for one month."""
    category_id: int
    carryover: Decimal
    assigned: Decimal
    activity: Decimal
    available: Decimal
    goal_progress: Optional[float]


@dataclass(frozen=True)
class LedgerTotals:
    """Lifetime and monthly sums read from the record store for month M."""
    total_income: Decimal = ZERO          # inflows dated <= end of M, transfers excluded
    total_expense_prior: Decimal = ZERO   # outflows dated < start of M, transfers excluded (negative)
    month_income: Decimal = ZERO
    month_expenses: Decimal = ZERO
    month_assigned: Decimal = ZERO


@dataclass(frozen=True)
class BudgetSummary:
    to_be_budgeted: Decimal
    total_income: Decimal
    total_assigned: Decimal
    month_income: Decimal
    month_expenses: Decimal
    month_assigned: Decimal


def goal_progress(available: Decimal, goal_amount: Optional[Decimal]) -> Optional[float]:
    """Percentage of the goal covered, capped at 100. None without a goal."""
    if not goal_amount:
        return None
    return float(min(HUNDRED, available / goal_amount * HUNDRED))


def category_availability(
    category_id: int,
    carryover_in: Mapping[int, Decimal],
    month: Mapping[int, MonthEntry],
    goal_amount: Optional[Decimal] = None,
) -> Availability:
    """available = carryover_in + assigned + activity for the target month."""
    entry = month.get(category_id, MonthEntry())
    carried = carryover_in.get(category_id, ZERO)
    available = carried + entry.assigned + entry.activity
    return Availability(
        category_id=category_id,
        carryover=carried,
        assigned=entry.assigned,
        activity=entry.activity,
        available=available,
        goal_progress=goal_progress(available, goal_amount),
    )


def rolled_over_total(carryover_in: Iterable[Decimal]) -> Decimal:
    return sum((amount for amount in carryover_in if amount > ZERO), ZERO)


def debt_total(carryover_in: Iterable[Decimal]) -> Decimal:
    return sum((amount for amount in carryover_in if amount < ZERO), ZERO)


def to_be_budgeted(totals: LedgerTotals, carryover_in: Mapping[int, Decimal]) -> Decimal:
    """
    Unassigned pool for month M:

        total_income + total_expense_prior - total_rolled_over + total_debt - month_assigned

    Debt is added although it is already part of the category's own carry,
    so overspending reduces the pool twice.
    """
    total_rolled_over = rolled_over_total(carryover_in.values())
    total_debt = debt_total(carryover_in.values())
    return (
        totals.total_income
        + totals.total_expense_prior
        - total_rolled_over
        + total_debt
        - totals.month_assigned
    )


def summarize(totals: LedgerTotals, carryover_in: Mapping[int, Decimal]) -> BudgetSummary:
    """Build the month summary reported alongside To Be Budgeted."""
    return BudgetSummary(
        to_be_budgeted=to_be_budgeted(totals, carryover_in),
        total_income=totals.total_income,
        total_assigned=rolled_over_total(carryover_in.values()) + totals.month_assigned,
        month_income=totals.month_income,
        month_expenses=totals.month_expenses,
        month_assigned=totals.month_assigned,
    )
