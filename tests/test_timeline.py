from decimal import Decimal

from components.budget.months import is_month, month_bounds, month_of
from components.budget.timeline import (
    ActivityRecord,
    AllocationRecord,
    MonthEntry,
    build_timeline,
)


def D(value):
    return Decimal(str(value))


def test_groups_assigned_and_activity_per_month_and_category():
    timeline = build_timeline(
        [
            AllocationRecord(1, "2026-01", D(100)),
            AllocationRecord(2, "2026-02", D(40)),
        ],
        [
            ActivityRecord(1, "2026-01-05", D(-20)),
            ActivityRecord(1, "2026-01-20", D(-10)),
            ActivityRecord(2, "2026-03-01", D(-5)),
        ],
    )

    assert sorted(timeline) == ["2026-01", "2026-02", "2026-03"]
    assert timeline["2026-01"][1] == MonthEntry(assigned=D(100), activity=D(-30))
    assert timeline["2026-02"][2] == MonthEntry(assigned=D(40), activity=D(0))
    assert timeline["2026-03"][2] == MonthEntry(assigned=D(0), activity=D(-5))


def test_uncategorized_transactions_are_skipped():
    timeline = build_timeline([], [ActivityRecord(None, "2026-01-05", D(500))])

    assert timeline == {}


def test_months_on_or_after_cutoff_are_excluded():
    timeline = build_timeline(
        [AllocationRecord(1, "2026-01", D(10)), AllocationRecord(1, "2026-02", D(10))],
        [ActivityRecord(1, "2026-01-31", D(-1)), ActivityRecord(1, "2026-02-01", D(-1))],
        before_month="2026-02",
    )

    assert list(timeline) == ["2026-01"]
    assert timeline["2026-01"][1] == MonthEntry(assigned=D(10), activity=D(-1))


def test_last_day_of_short_month_is_inside_lexical_bounds():
    start, end = month_bounds("2026-04")

    assert start <= "2026-04-30" <= end
    assert not (start <= "2026-05-01" <= end)
    timeline = build_timeline([], [ActivityRecord(3, "2026-04-30", D(-7))], before_month="2026-05")
    assert timeline["2026-04"][3].activity == D(-7)


def test_month_helpers():
    assert is_month("2026-12")
    assert not is_month("2026-13")
    assert not is_month("2026-1")
    assert month_of("2026-02-28") == "2026-02"
