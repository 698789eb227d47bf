from decimal import Decimal

from components.budget.carryover import CategoryPolicy, policy_index, propagate, step
from components.budget.timeline import MonthEntry
from components.category.models import RolloverStrategy

NONE = RolloverStrategy.NONE
ROLLOVER = RolloverStrategy.ROLLOVER
SWEEP = RolloverStrategy.SWEEP


def D(value):
    return Decimal(str(value))


def policies(*items):
    return policy_index(CategoryPolicy(*item) for item in items)


def entry(assigned=0, activity=0):
    return MonthEntry(D(assigned), D(activity))


def test_rollover_keeps_positive_balance():
    result = propagate(
        policies((1, ROLLOVER)),
        {"2026-01": {1: entry(100, -30)}},
    )

    assert result == {1: D(70)}


def test_none_forfeits_positive_balance():
    result = propagate(policies((1, NONE)), {"2026-01": {1: entry(50)}})

    assert result.get(1, D(0)) == D(0)
    assert sum(result.values(), D(0)) == D(0)


def test_sweep_moves_whole_balance_to_target():
    result = propagate(
        policies((1, SWEEP, 2), (2, NONE)),
        {"2026-01": {1: entry(40)}},
    )

    assert result.get(1, D(0)) == D(0)
    assert result[2] == D(40)


def test_sweep_without_target_behaves_as_none():
    result = propagate(policies((1, SWEEP, None)), {"2026-01": {1: entry(25)}})

    assert result == {}


def test_sweep_to_unknown_category_is_forfeited():
    result = propagate(policies((1, SWEEP, 99)), {"2026-01": {1: entry(25)}})

    assert result == {}


def test_debt_carries_regardless_of_strategy():
    for strategy, target in ((NONE, None), (ROLLOVER, None), (SWEEP, 2)):
        result = propagate(
            policies((1, strategy, target), (2, ROLLOVER)),
            {"2026-01": {1: entry(10, -50)}},
        )
        assert result[1] == D(-40)
        assert result.get(2, D(0)) == D(0)


def test_debt_accumulates_across_months():
    result = propagate(
        policies((1, NONE)),
        {
            "2026-01": {1: entry(10, -50)},
            "2026-02": {1: entry(0, -5)},
        },
    )

    assert result[1] == D(-45)


def test_debt_is_paid_back_by_later_assignment():
    result = propagate(
        policies((1, ROLLOVER)),
        {
            "2026-01": {1: entry(0, -40)},
            "2026-02": {1: entry(100, 0)},
        },
    )

    assert result[1] == D(60)


def test_sweep_chain_advances_one_hop_per_month():
    rules = policies((1, SWEEP, 2), (2, SWEEP, 3), (3, ROLLOVER))

    after_first = propagate(rules, {"2026-01": {1: entry(10)}})
    assert after_first.get(2) == D(10)
    assert after_first.get(3, D(0)) == D(0)

    after_second = propagate(rules, {"2026-01": {1: entry(10)}, "2026-02": {3: entry(0)}})
    assert after_second.get(2, D(0)) == D(0)
    assert after_second[3] == D(10)


def test_sweep_into_indebted_target_is_order_independent():
    month = {1: entry(40), 2: entry(0, -30)}
    source_first = policy_index([CategoryPolicy(1, SWEEP, 2), CategoryPolicy(2, ROLLOVER)])
    target_first = policy_index([CategoryPolicy(2, ROLLOVER), CategoryPolicy(1, SWEEP, 2)])

    assert step(source_first, {}, month) == step(target_first, {}, month)
    assert step(source_first, {}, month)[2] == D(10)


def test_self_sweep_is_not_double_counted():
    result = step(policies((1, SWEEP, 1)), {1: D(5)}, {1: entry(35)})

    assert result == {1: D(40)}


def test_categories_without_activity_still_carry():
    result = propagate(
        policies((1, ROLLOVER), (2, ROLLOVER)),
        {
            "2026-01": {1: entry(20)},
            "2026-02": {2: entry(5)},
        },
    )

    assert result == {1: D(20), 2: D(5)}


def test_step_does_not_mutate_previous_state():
    previous = {1: D(10)}
    rules = policies((1, SWEEP, 2), (2, ROLLOVER))

    step(rules, previous, {1: entry(5)})

    assert previous == {1: D(10)}


def test_months_are_folded_in_chronological_order():
    rules = policies((1, NONE))
    timeline = {
        "2026-02": {1: entry(0, -10)},
        "2025-12": {1: entry(100)},
    }

    # December's 100 is forfeited before February's overspend.
    assert propagate(rules, timeline) == {1: D(-10)}


def test_transactions_for_unknown_categories_are_ignored():
    result = propagate(policies((1, ROLLOVER)), {"2026-01": {7: entry(0, -20)}})

    assert result == {1: D(0)}


def test_policy_from_category_defaults_to_none():
    class Row:
        id = 4
        rollover_strategy = None
        sweep_target_id = None

    assert CategoryPolicy.from_category(Row()) == CategoryPolicy(4, NONE, None)
