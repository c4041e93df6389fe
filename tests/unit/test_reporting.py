"""Unit tests for monthly, current-period and statement aggregation"""

from datetime import date
from decimal import Decimal
from pennywise.domain.billing_cycles import generate_cycles
from pennywise.domain.models import BillingCycle, PaymentMethod, Transaction
from pennywise.domain.reporting import (
    available_cycles,
    build_card_statement,
    compute_totals,
    current_totals,
    group_by_week,
    summarize_month,
    transactions_in_cycle,
)


def _ids(transactions):
    return [t.id for t in transactions]


def test_summarize_month_groups_by_effective_billing_date(visa, cash, sample_transactions):
    september = summarize_month(sample_transactions, [visa, cash], 2024, 9)

    # Sep 25 card purchase moves to the October statement, Aug 20 cheque (+30) moves in
    assert sorted(_ids(september.transactions)) == [1, 2, 4, 5]
    assert september.totals.total_expenses == Decimal("220")
    assert september.totals.total_income == Decimal("1000")
    assert september.totals.net_balance == Decimal("780")
    assert september.totals.transaction_count == 4


def test_summarize_month_weekly_breakdown(visa, sample_transactions):
    september = summarize_month(sample_transactions, [visa], 2024, 9)

    # Sep 10 -> week 2; statement close Sep 20 and cheque Sep 19 -> week 3; income excluded
    assert list(september.expenses_by_week) == [2, 3]
    assert _ids(september.expenses_by_week[2]) == [1]
    assert sorted(_ids(september.expenses_by_week[3])) == [2, 5]


def test_summarize_month_statement_month(visa, sample_transactions):
    october = summarize_month(sample_transactions, [visa], 2024, 10)

    assert _ids(october.transactions) == [3]
    assert october.totals.total_expenses == Decimal("200")


def test_summarize_month_without_card_config_uses_purchase_month(sample_transactions):
    september = summarize_month(sample_transactions, [], 2024, 9)
    assert sorted(_ids(september.transactions)) == [1, 2, 3, 4, 5]


def test_group_by_week_empty():
    assert group_by_week([], []) == {}


def test_current_totals(visa, sample_transactions):
    totals = current_totals(sample_transactions, [visa], date(2024, 10, 5))

    # Only the Sep 25 purchase has Oct 5 inside its statement (Sep 21 - Oct 20)
    assert totals.transaction_count == 1
    assert totals.total_expenses == Decimal("200")


def test_compute_totals_empty():
    totals = compute_totals([])
    assert totals.total_expenses == Decimal("0")
    assert totals.net_balance == Decimal("0")
    assert totals.transaction_count == 0


def test_available_cycles_distinct_and_sorted(sample_transactions):
    card_purchases = [t for t in sample_transactions if t.payment_method == PaymentMethod.CREDIT_CARD]
    repeated = card_purchases + [Transaction(date=date(2024, 9, 1), payment_method=PaymentMethod.CREDIT_CARD)]

    assert available_cycles(list(reversed(repeated)), 20) == [
        (date(2024, 8, 21), date(2024, 9, 20)),
        (date(2024, 9, 21), date(2024, 10, 20)),
    ]


def test_transactions_in_cycle_newest_first(sample_transactions):
    cycle = BillingCycle(
        id=0,
        card_id=1,
        card_name="Visa",
        start_date=date(2024, 8, 21),
        end_date=date(2024, 9, 20),
        due_date=date(2024, 10, 11),
    )
    selected = transactions_in_cycle(sample_transactions, cycle)
    assert _ids(selected) == [2, 1, 4, 5]


def test_transactions_in_cycle_bounds_are_inclusive(visa, sample_transactions):
    (cycle,) = generate_cycles(visa, 1, date(2024, 9, 25))
    selected = transactions_in_cycle(sample_transactions, cycle)
    assert _ids(selected) == [3]


def test_build_card_statement(visa, sample_transactions):
    statement = build_card_statement(visa, sample_transactions, date(2024, 10, 5))

    assert statement.cycle.start_date == date(2024, 9, 21)
    assert statement.cycle.end_date == date(2024, 10, 20)
    assert statement.cycle.due_date == date(2024, 11, 10)
    assert _ids(statement.transactions) == [3]
    assert statement.totals.total_expenses == Decimal("200")


def test_build_card_statement_for_card_without_cycle(cash, sample_transactions):
    assert build_card_statement(cash, sample_transactions, date(2024, 10, 5)) is None


def test_build_card_statement_only_own_transactions(visa):
    other_card = Transaction(
        id=9,
        date=date(2024, 9, 25),
        amount=Decimal("5"),
        payment_method=PaymentMethod.CREDIT_CARD,
        payment_method_config_id=42,
    )
    statement = build_card_statement(visa, [other_card], date(2024, 10, 5))
    assert statement.transactions == []
    assert statement.totals.transaction_count == 0
