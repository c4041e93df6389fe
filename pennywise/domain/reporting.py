"""Aggregation of transactions into monthly, weekly and per-statement views"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from pennywise.domain.billing_cycles import (
    DUE_DATE_GRACE_DAYS,
    calculate_cycle,
    effective_billing_date,
    generate_cycles,
    should_include_in_current_totals,
)
from pennywise.domain.models import (
    BillingCycle,
    CardStatement,
    MonthlySummary,
    PaymentMethodConfig,
    Totals,
    Transaction,
    TransactionType,
)
from pennywise.utils.date_utils import to_date, week_of_month


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    totals = Totals()
    for txn in transactions:
        if txn.type == TransactionType.EXPENSE:
            totals.total_expenses += Decimal(txn.amount)
        else:
            totals.total_income += Decimal(txn.amount)
        totals.transaction_count += 1
    return totals


def group_by_week(
    transactions: Iterable[Transaction],
    configs: Sequence[PaymentMethodConfig],
) -> Dict[int, List[Transaction]]:
    """Expense transactions keyed by week of month of their effective billing date"""
    weeks: Dict[int, List[Transaction]] = {}
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        week = week_of_month(effective_billing_date(txn, configs))
        weeks.setdefault(week, []).append(txn)
    return dict(sorted(weeks.items()))


def summarize_month(
    transactions: Iterable[Transaction],
    configs: Sequence[PaymentMethodConfig],
    year: int,
    month: int,
) -> MonthlySummary:
    """
    Monthly view: every transaction whose effective billing date falls in
    the month, with totals and a week-by-week breakdown of expenses.

    Credit purchases on a configured card land in their statement month,
    so a Sep 25 purchase on a card closing on the 20th shows up in October.
    """
    in_month = []
    for txn in transactions:
        billed = effective_billing_date(txn, configs)
        if (billed.year, billed.month) == (year, month):
            in_month.append(txn)

    return MonthlySummary(
        year=year,
        month=month,
        totals=compute_totals(in_month),
        transactions=in_month,
        expenses_by_week=group_by_week(in_month, configs),
    )


def current_totals(
    transactions: Iterable[Transaction],
    configs: Sequence[PaymentMethodConfig],
    reference_date: date | datetime,
) -> Totals:
    """Totals over transactions counted toward the period holding reference_date"""
    return compute_totals(
        txn for txn in transactions
        if should_include_in_current_totals(txn, configs, reference_date)
    )


def available_cycles(
    transactions: Iterable[Transaction],
    withdraw_day: int,
) -> List[tuple[date, date]]:
    """Distinct billing cycles touched by the transactions, oldest first"""
    cycles = {calculate_cycle(txn.date, withdraw_day) for txn in transactions}
    return sorted(cycles)


def transactions_in_cycle(
    transactions: Iterable[Transaction],
    cycle: BillingCycle,
) -> List[Transaction]:
    """Transactions billed within the cycle's inclusive range, newest purchase first"""
    selected = [
        txn for txn in transactions
        if cycle.start_date <= txn.billing_date <= cycle.end_date
    ]
    return sorted(selected, key=lambda t: to_date(t.date), reverse=True)


def build_card_statement(
    config: PaymentMethodConfig,
    transactions: Iterable[Transaction],
    reference_date: date | datetime,
    grace_days: int = DUE_DATE_GRACE_DAYS,
) -> CardStatement | None:
    """
    Statement of the cycle holding reference_date for one card.

    Only transactions referencing this card are considered. Returns None
    for cards without billing cycles.
    """
    cycles: List[BillingCycle] = generate_cycles(config, 1, reference_date, grace_days)
    if not cycles:
        return None
    cycle = cycles[0]

    own = [txn for txn in transactions if txn.payment_method_config_id == config.id]
    selected = transactions_in_cycle(own, cycle)

    return CardStatement(
        card=config,
        cycle=cycle,
        transactions=selected,
        totals=compute_totals(selected),
    )
