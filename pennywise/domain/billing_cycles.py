"""Billing cycle engine - maps purchases to credit card statement periods.

Every function here is pure: all dates, including "today", are passed in by
the caller and nothing is read from the system clock.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from pennywise.domain.models import (
    BillingCycle,
    CardWithBillingCycles,
    PaymentMethodConfig,
    Transaction,
)
from pennywise.domain.payment_methods import find_config
from pennywise.utils.date_utils import (
    add_days,
    clamp_day_to_month,
    last_day_of_month,
    same_month,
    shift_months,
    to_date,
)

DUE_DATE_GRACE_DAYS = 21


def _cycle_end_month(reference_date: date, withdraw_day: int) -> Tuple[int, int]:
    """Month in which the cycle containing reference_date closes"""
    if reference_date.day <= withdraw_day:
        return reference_date.year, reference_date.month
    return shift_months(reference_date.year, reference_date.month, 1)


def cycle_for_end_month(year: int, month: int, withdraw_day: int) -> Tuple[date, date]:
    """
    Start and end (inclusive) of the cycle that closes in the given month.

    The cycle ends on the month's clamped withdraw day and starts the day after
    the previous month's clamped withdraw day. When the previous month's
    withdraw day was already its last day, the cycle starts on the 1st of the
    closing month.
    """
    cycle_end = date(year, month, clamp_day_to_month(withdraw_day, year, month))

    start_year, start_month = shift_months(year, month, -1)
    start_day = clamp_day_to_month(withdraw_day, start_year, start_month) + 1
    if start_day > last_day_of_month(start_year, start_month):
        cycle_start = date(year, month, 1)
    else:
        cycle_start = date(start_year, start_month, start_day)

    return cycle_start, cycle_end


def calculate_cycle(reference_date: date | datetime, withdraw_day: int) -> Tuple[date, date]:
    """
    Billing cycle (start, end) containing reference_date.

    With withdraw_day = 20:
        Sep 15 -> (Aug 21, Sep 20)
        Sep 20 -> (Aug 21, Sep 20)   boundary day closes the current cycle
        Sep 25 -> (Sep 21, Oct 20)
    """
    reference_date = to_date(reference_date)
    end_year, end_month = _cycle_end_month(reference_date, withdraw_day)
    return cycle_for_end_month(end_year, end_month, withdraw_day)


def generate_cycles(
    config: PaymentMethodConfig,
    count: int,
    today: date | datetime,
    grace_days: int = DUE_DATE_GRACE_DAYS,
) -> List[BillingCycle]:
    """
    Most recent `count` billing cycles of a card, oldest first.

    The newest cycle is the one containing `today`. Each cycle is due
    `grace_days` after it closes. Cards without billing cycles (cash, cheque,
    or a credit card with no withdraw day) yield an empty list.
    """
    if count <= 0 or not config.is_credit_card:
        return []

    withdraw_day = config.withdraw_day
    current_year, current_month = _cycle_end_month(to_date(today), withdraw_day)

    cycles = []
    for offset in range(count):
        end_year, end_month = shift_months(current_year, current_month, -offset)
        cycle_start, cycle_end = cycle_for_end_month(end_year, end_month, withdraw_day)
        cycles.append((cycle_start, cycle_end))

    # Built newest first; ids follow chronological order
    return [
        BillingCycle(
            id=index,
            card_id=config.id,
            card_name=config.display_name,
            start_date=cycle_start,
            end_date=cycle_end,
            due_date=add_days(cycle_end, grace_days),
        )
        for index, (cycle_start, cycle_end) in enumerate(reversed(cycles))
    ]


def card_with_billing_cycles(
    config: PaymentMethodConfig,
    count: int,
    today: date | datetime,
    grace_days: int = DUE_DATE_GRACE_DAYS,
) -> CardWithBillingCycles:
    return CardWithBillingCycles(
        payment_method_config=config,
        billing_cycles=generate_cycles(config, count, today, grace_days),
    )


def is_within_cycle(
    transaction_date: date | datetime,
    withdraw_day: int,
    reference_date: date | datetime,
) -> bool:
    """True if reference_date falls inside the billing cycle of transaction_date"""
    cycle_start, cycle_end = calculate_cycle(transaction_date, withdraw_day)
    return cycle_start <= to_date(reference_date) <= cycle_end


def _cycle_withdraw_day(
    transaction: Transaction,
    configs: Iterable[PaymentMethodConfig],
) -> Optional[int]:
    """Withdraw day governing the transaction, None when no cycle applies"""
    if not transaction.payment_method.is_credit_card:
        return None
    config = find_config(transaction.payment_method_config_id, configs)
    if config is None:
        return None
    return config.withdraw_day


def get_transaction_billing_cycle(
    transaction: Transaction,
    configs: Iterable[PaymentMethodConfig],
) -> Optional[Tuple[date, date]]:
    """Billing cycle of a transaction, or None when it is billed immediately"""
    withdraw_day = _cycle_withdraw_day(transaction, configs)
    if withdraw_day is None:
        return None
    return calculate_cycle(transaction.date, withdraw_day)


def should_include_in_current_totals(
    transaction: Transaction,
    configs: Iterable[PaymentMethodConfig],
    reference_date: date | datetime,
) -> bool:
    """
    Whether a transaction counts toward the totals of the period holding
    reference_date.

    - Cash, cheque, or credit without a configured cycle: the billing date
      (purchase date plus any fixed delay) must share reference_date's
      calendar month.
    - Credit with a withdraw day: reference_date must fall inside the
      transaction's own billing cycle, which may span two calendar months.
    """
    withdraw_day = _cycle_withdraw_day(transaction, configs)
    if withdraw_day is None:
        return same_month(transaction.billing_date, to_date(reference_date))
    return is_within_cycle(transaction.date, withdraw_day, reference_date)


def effective_billing_date(
    transaction: Transaction,
    configs: Iterable[PaymentMethodConfig],
) -> date:
    """
    Date used to group a transaction by month or week in reports.

    Credit purchases on a configured card are grouped under the statement
    closing date; everything else under its billing date.
    """
    cycle = get_transaction_billing_cycle(transaction, configs)
    if cycle is None:
        return transaction.billing_date
    return cycle[1]
