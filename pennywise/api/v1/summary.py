"""Spending summaries grouped by effective billing date"""

import logging
import time
from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from pennywise.api.dependencies import get_reference_date, get_request_id
from pennywise.api.v1.schemas import (
    CurrentTotalsResponse,
    MonthlySummaryResponse,
    totals_to_schema,
    transaction_to_schema,
)
from pennywise.domain.billing_cycles import get_transaction_billing_cycle, should_include_in_current_totals
from pennywise.domain.models import PaymentDelay
from pennywise.domain.reporting import compute_totals, summarize_month
from pennywise.infrastructure.database.session import get_db
from pennywise.infrastructure.database.repositories import (
    PaymentMethodConfigRepository,
    TransactionRepository,
)
from pennywise.infrastructure.observability.logging import log_summary_computed
from pennywise.infrastructure.observability.metrics import record_attribution
from pennywise.utils.date_utils import last_day_of_month

router = APIRouter()

# A purchase is reported at most one statement period or one billing delay after it happens
LOOKBACK = timedelta(days=max(d.days for d in PaymentDelay) + 31)
LOOKAHEAD = timedelta(days=31)


@router.get("/summary/monthly", response_model=MonthlySummaryResponse)
def get_monthly_summary(
    request: Request,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    reference_date: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """
    Totals and weekly breakdown for one calendar month.

    Credit card purchases on a card with a withdraw day are reported in the
    month their statement closes, everything else in its billing month.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    year = year or reference_date.year
    month = month or reference_date.month

    month_start = date(year, month, 1)
    month_end = date(year, month, last_day_of_month(year, month))

    try:
        configs = PaymentMethodConfigRepository(db).list_domain_configs()
        candidates = TransactionRepository(db).list_domain_transactions(
            start_date=month_start - LOOKBACK, end_date=month_end
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    summary = summarize_month(candidates, configs, year, month)

    cycle_attributed = sum(
        1 for t in summary.transactions if get_transaction_billing_cycle(t, configs) is not None
    )
    record_attribution(cycle_attributed, len(summary.transactions))
    log_summary_computed(
        request_id,
        f"{year:04d}-{month:02d}",
        len(summary.transactions),
        cycle_attributed,
        (time.time() - start_time) * 1000,
    )

    return MonthlySummaryResponse(
        year=year,
        month=month,
        totals=totals_to_schema(summary.totals),
        transactions=[transaction_to_schema(t, configs) for t in summary.transactions],
        expenses_by_week={
            week: [transaction_to_schema(t, configs) for t in txns]
            for week, txns in summary.expenses_by_week.items()
        },
    )


@router.get("/summary/current", response_model=CurrentTotalsResponse)
def get_current_totals(
    request: Request,
    reference_date: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """
    Totals for the period containing the reference date.

    A credit card purchase counts while the reference date lies inside its
    own statement period, even when that period started last month.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        configs = PaymentMethodConfigRepository(db).list_domain_configs()
        candidates = TransactionRepository(db).list_domain_transactions(
            start_date=reference_date - LOOKBACK, end_date=reference_date + LOOKAHEAD
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    included = [t for t in candidates if should_include_in_current_totals(t, configs, reference_date)]
    totals = compute_totals(included)

    cycle_attributed = sum(1 for t in included if get_transaction_billing_cycle(t, configs) is not None)
    record_attribution(cycle_attributed, len(included))
    log_summary_computed(
        request_id,
        reference_date.isoformat(),
        totals.transaction_count,
        cycle_attributed,
        (time.time() - start_time) * 1000,
    )

    return CurrentTotalsResponse(reference_date=reference_date, totals=totals_to_schema(totals))
