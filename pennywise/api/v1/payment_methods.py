"""Payment method config endpoints, including card billing cycles and statements"""

import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from pennywise.api.dependencies import get_reference_date, get_request_id, get_today
from pennywise.api.v1.schemas import (
    CardCyclesResponse,
    CardStatementResponse,
    PaymentMethodConfigRequest,
    PaymentMethodConfigResponse,
    RemoveConfigResponse,
    config_to_schema,
    cycle_to_schema,
    totals_to_schema,
    transaction_to_schema,
)
from pennywise.config import settings
from pennywise.domain.billing_cycles import card_with_billing_cycles
from pennywise.domain.exceptions import DomainException
from pennywise.domain.payment_methods import build_payment_method_config
from pennywise.domain.reporting import build_card_statement
from pennywise.infrastructure.database.session import get_db
from pennywise.infrastructure.database.repositories import (
    PaymentMethodConfigRepository,
    TransactionRepository,
)
from pennywise.infrastructure.observability.logging import log_cycles_generated
from pennywise.infrastructure.observability.metrics import (
    config_deactivations_counter,
    record_cycles_generated,
)

router = APIRouter()


@router.post("/payment-methods", response_model=PaymentMethodConfigResponse, status_code=201)
def create_payment_method(
    request_body: PaymentMethodConfigRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Register a payment method.

    Withdraw days are only accepted for credit cards.
    """
    request_id = get_request_id(request)

    try:
        config = build_payment_method_config(
            config_id=0,
            payment_method=request_body.payment_method,
            alias=request_body.alias,
            is_default=request_body.is_default,
            withdraw_day=request_body.withdraw_day,
            strict=True,
        )

        repo = PaymentMethodConfigRepository(db)
        db_config = repo.create_config(config)
        db.commit()

        return config_to_schema(repo.to_domain(db_config))

    except DomainException:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/payment-methods", response_model=List[PaymentMethodConfigResponse])
def list_payment_methods(
    request: Request,
    include_inactive: bool = Query(False, description="Include deactivated configs"),
    db: Session = Depends(get_db),
):
    try:
        repo = PaymentMethodConfigRepository(db)
        return [config_to_schema(c) for c in repo.list_domain_configs(include_inactive=include_inactive)]

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/payment-methods/{config_id}", response_model=RemoveConfigResponse)
def remove_payment_method(config_id: int, request: Request, db: Session = Depends(get_db)):
    """
    Remove a payment method.

    Configs still referenced by transactions are deactivated instead of deleted.
    """
    request_id = get_request_id(request)

    try:
        deactivated = PaymentMethodConfigRepository(db).remove_config(config_id)
        db.commit()

    except DomainException:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if deactivated:
        config_deactivations_counter.inc()
        logging.info("Payment method deactivated", extra={"request_id": request_id, "card_id": config_id})

    return RemoveConfigResponse(id=config_id, deactivated=deactivated)


@router.get("/payment-methods/{config_id}/cycles", response_model=CardCyclesResponse)
def get_billing_cycles(
    config_id: int,
    request: Request,
    count: Optional[int] = Query(None, ge=0, description="Number of cycles, newest last"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Most recent billing cycles of a card in chronological order.

    Cycle ids are positions in this response, not stable identifiers.
    """
    request_id = get_request_id(request)

    if count is None:
        count = settings.default_cycle_count
    if count > settings.max_cycle_count:
        raise HTTPException(status_code=422, detail=f"count must be at most {settings.max_cycle_count}")

    try:
        repo = PaymentMethodConfigRepository(db)
        config = repo.to_domain(repo.get_config_or_raise(config_id))

    except DomainException:
        raise

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    card = card_with_billing_cycles(config, count, today, settings.due_date_grace_days)

    record_cycles_generated(config.payment_method.value, len(card.billing_cycles))
    log_cycles_generated(request_id, config_id, len(card.billing_cycles), today.isoformat())

    return CardCyclesResponse(
        card_id=card.card_id,
        card_name=card.card_name,
        withdraw_day=config.withdraw_day,
        billing_cycles=[cycle_to_schema(c) for c in card.billing_cycles],
    )


@router.get("/payment-methods/{config_id}/statement", response_model=CardStatementResponse)
def get_card_statement(
    config_id: int,
    request: Request,
    reference_date: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """
    Statement of the billing cycle containing the reference date.

    Deactivated cards have no live statement; their purchases are reported
    under the purchase month like any card without a cycle.
    """
    try:
        config_repo = PaymentMethodConfigRepository(db)
        configs = config_repo.list_domain_configs()
        config = config_repo.to_domain(config_repo.get_config_or_raise(config_id))

        transaction_repo = TransactionRepository(db)
        transactions = [transaction_repo.to_domain(t) for t in transaction_repo.list_by_config(config_id)]

    except DomainException:
        raise

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    if not config.is_active:
        raise HTTPException(status_code=422, detail=f"Payment method config {config_id} is deactivated")

    statement = build_card_statement(config, transactions, reference_date, settings.due_date_grace_days)
    if statement is None:
        raise HTTPException(status_code=422, detail="Payment method has no billing cycle configured")

    return CardStatementResponse(
        card_id=config.id,
        card_name=config.display_name,
        cycle=cycle_to_schema(statement.cycle),
        transactions=[transaction_to_schema(t, configs) for t in statement.transactions],
        totals=totals_to_schema(statement.totals),
    )
