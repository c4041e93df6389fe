"""Transaction endpoints"""

import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from pennywise.api.dependencies import get_request_id
from pennywise.api.v1.schemas import TransactionRequest, TransactionResponse, transaction_to_schema
from pennywise.domain.exceptions import DomainException, InvalidTransactionDataError
from pennywise.domain.models import Transaction
from pennywise.domain.payment_methods import validate_transaction
from pennywise.infrastructure.database.session import get_db
from pennywise.infrastructure.database.repositories import (
    PaymentMethodConfigRepository,
    TransactionRepository,
)

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(request_body: TransactionRequest, request: Request, db: Session = Depends(get_db)):
    """
    Record a transaction.

    Credit card purchases may reference a configured card; the response
    carries the date the amount is reported under.
    """
    request_id = get_request_id(request)

    try:
        transaction = validate_transaction(
            Transaction(
                date=request_body.date,
                amount=request_body.amount,
                currency=request_body.currency.upper(),
                description=request_body.description,
                category=request_body.category,
                type=request_body.type,
                payment_method=request_body.payment_method,
                payment_method_config_id=request_body.payment_method_config_id,
                billing_delay_days=request_body.billing_delay.days,
            )
        )

        config_repo = PaymentMethodConfigRepository(db)
        if transaction.payment_method_config_id is not None:
            db_config = config_repo.get_config_or_raise(transaction.payment_method_config_id)
            if not db_config.is_active:
                raise InvalidTransactionDataError(
                    f"Payment method config {db_config.id} is deactivated"
                )

        transaction_repo = TransactionRepository(db)
        db_transaction = transaction_repo.create_transaction(transaction)
        db.commit()

        return transaction_to_schema(
            transaction_repo.to_domain(db_transaction), config_repo.list_domain_configs()
        )

    except DomainException:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    request: Request,
    start_date: Optional[date] = Query(None, description="Earliest purchase date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Latest purchase date (inclusive)"),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Transactions by purchase date, newest first"""
    try:
        configs = PaymentMethodConfigRepository(db).list_domain_configs()
        transactions = TransactionRepository(db).list_domain_transactions(
            start_date=start_date, end_date=end_date, limit=limit
        )
        return [transaction_to_schema(t, configs) for t in transactions]

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")
