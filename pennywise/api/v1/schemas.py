"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from pennywise.domain.billing_cycles import effective_billing_date
from pennywise.domain.models import (
    BillingCycle,
    PaymentDelay,
    PaymentMethod,
    PaymentMethodConfig,
    Totals,
    Transaction,
    TransactionType,
)


class PaymentMethodConfigRequest(BaseModel):
    """Request body for POST /v1/payment-methods"""

    payment_method: PaymentMethod
    alias: str = Field(default="", max_length=100, description="Display alias, e.g. 'Personal Visa'")
    is_default: bool = False
    withdraw_day: Optional[int] = Field(
        default=None, ge=1, le=31, description="Statement closing day, credit cards only"
    )


class PaymentMethodConfigResponse(BaseModel):
    id: int
    payment_method: PaymentMethod
    alias: str
    display_name: str
    is_default: bool
    withdraw_day: Optional[int]
    is_active: bool


class RemoveConfigResponse(BaseModel):
    id: int
    deactivated: bool  # False when the config was deleted outright


class BillingCycleSchema(BaseModel):
    """Single billing cycle of a card"""

    id: int
    start_date: date
    end_date: date
    due_date: date
    display_name: str


class CardCyclesResponse(BaseModel):
    """Response for GET /v1/payment-methods/{id}/cycles"""

    card_id: int
    card_name: str
    withdraw_day: Optional[int]
    billing_cycles: List[BillingCycleSchema]


class TransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    date: date
    amount: Decimal = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str = ""
    category: str = ""
    type: TransactionType = TransactionType.EXPENSE
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_method_config_id: Optional[int] = None
    billing_delay: PaymentDelay = PaymentDelay.NONE


class TransactionResponse(BaseModel):
    id: int
    date: date
    amount: Decimal
    currency: str
    description: str
    category: str
    type: TransactionType
    payment_method: PaymentMethod
    payment_method_config_id: Optional[int]
    billing_delay_days: int
    effective_billing_date: date


class TotalsSchema(BaseModel):
    total_expenses: Decimal
    total_income: Decimal
    net_balance: Decimal
    transaction_count: int


class MonthlySummaryResponse(BaseModel):
    """Response for GET /v1/summary/monthly"""

    year: int
    month: int
    totals: TotalsSchema
    transactions: List[TransactionResponse]
    expenses_by_week: Dict[int, List[TransactionResponse]]


class CurrentTotalsResponse(BaseModel):
    """Response for GET /v1/summary/current"""

    reference_date: date
    totals: TotalsSchema


class CardStatementResponse(BaseModel):
    """Response for GET /v1/payment-methods/{id}/statement"""

    card_id: int
    card_name: str
    cycle: BillingCycleSchema
    transactions: List[TransactionResponse]
    totals: TotalsSchema


def cycle_to_schema(cycle: BillingCycle) -> BillingCycleSchema:
    return BillingCycleSchema(
        id=cycle.id,
        start_date=cycle.start_date,
        end_date=cycle.end_date,
        due_date=cycle.due_date,
        display_name=cycle.display_name,
    )


def config_to_schema(config: PaymentMethodConfig) -> PaymentMethodConfigResponse:
    return PaymentMethodConfigResponse(
        id=config.id,
        payment_method=config.payment_method,
        alias=config.alias,
        display_name=config.display_name,
        is_default=config.is_default,
        withdraw_day=config.withdraw_day,
        is_active=config.is_active,
    )


def totals_to_schema(totals: Totals) -> TotalsSchema:
    return TotalsSchema(
        total_expenses=totals.total_expenses,
        total_income=totals.total_income,
        net_balance=totals.net_balance,
        transaction_count=totals.transaction_count,
    )


def transaction_to_schema(
    transaction: Transaction,
    configs: Sequence[PaymentMethodConfig],
) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        date=transaction.date,
        amount=transaction.amount,
        currency=transaction.currency,
        description=transaction.description,
        category=transaction.category,
        type=transaction.type,
        payment_method=transaction.payment_method,
        payment_method_config_id=transaction.payment_method_config_id,
        billing_delay_days=transaction.billing_delay_days,
        effective_billing_date=effective_billing_date(transaction, configs),
    )
