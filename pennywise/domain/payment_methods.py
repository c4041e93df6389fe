"""Validation boundary for payment method configurations.

Everything that reaches the billing cycle engine goes through here first, so
the engine can assume a withdraw day is either None or within 1-31.
"""

from typing import Iterable, Optional

from pennywise.domain.exceptions import InvalidPaymentMethodConfigError, InvalidTransactionDataError
from pennywise.domain.models import PaymentMethod, PaymentMethodConfig, Transaction

MIN_WITHDRAW_DAY = 1
MAX_WITHDRAW_DAY = 31
DEFAULT_CREDIT_WITHDRAW_DAY = 15


def normalize_withdraw_day(payment_method: PaymentMethod, withdraw_day: Optional[int]) -> Optional[int]:
    """
    Clamp a stored withdraw day into [1, 31].

    Non-credit kinds never carry a withdraw day, so legacy rows that have one
    are normalized to None instead of failing.
    """
    if not payment_method.is_credit_card or withdraw_day is None:
        return None
    return max(MIN_WITHDRAW_DAY, min(MAX_WITHDRAW_DAY, int(withdraw_day)))


def build_payment_method_config(
    config_id: int,
    payment_method: PaymentMethod,
    alias: str = "",
    is_default: bool = False,
    withdraw_day: Optional[int] = None,
    is_active: bool = True,
    strict: bool = False,
) -> PaymentMethodConfig:
    """
    Build a validated PaymentMethodConfig.

    strict=True is used for user input: a withdraw day on a non-credit kind or
    outside 1-31 is rejected. Otherwise (data already stored) it is clamped.
    """
    if len(alias) > 100:
        raise InvalidPaymentMethodConfigError("Alias must be at most 100 characters")

    if strict and withdraw_day is not None:
        if not payment_method.is_credit_card:
            raise InvalidPaymentMethodConfigError(
                f"Withdraw day is only allowed for credit cards, got {payment_method.value}"
            )
        if not MIN_WITHDRAW_DAY <= withdraw_day <= MAX_WITHDRAW_DAY:
            raise InvalidPaymentMethodConfigError(
                f"Withdraw day must be between {MIN_WITHDRAW_DAY} and {MAX_WITHDRAW_DAY}, got {withdraw_day}"
            )

    return PaymentMethodConfig(
        id=config_id,
        payment_method=payment_method,
        alias=alias,
        is_default=is_default,
        withdraw_day=normalize_withdraw_day(payment_method, withdraw_day),
        is_active=is_active,
    )


def create_default_config(
    payment_method: PaymentMethod,
    alias: str = "",
    config_id: int = 0,
    default_withdraw_day: int = DEFAULT_CREDIT_WITHDRAW_DAY,
) -> PaymentMethodConfig:
    """New config as offered in settings; credit cards start on the 15th"""
    return build_payment_method_config(
        config_id=config_id,
        payment_method=payment_method,
        alias=alias,
        withdraw_day=default_withdraw_day if payment_method.is_credit_card else None,
    )


def find_config(
    config_id: Optional[int],
    configs: Iterable[PaymentMethodConfig],
) -> Optional[PaymentMethodConfig]:
    """Look up an active config by id; inactive configs count as missing"""
    if config_id is None:
        return None
    for config in configs:
        if config.id == config_id and config.is_active:
            return config
    return None


def validate_transaction(transaction: Transaction) -> Transaction:
    """Check the invariants a transaction must hold before it is stored"""
    if transaction.payment_method_config_id is not None and not transaction.payment_method.is_credit_card:
        raise InvalidTransactionDataError(
            "Only credit card transactions can reference a payment method config"
        )
    if transaction.billing_delay_days < 0:
        raise InvalidTransactionDataError("Billing delay cannot be negative")
    if transaction.amount < 0:
        raise InvalidTransactionDataError("Amount cannot be negative")
    return transaction
