"""Data access layer for payment method configs and transactions"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from pennywise.infrastructure.database.models import PaymentMethodConfigRecord, TransactionRecord
from pennywise.domain.exceptions import PaymentMethodConfigNotFoundError
from pennywise.domain.models import PaymentMethod, PaymentMethodConfig, Transaction, TransactionType
from pennywise.domain.payment_methods import build_payment_method_config


class PaymentMethodConfigRepository:
    """Repository for payment method configs"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def to_domain(record: PaymentMethodConfigRecord) -> PaymentMethodConfig:
        """Map a stored row to a validated config, clamping legacy withdraw days"""
        return build_payment_method_config(
            config_id=record.id,
            payment_method=PaymentMethod(record.payment_method),
            alias=record.alias or "",
            is_default=record.is_default,
            withdraw_day=record.withdraw_day,
            is_active=record.is_active,
        )

    def create_config(self, config: PaymentMethodConfig) -> PaymentMethodConfigRecord:
        """Persist a new config; marking it default clears the previous default"""
        if config.is_default:
            self._clear_default()

        db_config = PaymentMethodConfigRecord(
            payment_method=config.payment_method.value,
            alias=config.alias,
            is_default=config.is_default,
            withdraw_day=config.withdraw_day,
            is_active=config.is_active,
        )
        self.db.add(db_config)
        self.db.flush()  # Get ID without committing
        return db_config

    def get_config(self, config_id: int) -> Optional[PaymentMethodConfigRecord]:
        return (
            self.db.query(PaymentMethodConfigRecord)
            .filter(PaymentMethodConfigRecord.id == config_id)
            .first()
        )

    def get_config_or_raise(self, config_id: int) -> PaymentMethodConfigRecord:
        db_config = self.get_config(config_id)
        if db_config is None:
            raise PaymentMethodConfigNotFoundError(f"Payment method config {config_id} not found")
        return db_config

    def list_configs(self, include_inactive: bool = False) -> List[PaymentMethodConfigRecord]:
        """Configs with the default first, then by id"""
        query = self.db.query(PaymentMethodConfigRecord)
        if not include_inactive:
            query = query.filter(PaymentMethodConfigRecord.is_active.is_(True))
        return query.order_by(
            PaymentMethodConfigRecord.is_default.desc(),
            PaymentMethodConfigRecord.id,
        ).all()

    def list_domain_configs(self, include_inactive: bool = True) -> List[PaymentMethodConfig]:
        return [self.to_domain(c) for c in self.list_configs(include_inactive=include_inactive)]

    def set_default(self, config_id: int) -> PaymentMethodConfigRecord:
        db_config = self.get_config_or_raise(config_id)
        self._clear_default()
        db_config.is_default = True
        self.db.flush()
        return db_config

    def remove_config(self, config_id: int) -> bool:
        """
        Remove a config.

        Configs referenced by transactions are only deactivated so history
        keeps resolving. Returns True when the row was deactivated and False
        when it was deleted outright.
        """
        db_config = self.get_config_or_raise(config_id)
        referenced = (
            self.db.query(TransactionRecord.id)
            .filter(TransactionRecord.payment_method_config_id == config_id)
            .first()
            is not None
        )
        if referenced:
            db_config.is_active = False
            db_config.is_default = False
            self.db.flush()
            return True

        self.db.delete(db_config)
        self.db.flush()
        return False

    def _clear_default(self) -> None:
        (
            self.db.query(PaymentMethodConfigRecord)
            .filter(PaymentMethodConfigRecord.is_default.is_(True))
            .update({PaymentMethodConfigRecord.is_default: False}, synchronize_session="fetch")
        )


class TransactionRepository:
    """Repository for transactions"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def to_domain(record: TransactionRecord) -> Transaction:
        return Transaction(
            id=record.id,
            date=record.date,
            amount=Decimal(record.amount),
            currency=record.currency,
            description=record.description or "",
            category=record.category or "",
            type=TransactionType(record.type),
            payment_method=PaymentMethod(record.payment_method),
            payment_method_config_id=record.payment_method_config_id,
            billing_delay_days=record.billing_delay_days or 0,
        )

    def create_transaction(self, transaction: Transaction) -> TransactionRecord:
        db_transaction = TransactionRecord(
            date=transaction.date,
            amount=transaction.amount,
            currency=transaction.currency,
            description=transaction.description,
            category=transaction.category,
            type=transaction.type.value,
            payment_method=transaction.payment_method.value,
            payment_method_config_id=transaction.payment_method_config_id,
            billing_delay_days=transaction.billing_delay_days,
        )
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction

    def list_transactions(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = None,
    ) -> List[TransactionRecord]:
        """Transactions by purchase date, newest first"""
        query = self.db.query(TransactionRecord)
        if start_date is not None:
            query = query.filter(TransactionRecord.date >= start_date)
        if end_date is not None:
            query = query.filter(TransactionRecord.date <= end_date)
        query = query.order_by(TransactionRecord.date.desc(), TransactionRecord.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_domain_transactions(self, **filters) -> List[Transaction]:
        return [self.to_domain(t) for t in self.list_transactions(**filters)]

    def list_by_config(self, config_id: int) -> List[TransactionRecord]:
        return (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.payment_method_config_id == config_id)
            .order_by(TransactionRecord.date.desc())
            .all()
        )
