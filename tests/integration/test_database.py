"""Integration tests for repositories and schema migrations"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy import create_engine, inspect, select
from sqlalchemy.orm import Session

from pennywise.domain.exceptions import PaymentMethodConfigNotFoundError
from pennywise.domain.models import PaymentMethod, PaymentMethodConfig, Transaction, TransactionType
from pennywise.infrastructure.database.migrations import MIGRATIONS, apply_migrations
from pennywise.infrastructure.database.models import PaymentMethodConfigRecord, TransactionRecord
from pennywise.infrastructure.database.repositories import (
    PaymentMethodConfigRepository,
    TransactionRepository,
)


@pytest.fixture
def migration_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


def _card(withdraw_day=20, is_default=False):
    return PaymentMethodConfig(
        id=0,
        payment_method=PaymentMethod.CREDIT_CARD,
        alias="Visa",
        is_default=is_default,
        withdraw_day=withdraw_day,
    )


def test_config_round_trip(db: Session):
    repo = PaymentMethodConfigRepository(db)
    record = repo.create_config(_card())
    db.commit()

    config = repo.to_domain(repo.get_config(record.id))
    assert config.id == record.id
    assert config.payment_method == PaymentMethod.CREDIT_CARD
    assert config.withdraw_day == 20
    assert config.is_active


def test_to_domain_clamps_legacy_withdraw_day(db: Session):
    db.add(PaymentMethodConfigRecord(payment_method="credit_card", alias="Old", withdraw_day=45))
    db.add(PaymentMethodConfigRecord(payment_method="cash", alias="Wallet", withdraw_day=5))
    db.commit()

    configs = {c.alias: c for c in PaymentMethodConfigRepository(db).list_domain_configs()}
    assert configs["Old"].withdraw_day == 31
    assert configs["Wallet"].withdraw_day is None


def test_set_default_moves_flag(db: Session):
    repo = PaymentMethodConfigRepository(db)
    first = repo.create_config(_card(is_default=True))
    second = repo.create_config(_card(withdraw_day=5))
    repo.set_default(second.id)
    db.commit()

    assert repo.get_config(first.id).is_default is False
    assert repo.get_config(second.id).is_default is True
    assert repo.list_configs()[0].id == second.id


def test_set_default_unknown_config(db: Session):
    with pytest.raises(PaymentMethodConfigNotFoundError):
        PaymentMethodConfigRepository(db).set_default(404)


def test_remove_config_soft_deactivates_when_referenced(db: Session):
    config_repo = PaymentMethodConfigRepository(db)
    record = config_repo.create_config(_card(is_default=True))
    TransactionRepository(db).create_transaction(
        Transaction(
            date=date(2024, 9, 15),
            amount=Decimal("12.50"),
            payment_method=PaymentMethod.CREDIT_CARD,
            payment_method_config_id=record.id,
        )
    )
    db.commit()

    assert config_repo.remove_config(record.id) is True
    db.commit()

    stored = config_repo.get_config(record.id)
    assert stored.is_active is False
    assert stored.is_default is False
    assert config_repo.list_configs() == []


def test_transaction_round_trip(db: Session):
    repo = TransactionRepository(db)
    record = repo.create_transaction(
        Transaction(
            date=date(2024, 9, 28),
            amount=Decimal("99.90"),
            type=TransactionType.INCOME,
            payment_method=PaymentMethod.CHEQUE,
            billing_delay_days=60,
            description="Refund",
            category="misc",
        )
    )
    db.commit()

    transaction = repo.to_domain(record)
    assert transaction.amount == Decimal("99.90")
    assert transaction.type == TransactionType.INCOME
    assert transaction.billing_delay_days == 60
    assert transaction.billing_date == date(2024, 11, 27)


def test_list_transactions_date_filter(db: Session):
    repo = TransactionRepository(db)
    for day in (1, 10, 20):
        repo.create_transaction(Transaction(date=date(2024, 9, day), amount=Decimal("1")))
    db.commit()

    found = repo.list_domain_transactions(start_date=date(2024, 9, 5), end_date=date(2024, 9, 20))
    assert [t.date for t in found] == [date(2024, 9, 20), date(2024, 9, 10)]
    assert len(repo.list_transactions(limit=1)) == 1


def test_apply_migrations_in_order_once(migration_engine):
    assert apply_migrations(migration_engine) == [1, 2, 3]
    assert apply_migrations(migration_engine) == []

    tables = set(inspect(migration_engine).get_table_names())
    assert {"payment_method_config", "transactions", "schema_version"} <= tables


def test_data_migrations_fix_legacy_rows(migration_engine):
    assert apply_migrations(migration_engine, MIGRATIONS[:1]) == [1]

    configs = PaymentMethodConfigRecord.__table__
    transactions = TransactionRecord.__table__
    with migration_engine.begin() as conn:
        conn.execute(
            configs.insert(),
            [
                {"id": 1, "payment_method": "cash", "withdraw_day": 10},
                {"id": 2, "payment_method": "credit_card", "withdraw_day": 45},
                {"id": 3, "payment_method": "credit_card", "withdraw_day": 0},
                {"id": 4, "payment_method": "credit_card", "withdraw_day": None},
            ],
        )
        conn.execute(
            transactions.insert(),
            [
                {"id": 1, "date": date(2024, 9, 1), "amount": 5, "payment_method": "cash",
                 "payment_method_config_id": 2, "billing_delay_days": -3},
                {"id": 2, "date": date(2024, 9, 2), "amount": 5, "payment_method": "credit_card",
                 "payment_method_config_id": 2, "billing_delay_days": 0},
            ],
        )

    assert apply_migrations(migration_engine) == [2, 3]

    with migration_engine.connect() as conn:
        withdraw_days = dict(conn.execute(select(configs.c.id, configs.c.withdraw_day)).all())
        rows = {
            row.id: row
            for row in conn.execute(
                select(transactions.c.id, transactions.c.payment_method_config_id, transactions.c.billing_delay_days)
            )
        }

    assert withdraw_days == {1: None, 2: 31, 3: 1, 4: None}
    assert rows[1].payment_method_config_id is None
    assert rows[1].billing_delay_days == 0
    assert rows[2].payment_method_config_id == 2
