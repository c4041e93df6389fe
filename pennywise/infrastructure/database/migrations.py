"""Ordered schema migrations, applied once each by version number"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.engine import Connection, Engine

from pennywise.infrastructure.database.models import (
    PaymentMethodConfigRecord,
    SchemaVersion,
    TransactionRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    apply: Callable[[Connection], None]


def _create_base_tables(conn: Connection) -> None:
    for table in (PaymentMethodConfigRecord.__table__, TransactionRecord.__table__):
        table.create(bind=conn, checkfirst=True)


def _normalize_withdraw_days(conn: Connection) -> None:
    """Clear withdraw days on non-credit configs and clamp the rest into 1-31"""
    configs = PaymentMethodConfigRecord.__table__
    conn.execute(
        update(configs)
        .where(configs.c.payment_method != "credit_card")
        .values(withdraw_day=None)
    )
    conn.execute(
        update(configs)
        .where(and_(configs.c.withdraw_day.is_not(None), configs.c.withdraw_day < 1))
        .values(withdraw_day=1)
    )
    conn.execute(
        update(configs)
        .where(configs.c.withdraw_day > 31)
        .values(withdraw_day=31)
    )


def _detach_non_credit_transactions(conn: Connection) -> None:
    """Only credit card transactions may reference a config"""
    transactions = TransactionRecord.__table__
    conn.execute(
        update(transactions)
        .where(
            and_(
                transactions.c.payment_method != "credit_card",
                transactions.c.payment_method_config_id.is_not(None),
            )
        )
        .values(payment_method_config_id=None)
    )
    conn.execute(
        update(transactions)
        .where(or_(transactions.c.billing_delay_days.is_(None), transactions.c.billing_delay_days < 0))
        .values(billing_delay_days=0)
    )


MIGRATIONS: List[Migration] = [
    Migration(1, "create payment method config and transaction tables", _create_base_tables),
    Migration(2, "normalize legacy withdraw days", _normalize_withdraw_days),
    Migration(3, "detach configs from non-credit transactions", _detach_non_credit_transactions),
]


def current_version(conn: Connection) -> int:
    return conn.execute(select(func.coalesce(func.max(SchemaVersion.version), 0))).scalar_one()


def apply_migrations(engine: Engine, migrations: List[Migration] | None = None) -> List[int]:
    """
    Apply pending migrations in ascending version order.

    Each migration runs in its own transaction together with its
    schema_version row. Returns the versions applied by this call.
    """
    migrations = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda m: m.version)
    SchemaVersion.__table__.create(bind=engine, checkfirst=True)

    with engine.connect() as conn:
        version = current_version(conn)

    applied = []
    for migration in migrations:
        if migration.version <= version:
            continue
        with engine.begin() as conn:
            migration.apply(conn)
            conn.execute(
                SchemaVersion.__table__.insert().values(
                    version=migration.version, description=migration.description
                )
            )
        logger.info(
            "Applied schema migration",
            extra={"version": migration.version, "description": migration.description},
        )
        applied.append(migration.version)

    return applied
