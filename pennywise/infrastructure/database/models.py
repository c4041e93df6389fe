"""SQLAlchemy ORM models for payment method configs and transactions"""

from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, Numeric, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class PaymentMethodConfigRecord(Base):
    """Configured payment instrument (card, cash, cheque)"""

    __tablename__ = "payment_method_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_method = Column(String(20), nullable=False)
    alias = Column(String(100), nullable=False, default="")
    is_default = Column(Boolean, nullable=False, default=False)
    withdraw_day = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship("TransactionRecord", back_populates="payment_method_config")


class TransactionRecord(Base):
    """Income or expense entry"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    description = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False, default="")
    type = Column(String(10), nullable=False, default="expense")
    payment_method = Column(String(20), nullable=False, default="cash")
    payment_method_config_id = Column(
        Integer, ForeignKey("payment_method_config.id"), nullable=True, index=True
    )
    billing_delay_days = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payment_method_config = relationship("PaymentMethodConfigRecord", back_populates="transactions")


class SchemaVersion(Base):
    """Applied schema migrations, one row per version"""

    __tablename__ = "schema_version"

    version = Column(Integer, primary_key=True, autoincrement=False)
    description = Column(Text, nullable=False)
    applied_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
