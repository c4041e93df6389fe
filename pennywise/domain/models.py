"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pennywise.utils.date_utils import add_days, to_date


class PaymentMethod(str, Enum):
    """How a transaction is settled"""

    CASH = "cash"
    CREDIT_CARD = "credit_card"
    CHEQUE = "cheque"

    @property
    def display_name(self) -> str:
        return {
            PaymentMethod.CASH: "Cash",
            PaymentMethod.CREDIT_CARD: "Credit Card",
            PaymentMethod.CHEQUE: "Cheque",
        }[self]

    @property
    def is_credit_card(self) -> bool:
        return self is PaymentMethod.CREDIT_CARD


class PaymentDelay(int, Enum):
    """Fixed billing delay options ("net +30" style) offered for a purchase"""

    NONE = 0
    PLUS_30 = 30
    PLUS_60 = 60
    PLUS_90 = 90

    @property
    def days(self) -> int:
        return int(self.value)


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass
class PaymentMethodConfig:
    """A configured payment instrument, e.g. a credit card with its withdraw day"""

    id: int
    payment_method: PaymentMethod
    alias: str = ""
    is_default: bool = False
    withdraw_day: Optional[int] = None  # 1-31, credit cards only
    is_active: bool = True

    @property
    def display_name(self) -> str:
        if not self.alias.strip():
            return self.payment_method.display_name
        return f"{self.alias} ({self.payment_method.display_name})"

    @property
    def is_credit_card(self) -> bool:
        """Credit card with a withdraw day, i.e. one that has billing cycles"""
        return self.payment_method.is_credit_card and self.withdraw_day is not None

    @property
    def has_valid_withdraw_day(self) -> bool:
        return self.withdraw_day is None or 1 <= self.withdraw_day <= 31


@dataclass
class Transaction:
    """A monetary event as seen by the billing cycle engine"""

    date: date
    amount: Decimal = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_method_config_id: Optional[int] = None
    billing_delay_days: int = 0
    type: TransactionType = TransactionType.EXPENSE
    description: str = ""
    category: str = ""
    currency: str = "USD"
    id: Optional[int] = None

    @property
    def billing_date(self) -> date:
        """Purchase date, pushed forward by the fixed billing delay if any"""
        if self.billing_delay_days > 0:
            return add_days(self.date, self.billing_delay_days)
        return to_date(self.date)


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= to_date(value) <= self.end


@dataclass(frozen=True)
class BillingCycle:
    """
    One statement period of a credit card.

    `id` is positional within a generated series (0 = oldest) and is not a
    durable key: regenerating with another `today` renumbers the cycles.
    """

    id: int
    card_id: int
    card_name: str
    start_date: date
    end_date: date
    due_date: date

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def display_name(self) -> str:
        start = f"{self.start_date:%b} {self.start_date.day}"
        end = f"{self.end_date:%b} {self.end_date.day}"
        return f"{self.card_name} ({start} - {end})"


@dataclass
class CardWithBillingCycles:
    """A card returned together with its computed billing cycles"""

    payment_method_config: PaymentMethodConfig
    billing_cycles: List[BillingCycle]

    @property
    def card_id(self) -> int:
        return self.payment_method_config.id

    @property
    def card_name(self) -> str:
        return self.payment_method_config.display_name


@dataclass
class Totals:
    """Expense/income totals over a set of transactions"""

    total_expenses: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    transaction_count: int = 0

    @property
    def net_balance(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass
class MonthlySummary:
    """Transactions grouped under one calendar month by effective billing date"""

    year: int
    month: int
    totals: Totals
    transactions: List[Transaction] = field(default_factory=list)
    expenses_by_week: Dict[int, List[Transaction]] = field(default_factory=dict)


@dataclass
class CardStatement:
    """One card's statement: a billing cycle and the purchases it covers"""

    card: PaymentMethodConfig
    cycle: BillingCycle
    transactions: List[Transaction]
    totals: Totals
