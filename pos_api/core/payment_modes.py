# =========================================================
# PAYMENT MODE CATEGORIES
#
# Tills send free-text payment modes ("CASH", "Mpesa",
# "Credit Customer", ...). Every total that is split by
# payment type goes through normalize_payment_mode so the
# dashboard and the invoice ledger always agree.
# =========================================================

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

logger = logging.getLogger("pos_api.payments")


class PaymentCategory(str, Enum):
    CASH = "cash"
    MOBILE_MONEY = "mobileMoney"
    CREDIT = "credit"


DEFAULT_PAYMENT_MODE = "Cash"

PAYMENT_MODE_TABLE = {
    "cash": PaymentCategory.CASH,
    "mpesa": PaymentCategory.MOBILE_MONEY,
    "m-pesa": PaymentCategory.MOBILE_MONEY,
    "m pesa": PaymentCategory.MOBILE_MONEY,
    "mobile money": PaymentCategory.MOBILE_MONEY,
    "credit": PaymentCategory.CREDIT,
    "credit customer": PaymentCategory.CREDIT,
}


def clean_payment_mode(mode: str | None) -> str:
    """Trimmed mode as stored on the payment row; blank means cash."""
    if mode is None or not mode.strip():
        return DEFAULT_PAYMENT_MODE
    return mode.strip()


def normalize_payment_mode(mode: str | None, warn: bool = True) -> PaymentCategory:
    key = (mode or "").strip().lower()

    category = PAYMENT_MODE_TABLE.get(key)
    if category is None:
        if warn:
            logger.warning(f"Unknown payment mode '{mode}' - counting as cash")
        return PaymentCategory.CASH

    return category


@dataclass
class PaymentBreakdown:
    cash: Decimal = Decimal("0")
    mobile_money: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.cash + self.mobile_money + self.credit

    def add(self, category: PaymentCategory, amount: Decimal):
        if category is PaymentCategory.MOBILE_MONEY:
            self.mobile_money += amount
        elif category is PaymentCategory.CREDIT:
            self.credit += amount
        else:
            self.cash += amount


def categorize_payments(payments: Iterable[tuple[str | None, Decimal]]) -> PaymentBreakdown:
    """Sum (mode, amount) pairs into the three payment categories."""
    breakdown = PaymentBreakdown()

    for mode, amount in payments:
        breakdown.add(normalize_payment_mode(mode), Decimal(amount or 0))

    return breakdown
