"""
Shared Schemas

Money representation used by every response that carries an amount.
"""

from decimal import Decimal

from pydantic import BaseModel

from app.core.money import MoneyFormatter

# Largest decimal amount accepted in a request
MAX_AMOUNT = Decimal("9999999999.99")


class MoneyAmount(BaseModel):
    """
    A stored amount in three shapes.

    cents is None when the column is unset; amount and formatted then show zero.
    """

    cents: int | None
    amount: Decimal
    formatted: str


def money_amount(cents: int | None, money: MoneyFormatter) -> MoneyAmount:
    return MoneyAmount(
        cents=cents,
        amount=money.to_decimal(cents),
        formatted=money.format(cents),
    )
