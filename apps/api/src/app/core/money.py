"""
Money Values

Conversion between integer minor-unit amounts (cents) as stored in the
database and decimal amounts used by schemas, plus read-only display
formatting.

Design Principles:
- Amounts are persisted as integers; Decimal is used for every conversion
  (no binary floats)
- Decimal -> cents truncates toward zero (ROUND_DOWN), not half-up.
  Changing this is a behavior change for stored fees and payments.
- None means "not set" and is kept distinct from zero
- The currency format is an immutable object built once at startup and
  passed in explicitly

Usage:
    from app.core.money import get_money_formatter

    money = get_money_formatter()
    money.to_decimal(fee.tuition_fee_cents)   # Decimal("1234.50")
    money.format(fee.tuition_fee_cents)       # "₱1,234.50"
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from functools import lru_cache

SYMBOL_BEFORE = "before"
SYMBOL_AFTER = "after"
SYMBOL_POSITIONS = (SYMBOL_BEFORE, SYMBOL_AFTER)


class InvalidConfiguration(ValueError):
    """Raised when a currency format or precision is malformed."""


def _shift(value: Decimal, places: int) -> Decimal:
    """Move the decimal point without going through context precision."""
    sign, digits, exponent = value.as_tuple()
    return Decimal((sign, digits, exponent + places))


def _check_decimal_places(decimal_places: int) -> None:
    if decimal_places < 0:
        raise InvalidConfiguration(
            f"decimal_places must be >= 0, got {decimal_places}"
        )


@dataclass(frozen=True)
class CurrencyFormat:
    """
    Display settings for currency amounts.

    Attributes:
        symbol: Currency symbol (e.g. "₱")
        decimal_places: Number of minor-unit digits (2 for cents)
        decimal_separator: Separator between whole and fractional part
        thousands_separator: Separator between groups of three digits
        symbol_position: "before" or "after" the number
        code: ISO 4217 currency code (informational)
    """

    symbol: str = "₱"
    decimal_places: int = 2
    decimal_separator: str = "."
    thousands_separator: str = ","
    symbol_position: str = SYMBOL_BEFORE
    code: str = "PHP"

    def __post_init__(self) -> None:
        _check_decimal_places(self.decimal_places)
        if self.symbol_position not in SYMBOL_POSITIONS:
            raise InvalidConfiguration(
                f"symbol_position must be one of {SYMBOL_POSITIONS}, "
                f"got {self.symbol_position!r}"
            )


def to_decimal(cents: int | None, decimal_places: int) -> Decimal:
    """
    Convert a minor-unit amount to a decimal amount.

    Args:
        cents: Stored amount in minor units, or None when unset
        decimal_places: Number of minor-unit digits

    Returns:
        The decimal amount (zero when cents is None)

    Raises:
        InvalidConfiguration: If decimal_places is negative
    """
    _check_decimal_places(decimal_places)
    return _shift(Decimal(cents or 0), -decimal_places)


def from_decimal(amount: Decimal | None, decimal_places: int) -> int | None:
    """
    Convert a decimal amount to minor units, truncating toward zero.

    Args:
        amount: Decimal amount, or None to clear the stored value
        decimal_places: Number of minor-unit digits

    Returns:
        Amount in minor units, or None when amount is None

    Raises:
        InvalidConfiguration: If decimal_places is negative
    """
    _check_decimal_places(decimal_places)
    if amount is None:
        return None
    amount = Decimal(amount)
    if not amount.is_finite():
        raise ValueError(f"Cannot convert non-finite amount {amount} to minor units")
    scaled = _shift(amount, decimal_places)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def _group_thousands(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_cents(cents: int, fmt: CurrencyFormat) -> str:
    """
    Render a minor-unit amount for display.

    The sign stays next to the digits and the symbol goes outside it:
    "₱-1,234.50" or "-1,234.50 PHP".
    """
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 10**fmt.decimal_places)

    number = _group_thousands(str(whole), fmt.thousands_separator)
    if fmt.decimal_places:
        number += fmt.decimal_separator + str(fraction).zfill(fmt.decimal_places)
    number = sign + number

    if fmt.symbol_position == SYMBOL_AFTER:
        return f"{number} {fmt.symbol}"
    return f"{fmt.symbol}{number}"


class MoneyFormatter:
    """Conversions bound to a single currency format."""

    def __init__(self, fmt: CurrencyFormat):
        self.fmt = fmt

    def to_decimal(self, cents: int | None) -> Decimal:
        return to_decimal(cents, self.fmt.decimal_places)

    def from_decimal(self, amount: Decimal | None) -> int | None:
        return from_decimal(amount, self.fmt.decimal_places)

    def format(self, cents: int | None) -> str:
        return format_cents(cents or 0, self.fmt)


@lru_cache
def get_money_formatter() -> MoneyFormatter:
    """Process-wide formatter built from settings on first use."""
    from app.core.config import settings

    return MoneyFormatter(settings.currency_format())
