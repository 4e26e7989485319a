"""Decimal utilities for money amounts.

All monetary values are carried as Decimal; floats from JSON or YAML are
converted through their string form so 120.5 stays 120.5.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")

# Symbols stripped from user-entered amounts
CURRENCY_SYMBOLS = {"$", "€", "£", "MAD", "DH"}

# ($1,234.56) or (1234.56)
PARENS_NEGATIVE_PATTERN = re.compile(r"^\s*\(\s*([^)]+)\s*\)\s*$")


@dataclass(frozen=True)
class LocaleFormat:
    """Number layout for a display locale.

    Attributes:
        group_separator: Thousands separator.
        decimal_separator: Separator before the fraction digits.
        symbol_first: Whether the currency symbol precedes the number.
        symbol_spacing: Text between number and symbol.
    """

    group_separator: str
    decimal_separator: str
    symbol_first: bool
    symbol_spacing: str = ""


LOCALE_FORMATS: dict[str, LocaleFormat] = {
    "en-US": LocaleFormat(",", ".", symbol_first=True),
    "en-GB": LocaleFormat(",", ".", symbol_first=True),
    "fr-MA": LocaleFormat(".", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "fr-FR": LocaleFormat("\u202f", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "de-DE": LocaleFormat(".", ",", symbol_first=False, symbol_spacing="\u00a0"),
}

# Display symbol per ISO currency code; codes not listed are shown as-is
CURRENCY_DISPLAY = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "MAD": "MAD",
}


def to_decimal(value: object) -> Decimal:
    """Convert a snapshot or form value to Decimal.

    Accepts Decimal, int, float and strings; strings may carry a currency
    symbol, thousands commas or accounting parentheses for negatives.
    Booleans are rejected even though they are ints.

    Args:
        value: Value to convert.

    Returns:
        The value as Decimal. NaN inputs stay NaN.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a monetary amount: {value!r}")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        return parse_amount(value)
    raise ValueError(f"Not a monetary amount: {value!r}")


def parse_amount(raw_amount: str) -> Decimal:
    """Parse a user-entered amount string.

    Handles "1234.56", "-1234.56", "$1,234.56" and "(1,234.56)".

    Args:
        raw_amount: The raw amount string.

    Returns:
        Signed Decimal.

    Raises:
        ValueError: If the amount cannot be parsed.
    """
    amount_str = raw_amount.strip()
    if not amount_str:
        raise ValueError("Empty amount string")

    is_negative = False
    parens_match = PARENS_NEGATIVE_PATTERN.match(amount_str)
    if parens_match:
        amount_str = parens_match.group(1).strip()
        is_negative = True

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:].strip()

    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = amount_str.replace(",", "").replace(" ", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse amount '{raw_amount}'") from e

    return -amount if is_negative else amount


def round_money(amount: Decimal, decimal_places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places.

    NaN and infinite values are returned unchanged.
    """
    if not amount.is_finite():
        return amount
    return amount.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)


def is_positive(amount: Decimal) -> bool:
    """True if the amount is a number greater than zero (NaN is not)."""
    return not amount.is_nan() and amount > ZERO


def sum_amounts(amounts: object) -> Decimal:
    """Sum an iterable of Decimal amounts, starting from Decimal zero."""
    return sum(amounts, ZERO)  # type: ignore[arg-type]


def _group_digits(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_currency(
    amount: Decimal,
    currency: str = "MAD",
    locale: str = "fr-MA",
    decimal_places: int = 2,
) -> str:
    """Format an amount as localized currency text.

    Examples:
        format_currency(Decimal("1234.5"))                  -> "1.234,50 MAD"
        format_currency(Decimal("-1234.5"), "USD", "en-US") -> "-$1,234.50"

    Args:
        amount: The amount to format.
        currency: ISO currency code.
        locale: Display locale, one of LOCALE_FORMATS.
        decimal_places: Number of fraction digits.

    Returns:
        Formatted string. Non-finite amounts render as "NaN" or "∞".

    Raises:
        ValueError: If the locale is not supported.
    """
    layout = LOCALE_FORMATS.get(locale)
    if layout is None:
        raise ValueError(f"Unsupported locale: {locale}")

    symbol = CURRENCY_DISPLAY.get(currency.upper(), currency.upper())

    sign = ""
    if amount.is_nan():
        number = "NaN"
    elif amount.is_infinite():
        number = "∞"
        sign = "-" if amount < ZERO else ""
    else:
        rounded = round_money(amount, decimal_places)
        if rounded < ZERO:
            sign = "-"
        whole, _, fraction = f"{abs(rounded):f}".partition(".")
        number = _group_digits(whole, layout.group_separator)
        if decimal_places > 0:
            number = f"{number}{layout.decimal_separator}{fraction}"

    if layout.symbol_first:
        return f"{sign}{symbol}{layout.symbol_spacing}{number}"
    return f"{sign}{number}{layout.symbol_spacing}{symbol}"


def format_percentage(value: Decimal, decimal_places: int = 1) -> str:
    """Format a percentage value such as 47.2502 as "47.3%"."""
    if not value.is_finite():
        return f"{value}%"
    return f"{round_money(value, decimal_places):f}%"
