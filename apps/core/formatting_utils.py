"""
Number and currency formatting utilities.

Amounts are kept in full precision everywhere else; this module is where
they are rounded for display on bills, order history and receipts.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[int, float, Decimal]

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

# Currencies written with lakh/crore digit grouping
LAKH_GROUPED_CURRENCIES = {"INR"}


def round_amount(amount: Number, decimal_places: int = 2) -> Decimal:
    """Round half up to the given number of decimal places."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)


def format_number(
    number: Number,
    decimal_places: Optional[int] = None,
    use_grouping: bool = True,
    lakh_grouping: bool = False,
) -> str:
    """
    Format a number with thousand separators.

    With ``lakh_grouping`` the digits above the last three are grouped in
    pairs (1,00,000), as amounts in rupees are written.

    Examples:
        >>> format_number(1234567.891, decimal_places=2)
        '1,234,567.89'
        >>> format_number(1618.2, decimal_places=2)
        '1,618.20'
        >>> format_number(1234567, lakh_grouping=True)
        '12,34,567'
    """
    if decimal_places is not None:
        formatted = f"{round_amount(number, decimal_places):f}"
    else:
        formatted = str(number)

    negative = formatted.startswith("-")
    if negative:
        formatted = formatted[1:]

    if "." in formatted:
        integer_part, decimal_part = formatted.split(".")
    else:
        integer_part = formatted
        decimal_part = None

    if use_grouping and len(integer_part) > 3:
        head, tail = integer_part[:-3], integer_part[-3:]
        size = 2 if lakh_grouping else 3
        groups = [tail]
        for i in range(len(head), 0, -size):
            groups.insert(0, head[max(0, i - size) : i])
        integer_part = ",".join(groups)

    formatted = f"{integer_part}.{decimal_part}" if decimal_part else integer_part
    return f"-{formatted}" if negative else formatted


def format_currency(amount: Number, currency: str = "INR") -> str:
    """
    Format a currency amount for display.

    Examples:
        >>> format_currency(Decimal("1618.2"))
        '₹1,618.20'
        >>> format_currency(Decimal("123456.5"))
        '₹1,23,456.50'
        >>> format_currency(10, "CHF")
        '10.00 CHF'
    """
    formatted_amount = format_number(
        amount, decimal_places=2, lakh_grouping=currency in LAKH_GROUPED_CURRENCIES
    )
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{formatted_amount} {currency}"
    if formatted_amount.startswith("-"):
        return f"-{symbol}{formatted_amount[1:]}"
    return f"{symbol}{formatted_amount}"
