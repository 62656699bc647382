"""
Exchange rate and converted amount derivation.
"""

import math
from typing import Final

from .models import (
    ConversionResult,
    Converted,
    InvalidAmount,
    PriceIndex,
    Unavailable,
)

ERROR_PRICES_NOT_LOADED: Final[str] = "prices_not_loaded"
ERROR_RATE_UNAVAILABLE: Final[str] = "rate_unavailable"
ERROR_INVALID_AMOUNT: Final[str] = "invalid_amount"
ERROR_INVALID_PRICE: Final[str] = "invalid_price"


def parse_amount(amount_text: str) -> float | None:
    """Parse amount text, returning None unless it is a finite number above zero."""
    try:
        amount = float(amount_text)
    except ValueError:
        return None

    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def compute_conversion(
    index: PriceIndex | None,
    from_currency: str,
    to_currency: str,
    amount_text: str,
) -> ConversionResult:
    """
    Convert an amount between two currencies of the price index.

    The rate is the number of to_currency units bought by one from_currency
    unit, i.e. price(from) / price(to). Converting a currency into itself
    always uses a rate of exactly 1.

    Args:
        index: Latest prices per currency, or None while the feed is loading
        from_currency: Currency to send
        to_currency: Currency to receive
        amount_text: Raw amount text as typed by the user

    Returns:
        Converted, Unavailable or InvalidAmount
    """
    if index is None:
        return Unavailable(reason=ERROR_PRICES_NOT_LOADED)

    from_quote = index.get(from_currency)
    to_quote = index.get(to_currency)
    if from_quote is None or to_quote is None:
        return Unavailable(reason=ERROR_RATE_UNAVAILABLE)

    if from_currency == to_currency:
        rate = 1.0
    else:
        from_price, to_price = from_quote.price, to_quote.price
        if not (
            math.isfinite(from_price)
            and math.isfinite(to_price)
            and from_price > 0
            and to_price > 0
        ):
            return InvalidAmount(reason=ERROR_INVALID_PRICE)
        rate = from_price / to_price

    if (amount := parse_amount(amount_text)) is None:
        return InvalidAmount(reason=ERROR_INVALID_AMOUNT)

    output_amount = amount * rate
    if not (math.isfinite(rate) and math.isfinite(output_amount)):
        return InvalidAmount(reason=ERROR_INVALID_PRICE)

    return Converted(rate=rate, output_amount=output_amount)
