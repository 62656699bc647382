"""
Reduction of a raw price feed into one latest price per currency.
"""

import logging
from collections.abc import Iterable

from .models import PriceIndex, PriceObservation

logger = logging.getLogger(__name__)


def normalize(observations: Iterable[PriceObservation]) -> PriceIndex:
    """
    Keep the most recent observation for every currency.

    The input may be unordered and may repeat currencies. An observation
    replaces the stored one when its date is greater than or equal to the
    stored date, so on equal dates the one seen last wins. Currencies keep
    the position of their first appearance, which is the order candidates
    are offered in.

    Args:
        observations: Price observations in feed order

    Returns:
        Mapping of currency code to its latest observation
    """
    latest: dict[str, PriceObservation] = {}
    total = 0

    for observation in observations:
        total += 1
        current = latest.get(observation.currency)
        if current is None or observation.date >= current.date:
            latest[observation.currency] = observation

    logger.debug(f"Normalized {total} observations into {len(latest)} prices")
    return latest
