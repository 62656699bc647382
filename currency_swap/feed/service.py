"""
Price feed client that fetches historical price observations over HTTP.
"""

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from ..core.controller import ConversionController
from ..core.models import PriceObservation
from .settings import feed_settings

logger = logging.getLogger(__name__)


class FeedUnavailableError(Exception):
    """Raised when the price feed cannot be fetched or decoded."""


class PriceFeedClient:
    """Client for the JSON price feed."""

    def __init__(
        self, feed_url: str | None = None, request_timeout: float | None = None
    ) -> None:
        """Initialize the feed client."""
        self.feed_url = feed_url or feed_settings.feed_url
        self.request_timeout = request_timeout or feed_settings.request_timeout

    async def fetch_observations(self) -> list[PriceObservation]:
        """
        Fetch the feed once and parse it into observations.

        Items that do not describe a valid observation are skipped.

        Returns:
            list[PriceObservation]: Observations in feed order

        Raises:
            FeedUnavailableError: On transport errors, error statuses or a
                body that is not a JSON array
        """
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)

        try:
            async with (
                aiohttp.ClientSession() as session,
                session.get(self.feed_url, timeout=timeout) as response,
            ):
                response.raise_for_status()
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise FeedUnavailableError(f"Request to {self.feed_url} failed: {e}") from e
        except ValueError as e:
            raise FeedUnavailableError(f"Feed is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise FeedUnavailableError(
                f"Feed must be a JSON array, got {type(data).__name__}"
            )

        observations = [
            observation
            for item in data
            if (observation := self._parse_feed_item(item)) is not None
        ]

        logger.info(
            f"Fetched {len(observations)} price observations "
            f"({len(data) - len(observations)} skipped)"
        )
        return observations

    def _parse_feed_item(self, data: Any) -> PriceObservation | None:
        """Parse one feed entry into a PriceObservation."""
        try:
            return PriceObservation.model_validate(data)
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid feed item: {data}, error: {e.error_count()} errors"
            )
            return None


async def load_price_feed(
    controller: ConversionController, client: PriceFeedClient | None = None
) -> None:
    """Fetch the feed once and hand it to the controller, or record the failure."""
    client = client or PriceFeedClient()

    try:
        observations = await client.fetch_observations()
    except FeedUnavailableError as e:
        controller.fail_feed(str(e))
        return

    controller.load_prices(observations)
