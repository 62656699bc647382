"""
Conversion session state and its recomputation.
"""

import logging
from collections.abc import Iterable
from typing import Any, Final, Literal

from .calculator import (
    ERROR_INVALID_AMOUNT,
    ERROR_INVALID_PRICE,
    ERROR_PRICES_NOT_LOADED,
    ERROR_RATE_UNAVAILABLE,
    compute_conversion,
)
from .models import (
    ControllerStatus,
    ConversionState,
    Converted,
    InvalidAmount,
    PickerView,
    PriceIndex,
    PriceObservation,
    Unavailable,
)
from .normalizer import normalize
from .settings import conversion_settings
from .validators import accept_amount_text

ERROR_MESSAGES: Final[dict[str, str]] = {
    ERROR_PRICES_NOT_LOADED: "Currency prices are not loaded yet.",
    ERROR_RATE_UNAVAILABLE: "Exchange rate not available for selected currencies.",
    ERROR_INVALID_AMOUNT: "Please enter a valid amount to send.",
    ERROR_INVALID_PRICE: "Price data for the selected currencies is invalid.",
}

FEED_ERROR_PREFIX: Final[str] = "Failed to fetch currency data"

Side = Literal["from", "to"]

logger = logging.getLogger(__name__)


class ConversionController:
    """
    Single writer of a session's ConversionState.

    Every mutator derives a complete new state and swaps it in at once, so
    readers only ever see consistent snapshots. Until prices are loaded the
    controller is in the loading status and all mutators are no-ops.
    """

    def __init__(
        self,
        default_amount_text: str | None = None,
        fraction_digits: int | None = None,
    ) -> None:
        """Initialize an empty session waiting for the price feed."""
        if default_amount_text is None:
            default_amount_text = conversion_settings.default_amount_text
        if fraction_digits is None:
            fraction_digits = conversion_settings.amount_fraction_digits

        self._fraction_digits = fraction_digits
        self._index: PriceIndex | None = None
        self._status = ControllerStatus.LOADING
        self._feed_error: str | None = None
        self._state = ConversionState(from_amount_text=default_amount_text)

    @property
    def state(self) -> ConversionState:
        return self._state

    @property
    def status(self) -> ControllerStatus:
        return self._status

    @property
    def feed_error(self) -> str | None:
        return self._feed_error

    @property
    def index(self) -> PriceIndex | None:
        return self._index

    def load_prices(
        self, observations: Iterable[PriceObservation]
    ) -> ConversionState:
        """
        Build the price index from a fetched feed and recompute.

        The first load picks the first two currencies of the feed as the
        default pair (or the same one twice when only one exists). Later
        loads keep the current selection.
        """
        index = normalize(observations)
        changes: dict[str, Any] = {}

        if self._status is ControllerStatus.LOADING and (currencies := list(index)):
            changes["from_currency"] = currencies[0]
            changes["to_currency"] = (
                currencies[1] if len(currencies) > 1 else currencies[0]
            )

        self._index = index
        self._status = ControllerStatus.READY
        self._feed_error = None
        logger.info(f"Loaded prices for {len(index)} currencies")
        return self._commit(**changes)

    def fail_feed(self, message: str) -> None:
        """Record a feed failure; the session stays in the loading status."""
        self._feed_error = f"{FEED_ERROR_PREFIX}: {message}"
        logger.error(self._feed_error)

    def select_from(self, currency: str) -> ConversionState:
        if self._status is ControllerStatus.LOADING:
            return self._state
        return self._commit(from_currency=currency)

    def select_to(self, currency: str) -> ConversionState:
        if self._status is ControllerStatus.LOADING:
            return self._state
        return self._commit(to_currency=currency)

    def edit_amount(self, text: str) -> ConversionState:
        """Adopt the amount text if it is well formed, then recompute."""
        if self._status is ControllerStatus.LOADING:
            return self._state

        current = self._state.from_amount_text
        if (accepted := accept_amount_text(current, text)) != text:
            logger.debug(f"Rejected amount text {text!r}")
            return self._state
        return self._commit(from_amount_text=accepted)

    def swap(self) -> ConversionState:
        """Exchange both currencies in a single state update."""
        if self._status is ControllerStatus.LOADING:
            return self._state
        return self._commit(
            from_currency=self._state.to_currency,
            to_currency=self._state.from_currency,
        )

    def recompute(self) -> ConversionState:
        if self._status is ControllerStatus.LOADING:
            return self._state
        return self._commit()

    def candidates(self) -> list[PriceObservation]:
        """Latest price of every currency, in feed order."""
        if self._index is None:
            return []
        return list(self._index.values())

    def search_candidates(self, search_term: str = "") -> list[PriceObservation]:
        """Candidates whose code contains the search term, ignoring case."""
        term = search_term.lower()
        return [c for c in self.candidates() if term in c.currency.lower()]

    def picker(self, side: Side, search_term: str = "") -> PickerView:
        """Selected currency, candidates and select callback for one side."""
        match side:
            case "from":
                selected, on_select = self._state.from_currency, self.select_from
            case "to":
                selected, on_select = self._state.to_currency, self.select_to
            case _:
                raise ValueError(f"Unknown picker side: {side!r}")

        return PickerView(
            selected_currency=selected,
            candidates=self.search_candidates(search_term),
            on_select=on_select,
        )

    def _commit(self, **changes: Any) -> ConversionState:
        """Apply input changes and the derived fields as one new state."""
        pending = self._state.model_copy(update=changes)
        result = compute_conversion(
            self._index,
            pending.from_currency,
            pending.to_currency,
            pending.from_amount_text,
        )

        match result:
            case Converted(rate=rate, output_amount=output_amount):
                derived = {
                    "rate": rate,
                    "to_amount_text": f"{output_amount:.{self._fraction_digits}f}",
                    "error_message": None,
                }
            case Unavailable(reason=reason) | InvalidAmount(reason=reason):
                derived = {
                    "rate": None,
                    "to_amount_text": "",
                    "error_message": ERROR_MESSAGES[reason],
                }
            case _:
                raise TypeError(f"Unexpected conversion result: {result!r}")

        self._state = pending.model_copy(update=derived)
        logger.debug(
            f"Recomputed {self._state.from_currency} -> {self._state.to_currency}: "
            f"rate={self._state.rate}, error={self._state.error_message}"
        )
        return self._state
