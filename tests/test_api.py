"""
Tests for the API functionality.
"""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from currency_swap.api.service import app
from currency_swap.core.controller import ConversionController
from currency_swap.core.models import PriceObservation


def observations():
    return [
        PriceObservation(
            currency="BTC", price=50000.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
        PriceObservation(
            currency="BTC", price=51000.0, date=datetime(2024, 1, 2, tzinfo=UTC)
        ),
        PriceObservation(
            currency="ETH", price=3000.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
        PriceObservation(
            currency="USDC", price=1.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
    ]


class TestAPI:
    """Test cases for the API endpoints."""

    def setup_method(self):
        """Set up test client with a loaded session."""
        self.controller = ConversionController(default_amount_text="1.0")
        self.controller.load_prices(observations())
        app.state.controller = self.controller
        self.client = TestClient(app)

    def test_health_check(self):
        """Test the health check endpoint."""
        response = self.client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"

    def test_get_state(self):
        response = self.client.get("/state")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["feed_error"] is None
        assert data["state"] == {
            "from_currency": "BTC",
            "to_currency": "ETH",
            "from_amount_text": "1.0",
            "to_amount_text": "17.000000",
            "rate": 17.0,
            "error_message": None,
        }

    def test_edit_amount(self):
        response = self.client.put("/state/amount", json={"text": "2"})
        assert response.status_code == 200
        state = response.json()["state"]
        assert state["from_amount_text"] == "2"
        assert state["to_amount_text"] == "34.000000"

    def test_edit_amount_rejected(self):
        """Test that malformed amount text is ignored."""
        response = self.client.put("/state/amount", json={"text": "1.2.3"})
        assert response.status_code == 200
        assert response.json()["state"]["from_amount_text"] == "1.0"

    def test_edit_amount_empty(self):
        response = self.client.put("/state/amount", json={"text": ""})
        state = response.json()["state"]
        assert state["to_amount_text"] == ""
        assert state["error_message"] == "Please enter a valid amount to send."

    def test_select_currencies(self):
        self.client.put("/state/from", json={"currency": "ETH"})
        response = self.client.put("/state/to", json={"currency": "USDC"})
        state = response.json()["state"]
        assert (state["from_currency"], state["to_currency"]) == ("ETH", "USDC")
        assert state["rate"] == 3000.0

    def test_select_unknown_currency(self):
        response = self.client.put("/state/to", json={"currency": "DOGE"})
        state = response.json()["state"]
        assert state["rate"] is None
        assert state["to_amount_text"] == ""
        assert (
            state["error_message"]
            == "Exchange rate not available for selected currencies."
        )

    def test_swap_twice(self):
        first = self.client.post("/state/swap").json()["state"]
        second = self.client.post("/state/swap").json()["state"]
        assert (first["from_currency"], first["to_currency"]) == ("ETH", "BTC")
        assert (second["from_currency"], second["to_currency"]) == ("BTC", "ETH")

    @pytest.mark.parametrize(
        "side,search,selected,expected",
        [
            ("from", "", "BTC", ["BTC", "ETH", "USDC"]),
            ("to", "", "ETH", ["BTC", "ETH", "USDC"]),
            ("from", "usd", "BTC", ["USDC"]),
            ("to", "zzz", "ETH", []),
        ],
    )
    def test_currencies(self, side, search, selected, expected):
        response = self.client.get(f"/currencies?side={side}&search={search}")
        assert response.status_code == 200
        data = response.json()
        assert data["selected_currency"] == selected
        assert [c["currency"] for c in data["candidates"]] == expected

    def test_currencies_latest_price(self):
        data = self.client.get("/currencies").json()
        btc = data["candidates"][0]
        assert btc["price"] == 51000.0
        assert btc["date"] == "2024-01-02T00:00:00+00:00"

    def test_currencies_invalid_side(self):
        response = self.client.get("/currencies?side=middle")
        assert response.status_code == 422

    def test_convert(self):
        response = self.client.get("/convert?amount=2&from=BTC&to=ETH")
        assert response.status_code == 200
        data = response.json()
        assert data["converted_amount"] == 34.0
        assert data["rate"] == 17.0
        assert data["timestamp"] == "2024-01-02T00:00:00+00:00"

    def test_convert_same_currency(self):
        response = self.client.get("/convert?amount=5&from=ETH&to=ETH")
        assert response.status_code == 200
        assert response.json()["rate"] == 1.0
        assert response.json()["converted_amount"] == 5.0

    def test_convert_does_not_touch_session(self):
        before = self.controller.state
        self.client.get("/convert?amount=3&from=USDC&to=BTC")
        assert self.controller.state is before

    def test_convert_missing_parameters(self):
        """Test conversion endpoint with missing parameters."""
        response = self.client.get("/convert")
        assert response.status_code == 422

    @pytest.mark.parametrize("amount", ["0", "-1", "abc", ".", "nan"])
    def test_convert_invalid_amounts(self, amount):
        """Test conversion with invalid amounts."""
        response = self.client.get(f"/convert?amount={amount}&from=BTC&to=ETH")
        assert response.status_code == 422, f"Amount {amount} should be invalid"
        assert response.json()["detail"]["error"] == "invalid_amount"

    def test_convert_unknown_currency(self):
        response = self.client.get("/convert?amount=1&from=BTC&to=DOGE")
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "rate_unavailable"

    def test_convert_case_sensitive(self):
        response = self.client.get("/convert?amount=1&from=btc&to=ETH")
        assert response.status_code == 404

    def test_404_endpoint(self):
        """Test non-existent endpoint."""
        response = self.client.get("/nonexistent")
        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "not_found"


class TestAPILoading:
    """Test cases for a session whose feed has not arrived."""

    def setup_method(self):
        self.controller = ConversionController()
        app.state.controller = self.controller
        self.client = TestClient(app)

    def test_state_loading(self):
        data = self.client.get("/state").json()
        assert data["status"] == "loading"
        assert data["state"]["rate"] is None

    def test_mutations_are_noops(self):
        response = self.client.post("/state/swap")
        assert response.status_code == 200
        assert response.json()["state"]["from_currency"] == ""

    def test_convert_not_loaded(self):
        response = self.client.get("/convert?amount=1&from=BTC&to=ETH")
        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "prices_not_loaded"

    def test_feed_error_surfaced(self):
        self.controller.fail_feed("HTTP error status: 500")
        data = self.client.get("/state").json()
        assert data["status"] == "loading"
        assert data["feed_error"] == (
            "Failed to fetch currency data: HTTP error status: 500"
        )

    def test_currencies_empty(self):
        data = self.client.get("/currencies?side=to").json()
        assert data == {"selected_currency": "", "candidates": []}
