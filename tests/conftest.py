"""
Test configuration for the currency swap tests.
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Add project root to path before importing our modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import our modules after path setup
from currency_swap.core.controller import ConversionController  # noqa: E402
from currency_swap.core.models import PriceObservation  # noqa: E402


@pytest.fixture
def sample_observations():
    """Provide an unordered feed with repeated currencies."""
    return [
        PriceObservation(
            currency="BTC", price=50000.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
        PriceObservation(
            currency="ETH", price=3000.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
        PriceObservation(
            currency="BTC", price=51000.0, date=datetime(2024, 1, 2, tzinfo=UTC)
        ),
        PriceObservation(
            currency="USDC", price=1.0, date=datetime(2024, 1, 1, tzinfo=UTC)
        ),
        PriceObservation(
            currency="BTC", price=49000.0, date=datetime(2023, 12, 31, tzinfo=UTC)
        ),
    ]


@pytest.fixture
def sample_feed():
    """Provide raw feed items as served by the price endpoint."""
    return [
        {"currency": "BTC", "price": 50000, "date": "2024-01-01T00:00:00Z"},
        {"currency": "BTC", "price": 51000, "date": "2024-01-02T00:00:00Z"},
        {"currency": "ETH", "price": 3000, "date": "2024-01-01T00:00:00Z"},
    ]


@pytest.fixture
def controller():
    """Provide a controller that has not received prices yet."""
    return ConversionController(default_amount_text="1.0", fraction_digits=6)


@pytest.fixture
def loaded_controller(controller, sample_observations):
    """Provide a controller with the sample prices loaded."""
    controller.load_prices(sample_observations)
    return controller
