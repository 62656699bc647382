"""
API-specific data models for the currency swap application.
"""

from datetime import datetime
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)

from ..core.models import ControllerStatus, ConversionState


class ConvertResponse(BaseModel):
    """Model for currency conversion response."""

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
    )

    amount: Annotated[float, Field(description="Original amount")]
    from_currency: Annotated[str, Field(description="Source currency code")]
    to_currency: Annotated[str, Field(description="Target currency code")]
    converted_amount: Annotated[float, Field(description="Converted amount")]
    rate: Annotated[float, Field(gt=0, description="Conversion rate")]
    timestamp: Annotated[datetime, Field(description="Date of the source price")]

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()


class StateResponse(BaseModel):
    """Model for the conversion session as shown on the display surface."""

    model_config = ConfigDict(use_enum_values=True)

    status: Annotated[ControllerStatus, Field(description="Session status")]
    feed_error: Annotated[
        str | None, Field(description="Feed failure message, if any")
    ] = None
    state: Annotated[ConversionState, Field(description="Conversion state")]


class PriceResponse(BaseModel):
    """Model for one candidate currency with its latest price."""

    currency: str
    price: float
    date: datetime

    @field_serializer("date")
    def serialize_date(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()


class PickerResponse(BaseModel):
    """Model for one side of the currency picker."""

    selected_currency: Annotated[str, Field(description="Currently selected code")]
    candidates: Annotated[
        list[PriceResponse], Field(description="Candidates matching the search")
    ]


class SelectCurrencyRequest(BaseModel):
    """Model for selecting a currency on one side."""

    currency: Annotated[str, Field(description="Currency code to select")]


class EditAmountRequest(BaseModel):
    """Model for editing the amount to send."""

    text: Annotated[str, Field(description="Amount text as typed")]


class ErrorResponse(BaseModel):
    """Model for error responses."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    error: Annotated[str, Field(description="Error code")]
    message: Annotated[str, Field(description="Human-readable error message")]
