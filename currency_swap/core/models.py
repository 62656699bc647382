"""
Data models for the currency swap engine.
"""

from collections.abc import Callable, Mapping
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal, TypeAlias

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_serializer,
)

from .validators import ensure_utc, validate_timestamp


class PriceObservation(BaseModel):
    """Model representing one historical price quote for a currency."""

    model_config = ConfigDict(frozen=True)

    currency: Annotated[str, Field(description="Currency code, kept verbatim")]
    price: Annotated[float, Field(gt=0, description="Quoted price")]
    date: Annotated[
        datetime,
        BeforeValidator(validate_timestamp),
        AfterValidator(ensure_utc),
        Field(description="Quote timestamp"),
    ]

    @field_serializer("date")
    def serialize_date(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()


PriceIndex: TypeAlias = Mapping[str, PriceObservation]


class ControllerStatus(StrEnum):
    """Lifecycle of a conversion session."""

    LOADING = "loading"
    READY = "ready"


class ConversionState(BaseModel):
    """Snapshot of everything the display surface renders."""

    model_config = ConfigDict(frozen=True)

    from_currency: Annotated[str, Field(description="Currency to send")] = ""
    to_currency: Annotated[str, Field(description="Currency to receive")] = ""
    from_amount_text: Annotated[
        str, Field(description="Raw amount text entered by the user")
    ] = ""
    to_amount_text: Annotated[
        str, Field(description="Formatted converted amount")
    ] = ""
    rate: Annotated[
        float | None, Field(description="Units of to_currency per from_currency")
    ] = None
    error_message: Annotated[
        str | None, Field(description="Human-readable error, if any")
    ] = None


class Converted(BaseModel):
    """Successful conversion."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["converted"] = "converted"
    rate: float
    output_amount: float


class Unavailable(BaseModel):
    """No rate can be derived for the selected currencies."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unavailable"] = "unavailable"
    reason: str


class InvalidAmount(BaseModel):
    """The amount, or a price it depends on, is not usable."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["invalid_amount"] = "invalid_amount"
    reason: str


ConversionResult: TypeAlias = Converted | Unavailable | InvalidAmount


class PickerView(BaseModel):
    """What a currency picker widget needs for one side of the form."""

    model_config = ConfigDict(frozen=True)

    selected_currency: str
    candidates: list[PriceObservation]
    on_select: Callable[[str], ConversionState] = Field(exclude=True)
