"""FastAPI application serving a currency swap session."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Final, Literal

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ..core.calculator import (
    ERROR_PRICES_NOT_LOADED,
    compute_conversion,
)
from ..core.controller import ERROR_MESSAGES, ConversionController
from ..core.models import Converted, InvalidAmount, Unavailable
from ..feed.service import load_price_feed
from .models import (
    ConvertResponse,
    EditAmountRequest,
    ErrorResponse,
    PickerResponse,
    PriceResponse,
    SelectCurrencyRequest,
    StateResponse,
)
from .settings import api_settings

ERROR_INTERNAL_ERROR: Final[str] = "internal_error"
ERROR_NOT_FOUND: Final[str] = "not_found"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the session controller and fetch the price feed in the background."""
    controller = ConversionController()
    app.state.controller = controller
    feed_task = asyncio.create_task(load_price_feed(controller))
    try:
        yield
    finally:
        feed_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await feed_task


def get_controller(request: Request) -> ConversionController:
    """
    Dependency function to provide the session controller.

    Returns:
        ConversionController: Controller owned by the running application
    """
    if (controller := getattr(request.app.state, "controller", None)) is None:
        raise HTTPException(
            status_code=503,
            detail=ErrorResponse(
                error=ERROR_PRICES_NOT_LOADED,
                message=ERROR_MESSAGES[ERROR_PRICES_NOT_LOADED],
            ).model_dump(),
        )
    return controller


ControllerDep = Annotated[ConversionController, Depends(get_controller)]

CurrencyType = Annotated[
    str,
    Query(
        min_length=1,
        description="Currency code, case-sensitive",
        examples=["ETH", "USDC", "WBTC"],
    ),
]


app = FastAPI(
    title="Currency Swap API",
    description="API to convert amounts between currencies using their latest prices",
    version="1.0.0",
    lifespan=lifespan,
)


def _state_response(controller: ConversionController) -> StateResponse:
    return StateResponse(
        status=controller.status,
        feed_error=controller.feed_error,
        state=controller.state,
    )


@app.get("/", response_model=dict[str, str])
async def root() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        dict[str, str]: Health status information
    """
    return {"message": "Currency Swap API is running", "status": "healthy"}


@app.get("/state", response_model=StateResponse)
async def get_state(controller: ControllerDep) -> StateResponse:
    """Current conversion state of the session."""
    return _state_response(controller)


@app.get("/currencies", response_model=PickerResponse)
async def list_currencies(
    controller: ControllerDep,
    side: Annotated[Literal["from", "to"], Query(description="Picker side")] = "from",
    search: Annotated[str, Query(description="Case-insensitive filter")] = "",
) -> PickerResponse:
    """Candidate currencies for one side of the form.

    Args:
        controller: Session controller
        side: Which picker is asking
        search: Substring the currency code must contain

    Returns:
        PickerResponse: Selected currency and matching candidates
    """
    view = controller.picker(side, search)
    return PickerResponse(
        selected_currency=view.selected_currency,
        candidates=[
            PriceResponse(currency=c.currency, price=c.price, date=c.date)
            for c in view.candidates
        ],
    )


@app.put("/state/from", response_model=StateResponse)
async def select_from(
    body: SelectCurrencyRequest, controller: ControllerDep
) -> StateResponse:
    controller.select_from(body.currency)
    return _state_response(controller)


@app.put("/state/to", response_model=StateResponse)
async def select_to(
    body: SelectCurrencyRequest, controller: ControllerDep
) -> StateResponse:
    controller.select_to(body.currency)
    return _state_response(controller)


@app.put("/state/amount", response_model=StateResponse)
async def edit_amount(
    body: EditAmountRequest, controller: ControllerDep
) -> StateResponse:
    """Edit the amount to send; malformed text leaves the state unchanged."""
    controller.edit_amount(body.text)
    return _state_response(controller)


@app.post("/state/swap", response_model=StateResponse)
async def swap(controller: ControllerDep) -> StateResponse:
    """Exchange the send and receive currencies."""
    controller.swap()
    return _state_response(controller)


@app.get("/convert", response_model=ConvertResponse)
async def convert_currency(
    controller: ControllerDep,
    amount: Annotated[str, Query(description="Amount to convert")],
    from_currency: Annotated[CurrencyType, Query(alias="from")],
    to_currency: Annotated[CurrencyType, Query(alias="to")],
) -> ConvertResponse:
    """
    Convert an amount using the latest prices of the session.

    Args:
        controller: Session controller holding the price index
        amount: Amount to convert
        from_currency: Source currency code
        to_currency: Target currency code

    Returns:
        ConvertResponse: Converted amount and rate information

    Raises:
        HTTPException: For various error conditions including:
            - 422: Amount is not a positive number
            - 404: No price for one of the currencies
            - 503: Prices are not loaded yet
            - 500: Internal server errors
    """
    try:
        index = controller.index
        result = compute_conversion(index, from_currency, to_currency, amount)

        match result:
            case Converted(rate=rate, output_amount=output_amount):
                return ConvertResponse(
                    amount=float(amount),
                    from_currency=from_currency,
                    to_currency=to_currency,
                    converted_amount=output_amount,
                    rate=rate,
                    timestamp=index[from_currency].date,
                )
            case Unavailable(reason=reason):
                status_code = 503 if reason == ERROR_PRICES_NOT_LOADED else 404
                raise HTTPException(
                    status_code=status_code,
                    detail=ErrorResponse(
                        error=reason, message=ERROR_MESSAGES[reason]
                    ).model_dump(),
                )
            case InvalidAmount(reason=reason):
                raise HTTPException(
                    status_code=422,
                    detail=ErrorResponse(
                        error=reason, message=ERROR_MESSAGES[reason]
                    ).model_dump(),
                )
            case _:
                raise HTTPException(
                    status_code=500,
                    detail=ErrorResponse(
                        error=ERROR_INTERNAL_ERROR,
                        message="Invalid conversion result",
                    ).model_dump(),
                )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in conversion: {e}")
        raise HTTPException(
            status_code=500,
            detail=ErrorResponse(
                error=ERROR_INTERNAL_ERROR,
                message="An unexpected error occurred during conversion",
            ).model_dump(),
        ) from e


@app.exception_handler(404)
async def not_found_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle 404 errors.

    Returns:
        JSONResponse: Error response in JSON format
    """
    if isinstance(exc, HTTPException) and isinstance(exc.detail, dict):
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            error=ERROR_NOT_FOUND, message="Endpoint not found"
        ).model_dump(),
    )


@app.exception_handler(500)
async def internal_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle internal server errors.

    Args:
        exc: The exception that was raised

    Returns:
        JSONResponse: Error response in JSON format
    """
    logger.error(f"Internal server error: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ERROR_INTERNAL_ERROR, message="An internal server error occurred"
        ).model_dump(),
    )


async def main() -> None:
    """Main entry point for the API server."""
    config = uvicorn.Config(
        app,
        host=api_settings.api_host,
        port=api_settings.api_port,
        log_level=api_settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
