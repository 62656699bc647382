"""
Main entrypoint for the Currency Swap application.
Usage: python run.py api
       python run.py convert AMOUNT FROM TO
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

USAGE = """Usage: python run.py [api|convert]
  api                     - Start the Currency Swap API
  convert AMOUNT FROM TO  - Convert once using the latest feed prices"""


def setup_logging() -> None:
    """
    Set up consistent logging configuration for the application.
    Uses environment variables for configuration.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format = os.getenv(
        "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log_file = os.getenv("LOG_FILE", "currency_swap.log")
    log_to_file = os.getenv("LOG_TO_FILE", "true").lower() == "true"

    numeric_level = getattr(logging, log_level, logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )


logger = logging.getLogger(__name__)


async def convert_once(amount: str, from_currency: str, to_currency: str) -> int:
    """Fetch the feed, run one conversion and print the outcome."""
    from currency_swap.core.controller import ConversionController
    from currency_swap.feed.service import load_price_feed

    controller = ConversionController(default_amount_text=amount)
    await load_price_feed(controller)

    if controller.feed_error:
        print(controller.feed_error)
        return 1

    controller.select_from(from_currency)
    state = controller.select_to(to_currency)

    if state.error_message:
        print(f"Error: {state.error_message}")
        return 1

    print(
        f"{state.from_amount_text} {state.from_currency} = "
        f"{state.to_amount_text} {state.to_currency}"
    )
    print(f"1 {state.from_currency} = {state.rate} {state.to_currency}")
    return 0


async def main() -> None:
    command = sys.argv[1].lower() if len(sys.argv) > 1 else ""

    setup_logging()

    if command == "api" and len(sys.argv) == 2:
        from currency_swap.api.service import main as run_service

        logger.info("Starting API service...")
        await run_service()
    elif command == "convert" and len(sys.argv) == 5:
        sys.exit(await convert_once(*sys.argv[2:5]))
    else:
        if command and command not in ("api", "convert"):
            print(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        sys.exit(0)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)
