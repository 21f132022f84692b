"""Entry point for the studio booking agent."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Awaitable, Callable, Optional

import structlog
from pydantic import ValidationError

from .config import Settings
from .date_window import DatePolicy, ReservationDate, prompt_reservation_date, today_in_zone
from .driver import PlaywrightDriver
from .errors import BookingError, ConfigurationError
from .pipeline import ReservationPipeline, hold_open


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog + stdlib logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


LOGGER = structlog.get_logger(__name__)


async def run(
    settings: Settings,
    reservation: ReservationDate,
    *,
    hold: Callable[[], Awaitable[None]] = hold_open,
) -> None:
    """Open the browser, book the slots, then hold the window open."""
    async with PlaywrightDriver(settings) as driver:
        pipeline = ReservationPipeline(settings, driver)
        await pipeline.run(reservation)
        try:
            await hold()
        except asyncio.CancelledError:
            LOGGER.info("agent.released")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Reserve the configured studio time slots.")
    parser.add_argument(
        "--date-policy",
        choices=[policy.value for policy in DatePolicy],
        help="Override DATE_POLICY: 'warn' continues with out-of-window dates, 'strict' rejects them.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the browser without a visible window.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every browser action.",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, applying CLI overrides."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc

    overrides: dict[str, object] = {}
    if args.date_policy:
        overrides["date_policy"] = DatePolicy(args.date_policy)
    if args.headless:
        overrides["headless"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def cli(argv: Optional[list[str]] = None) -> int:
    """Console script entrypoint."""
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        settings = load_settings(args)
    except ConfigurationError as exc:
        LOGGER.error("settings.error", error=str(exc))
        return 2

    try:
        reservation = prompt_reservation_date(
            settings.date_policy,
            today=today_in_zone(settings.timezone),
        )
        asyncio.run(run(settings, reservation))
    except BookingError as exc:
        LOGGER.error("agent.failed", error=str(exc), error_type=type(exc).__name__)
        return 1
    except KeyboardInterrupt:
        LOGGER.warning("agent.interrupted")
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
