"""Reservation pipeline: the ordered stages and their state machine."""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

import structlog

from . import site
from .actions import execute
from .config import Settings
from .date_window import ReservationDate
from .driver import BrowserDriver
from .errors import BookingError, PipelineStateError
from .models import PipelineState, TimeSlot, default_slots
from .slots import check_availability, select_slots

LOGGER = structlog.get_logger(__name__)

STATE_ORDER = [
    PipelineState.IDLE,
    PipelineState.AUTHENTICATED,
    PipelineState.DATE_SELECTED,
    PipelineState.AVAILABILITY_VERIFIED,
    PipelineState.SLOTS_SELECTED,
    PipelineState.FORM_FILLED,
    PipelineState.PAID,
]

TERMINAL_STATES = {PipelineState.PAID, PipelineState.FAILED}


class ReservationPipeline:
    """Drives one reservation from login to payment on a single page."""

    def __init__(
        self,
        settings: Settings,
        driver: BrowserDriver,
        *,
        slots: Optional[List[TimeSlot]] = None,
        report: Callable[[str], None] = print,
    ):
        self._settings = settings
        self._driver = driver
        self._report = report
        self.slots = slots if slots is not None else default_slots()
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]

    def advance(self, target: PipelineState) -> None:
        """Move to ``target``: the next state in order, or ``FAILED``."""
        if self.state in TERMINAL_STATES:
            raise PipelineStateError(f"Pipeline already finished in state {self.state.value}")
        if target is not PipelineState.FAILED:
            expected = STATE_ORDER[STATE_ORDER.index(self.state) + 1]
            if target is not expected:
                raise PipelineStateError(
                    f"Cannot move from {self.state.value} to {target.value}; expected {expected.value}"
                )
        LOGGER.info("pipeline.transition", source=self.state.value, target=target.value)
        self.state = target
        self.history.append(target)

    async def run(self, reservation: ReservationDate) -> PipelineState:
        """Run every stage in order; any error fails the run and propagates."""
        try:
            await self._login()
            await self._select_date(reservation)
            await self._check_availability()
            await self._select_slots()
            await self._fill_reservation_form()
            await self._pay()
        except BookingError as exc:
            LOGGER.error("pipeline.failed", state=self.state.value, error=str(exc))
            if self.state not in TERMINAL_STATES:
                self.advance(PipelineState.FAILED)
            raise
        except BaseException as exc:
            # cancellation or an unexpected error still ends the run
            LOGGER.error("pipeline.aborted", state=self.state.value, error_type=type(exc).__name__)
            if self.state not in TERMINAL_STATES:
                self.advance(PipelineState.FAILED)
            raise
        return self.state

    async def _login(self) -> None:
        LOGGER.info("login.start", url=str(self._settings.login_url))
        await execute(self._driver, site.login_actions(self._settings), stage="login")
        self.advance(PipelineState.AUTHENTICATED)

    async def _select_date(self, reservation: ReservationDate) -> None:
        LOGGER.info(
            "calendar.select",
            year_month=reservation.year_month_key,
            day=reservation.day_key,
        )
        await execute(self._driver, site.calendar_actions(reservation), stage="calendar")
        self.advance(PipelineState.DATE_SELECTED)

    async def _check_availability(self) -> None:
        await check_availability(
            self._driver,
            self.slots,
            wait_seconds=self._settings.slot_wait_seconds,
            report=self._report,
        )
        self.advance(PipelineState.AVAILABILITY_VERIFIED)

    async def _select_slots(self) -> None:
        await select_slots(self._driver, self.slots)
        self.advance(PipelineState.SLOTS_SELECTED)

    async def _fill_reservation_form(self) -> None:
        LOGGER.info("form.start", party_size=self._settings.party_size)
        await execute(self._driver, site.reservation_form_actions(self._settings), stage="reservation_form")
        self.advance(PipelineState.FORM_FILLED)

    async def _pay(self) -> None:
        LOGGER.info("payment.start")
        await execute(self._driver, site.payment_actions(self._settings), stage="payment")
        self.advance(PipelineState.PAID)
        LOGGER.info("payment.complete")


async def hold_open() -> None:
    """Block until cancelled so the operator can inspect the browser window."""
    LOGGER.info("pipeline.hold", message="Reservation complete. Keeping the window open...")
    await asyncio.Event().wait()
