"""Availability check and selection of the desired time slots."""

from __future__ import annotations

from typing import Callable, List, Sequence

import structlog

from . import site
from .actions import execute
from .driver import BrowserDriver
from .errors import AvailabilityConflictError, BrowserActionError, SlotSelectionError
from .models import SlotCheckResult, TimeSlot

LOGGER = structlog.get_logger(__name__)


def conflict_message(slot: TimeSlot) -> str:
    return f"[Error: already booked by another user] {slot.display_range} slot"


async def check_availability(
    driver: BrowserDriver,
    slots: Sequence[TimeSlot],
    *,
    wait_seconds: float,
    report: Callable[[str], None] = print,
) -> None:
    """
    Probe the slot table for every desired slot, in order.

    Sets ``is_available`` on each slot. A probe that fails leaves the slot
    unavailable. When any slot is unavailable, one conflict message per slot
    is reported and ``AvailabilityConflictError`` is raised.
    """
    for slot in slots:
        slot.is_available = False
        try:
            (exists,) = await execute(
                driver,
                site.slot_probe_actions(slot.id, wait_seconds),
                stage="availability",
            )
        except BrowserActionError as exc:
            LOGGER.warning("availability.probe_failed", slot_id=slot.id, error=str(exc))
        else:
            slot.is_available = bool(exists)
        LOGGER.info("availability.slot", slot_id=slot.id, available=slot.is_available)

    unavailable = [slot for slot in slots if not slot.is_available]
    if not unavailable:
        return

    messages = [conflict_message(slot) for slot in unavailable]
    for message in messages:
        report(message)
    LOGGER.error(
        "availability.conflict",
        slot_ids=[slot.id for slot in unavailable],
    )
    raise AvailabilityConflictError([slot.id for slot in unavailable], messages)


async def select_slots(driver: BrowserDriver, slots: Sequence[TimeSlot]) -> List[SlotCheckResult]:
    """
    Tick each slot checkbox, then confirm every box actually reads as checked.

    A failed click propagates immediately. A failed read counts as unchecked.
    """
    slot_ids = [slot.id for slot in slots]
    await execute(driver, site.slot_click_actions(slot_ids), stage="slot_selection")

    results: List[SlotCheckResult] = []
    for slot_id in slot_ids:
        checked = False
        try:
            (value,) = await execute(driver, site.slot_checked_actions(slot_id), stage="slot_verification")
            checked = bool(value)
        except BrowserActionError as exc:
            LOGGER.warning("selection.read_failed", slot_id=slot_id, error=str(exc))
        results.append(SlotCheckResult(id=slot_id, checked=checked))

    failed = [result.id for result in results if not result.checked]
    if failed:
        LOGGER.error("selection.check_failed", slot_ids=failed)
        raise SlotSelectionError(failed)

    LOGGER.info("selection.verified", slot_ids=slot_ids)
    return results
