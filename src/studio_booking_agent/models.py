"""Shared data models used across the booking agent."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


@dataclass
class TimeSlot:
    """A 30-minute block on the studio's slot table."""

    id: str
    display_range: str
    is_available: bool = False


@dataclass(frozen=True)
class SlotCheckResult:
    """Checked state of a slot checkbox after the click stage."""

    id: str
    checked: bool


class PipelineState(str, Enum):
    """Forward-only states of a reservation run."""

    IDLE = "idle"
    AUTHENTICATED = "authenticated"
    DATE_SELECTED = "date_selected"
    AVAILABILITY_VERIFIED = "availability_verified"
    SLOTS_SELECTED = "slots_selected"
    FORM_FILLED = "form_filled"
    PAID = "paid"
    FAILED = "failed"


DESIRED_SLOTS = (
    ("0230", "20:30 ~ 21:00"),
    ("0231", "21:00 ~ 21:30"),
    ("0232", "21:30 ~ 22:00"),
    ("0233", "22:00 ~ 22:30"),
)


def default_slots() -> List[TimeSlot]:
    """Fresh list of the slots to book, in booking order."""
    return [TimeSlot(id=slot_id, display_range=label) for slot_id, label in DESIRED_SLOTS]
