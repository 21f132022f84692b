"""Exception hierarchy for the booking agent."""

from __future__ import annotations

from typing import Optional, Sequence


class BookingError(Exception):
    """Base class for every fatal condition raised by the agent."""


class ConfigurationError(BookingError):
    """Settings are missing or invalid."""


class DateInputError(BookingError):
    """The reservation date cannot be used."""


class BrowserActionError(BookingError):
    """A browser operation failed."""

    def __init__(self, action: str, target: Optional[str], cause: Optional[BaseException] = None):
        self.action = action
        self.target = target
        self.cause = cause
        detail = f"{action} failed"
        if target:
            detail += f" for {target!r}"
        if cause is not None:
            detail += f": {cause}"
        super().__init__(detail)


class AvailabilityConflictError(BookingError):
    """One or more desired slots were booked by another user."""

    def __init__(self, slot_ids: Sequence[str], messages: Sequence[str]):
        self.slot_ids = list(slot_ids)
        self.messages = list(messages)
        super().__init__(
            f"Slots already booked by another user: {', '.join(self.slot_ids)}"
        )


class SlotSelectionError(BookingError):
    """A slot checkbox did not register as checked after clicking it."""

    def __init__(self, slot_ids: Sequence[str]):
        self.slot_ids = list(slot_ids)
        super().__init__(f"Slot check failed for: {', '.join(self.slot_ids)}")


class PipelineStateError(BookingError):
    """An illegal pipeline state transition was attempted."""
