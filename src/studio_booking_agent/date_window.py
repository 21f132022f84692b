"""Collection and validation of the reservation date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, List

import structlog
from dateutil.relativedelta import relativedelta
from zoneinfo import ZoneInfo

from .errors import DateInputError

LOGGER = structlog.get_logger(__name__)

DEFAULT_TIMEZONE = "Asia/Tokyo"
BOOKING_HORIZON_MONTHS = 3

NON_DIGIT_MESSAGE = "Please enter half-width digits only."
INVALID_DATE_MESSAGE = "Invalid date. Please enter a real calendar date."
PAST_DATE_MESSAGE = "You cannot enter a date in the past."
BEYOND_HORIZON_MESSAGE = "You cannot enter a date more than 3 months ahead."


class DatePolicy(str, Enum):
    """What to do when the date falls outside the booking window."""

    WARN = "warn"
    STRICT = "strict"


@dataclass(frozen=True)
class ReservationDate:
    """Date entered by the operator, kept as the raw digit strings."""

    year: str
    month: str
    day: str

    @property
    def year_month_key(self) -> str:
        """Value of the calendar's year-month option, e.g. ``202403``."""
        return self.year + ensure_two_digits(self.month)

    @property
    def day_key(self) -> str:
        """Name of the calendar cell button, e.g. ``07``."""
        return ensure_two_digits(self.day)

    def as_date(self) -> date:
        return date(int(self.year), int(self.month), int(self.day))


def is_half_width_digit_string(value: str) -> bool:
    """True for a non-empty string made of ASCII ``0-9`` only."""
    return bool(value) and all("0" <= char <= "9" for char in value)


def ensure_two_digits(value: str) -> str:
    if len(value) == 1:
        return "0" + value
    return value


def is_valid_date(year: int, month: int, day: int) -> bool:
    """True when the three numbers name a real Gregorian date."""
    try:
        date(year, month, day)
    except (ValueError, OverflowError):
        return False
    return True


def today_in_zone(timezone_name: str = DEFAULT_TIMEZONE) -> date:
    """Current civil date at the site's location rather than the host's."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()


def booking_horizon(today: date) -> date:
    """
    Last bookable date: three calendar months ahead, minus one day.

    The day offset is applied to the unclamped month shift, so a day past the
    end of the target month rolls into the next one: Jan 31 gives Apr 30 and
    Nov 30 gives Mar 1.
    """
    first_of_target = today.replace(day=1) + relativedelta(months=BOOKING_HORIZON_MONTHS)
    return first_of_target + timedelta(days=today.day - 2)


def window_violations(requested: date, today: date) -> List[str]:
    """
    Return messages for every booking-window rule ``requested`` breaks.

    The window is inclusive on both ends: ``today`` itself and the horizon date
    are both accepted.
    """
    violations: List[str] = []
    if requested < today:
        violations.append(PAST_DATE_MESSAGE)
    if requested > booking_horizon(today):
        violations.append(BEYOND_HORIZON_MESSAGE)
    return violations


def prompt_digits(
    prompt_text: str,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> str:
    """Prompt until the operator enters a half-width digit string."""
    while True:
        try:
            value = read(prompt_text).strip()
        except EOFError as exc:
            raise DateInputError("Input closed before a date was entered") from exc
        if is_half_width_digit_string(value):
            return value
        write(NON_DIGIT_MESSAGE)


def prompt_reservation_date(
    policy: DatePolicy = DatePolicy.WARN,
    *,
    today: date | None = None,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> ReservationDate:
    """
    Ask for year, month and day and validate the result.

    An impossible calendar date always raises ``DateInputError``. Dates outside
    the booking window are reported; under ``DatePolicy.WARN`` the date is
    still returned, under ``DatePolicy.STRICT`` it is rejected.
    """
    write("Enter the reservation date (half-width digits only).")
    year = prompt_digits("Year: ", read=read, write=write)
    month = prompt_digits("Month: ", read=read, write=write)
    day = prompt_digits("Day: ", read=read, write=write)

    reservation = ReservationDate(year=year, month=month, day=day)

    try:
        valid = is_valid_date(int(year), int(month), int(day))
    except ValueError:
        # digit strings past the interpreter's int conversion limit
        valid = False
    if not valid:
        write(INVALID_DATE_MESSAGE)
        LOGGER.error("date.invalid", year=year, month=month, day=day)
        raise DateInputError(f"{year}-{month}-{day} is not a calendar date")

    today = today or today_in_zone()
    requested = reservation.as_date()
    violations = window_violations(requested, today)
    for message in violations:
        write(message)
    if violations:
        LOGGER.warning(
            "date.outside_window",
            requested=requested.isoformat(),
            today=today.isoformat(),
            horizon=booking_horizon(today).isoformat(),
            policy=policy.value,
        )
        if policy is DatePolicy.STRICT:
            raise DateInputError(" ".join(violations))

    LOGGER.info(
        "date.accepted",
        year_month=reservation.year_month_key,
        day=reservation.day_key,
    )
    return reservation
