"""Unit tests for reservation date input and validation."""
from datetime import date, datetime, timezone

import pytest

from studio_booking_agent import date_window
from studio_booking_agent.date_window import (
    BEYOND_HORIZON_MESSAGE,
    INVALID_DATE_MESSAGE,
    NON_DIGIT_MESSAGE,
    PAST_DATE_MESSAGE,
    DatePolicy,
    ReservationDate,
    booking_horizon,
    ensure_two_digits,
    is_half_width_digit_string,
    is_valid_date,
    prompt_reservation_date,
    today_in_zone,
    window_violations,
)
from studio_booking_agent.errors import DateInputError

TODAY = date(2024, 1, 15)


def scripted(*answers):
    """Build a ``read`` callable that replays answers and records prompts."""
    remaining = list(answers)
    prompts = []

    def read(prompt):
        prompts.append(prompt)
        return remaining.pop(0)

    read.prompts = prompts
    return read


class TestDigitValidation:
    """Test cases for the half-width digit check and padding."""

    @pytest.mark.parametrize("value", ["2024", "0", "07"])
    def test_accepts_ascii_digits(self, value):
        assert is_half_width_digit_string(value)

    @pytest.mark.parametrize("value", ["", "20a4", "-5", "１２", "3.0", " 3"])
    def test_rejects_other_strings(self, value):
        assert not is_half_width_digit_string(value)

    def test_ensure_two_digits(self):
        assert ensure_two_digits("3") == "03"
        assert ensure_two_digits("12") == "12"
        assert ensure_two_digits("2024") == "2024"


class TestCalendarValidity:
    """Test cases for is_valid_date."""

    def test_leap_day_in_leap_year(self):
        assert is_valid_date(2024, 2, 29)

    def test_leap_day_in_common_year(self):
        assert not is_valid_date(2023, 2, 29)

    def test_day_past_end_of_month(self):
        assert not is_valid_date(2024, 4, 31)

    @pytest.mark.parametrize("year, month, day", [(2024, 0, 1), (2024, 13, 1), (2024, 1, 0), (0, 1, 1)])
    def test_out_of_range_fields(self, year, month, day):
        assert not is_valid_date(year, month, day)


class TestBookingWindow:
    """Test cases for the booking horizon and window violations."""

    def test_horizon_is_three_months_minus_a_day(self):
        assert booking_horizon(TODAY) == date(2024, 4, 14)

    @pytest.mark.parametrize(
        "today, horizon",
        [
            (date(2024, 1, 31), date(2024, 4, 30)),
            (date(2024, 11, 30), date(2025, 3, 1)),
            (date(2023, 11, 30), date(2024, 2, 29)),
            (date(2024, 1, 1), date(2024, 3, 31)),
            (date(2024, 10, 20), date(2025, 1, 19)),
        ],
    )
    def test_horizon_rolls_over_short_months(self, today, horizon):
        assert booking_horizon(today) == horizon

    def test_rollover_date_accepted_at_month_end(self):
        assert window_violations(date(2024, 4, 30), date(2024, 1, 31)) == []
        assert window_violations(date(2024, 5, 1), date(2024, 1, 31)) == [BEYOND_HORIZON_MESSAGE]

    def test_past_date_flagged(self):
        assert window_violations(date(2024, 1, 10), TODAY) == [PAST_DATE_MESSAGE]

    def test_today_accepted(self):
        assert window_violations(TODAY, TODAY) == []

    def test_day_before_horizon_accepted(self):
        assert window_violations(date(2024, 4, 13), TODAY) == []

    def test_horizon_day_accepted(self):
        assert window_violations(date(2024, 4, 14), TODAY) == []

    def test_after_horizon_flagged(self):
        assert window_violations(date(2024, 4, 15), TODAY) == [BEYOND_HORIZON_MESSAGE]

    def test_today_uses_configured_zone(self, monkeypatch):
        class FrozenDateTime(datetime):
            @classmethod
            def now(cls, tz=None):
                # 20:00 UTC on the 14th is already 05:00 on the 15th in Tokyo
                return datetime(2024, 1, 14, 20, 0, tzinfo=timezone.utc).astimezone(tz)

        monkeypatch.setattr(date_window, "datetime", FrozenDateTime)

        assert today_in_zone("Asia/Tokyo") == date(2024, 1, 15)
        assert today_in_zone() == date(2024, 1, 15)
        assert today_in_zone("UTC") == date(2024, 1, 14)


class TestReservationDate:
    """Test cases for the site encoding of a date."""

    def test_keys_are_zero_padded(self):
        reservation = ReservationDate(year="2024", month="3", day="7")
        assert reservation.year_month_key == "202403"
        assert reservation.day_key == "07"
        assert reservation.as_date() == date(2024, 3, 7)

    def test_two_digit_values_unchanged(self):
        reservation = ReservationDate(year="2024", month="12", day="25")
        assert reservation.year_month_key == "202412"
        assert reservation.day_key == "25"


class TestPromptReservationDate:
    """Test cases for the interactive prompt."""

    def test_returns_padded_keys(self):
        output = []
        read = scripted("2024", "2", "5")

        reservation = prompt_reservation_date(today=TODAY, read=read, write=output.append)

        assert reservation.year_month_key == "202402"
        assert reservation.day_key == "05"
        assert read.prompts == ["Year: ", "Month: ", "Day: "]

    def test_reprompts_until_digits(self):
        output = []
        read = scripted("", "20a4", "2024", "-1", "3", "１", "1")

        reservation = prompt_reservation_date(today=TODAY, read=read, write=output.append)

        assert reservation == ReservationDate(year="2024", month="3", day="1")
        assert output.count(NON_DIGIT_MESSAGE) == 4
        assert read.prompts.count("Year: ") == 3

    def test_impossible_date_rejected(self):
        output = []
        with pytest.raises(DateInputError):
            prompt_reservation_date(today=TODAY, read=scripted("2024", "4", "31"), write=output.append)
        assert INVALID_DATE_MESSAGE in output

    @pytest.mark.parametrize(
        "answers",
        [
            ("99999999999999999999", "1", "1"),
            ("2024", "99999999999999999999", "1"),
            ("2024", "1", "9" * 5000),
        ],
    )
    def test_oversized_numbers_rejected(self, answers):
        output = []
        with pytest.raises(DateInputError):
            prompt_reservation_date(today=TODAY, read=scripted(*answers), write=output.append)
        assert INVALID_DATE_MESSAGE in output

    def test_closed_input_rejected(self):
        def closed(prompt):
            raise EOFError

        with pytest.raises(DateInputError):
            prompt_reservation_date(today=TODAY, read=closed, write=lambda message: None)

    def test_input_closed_midway_rejected(self):
        answers = iter(["2024", "3"])

        def read(prompt):
            try:
                return next(answers)
            except StopIteration:
                raise EOFError from None

        with pytest.raises(DateInputError):
            prompt_reservation_date(today=TODAY, read=read, write=lambda message: None)

    def test_warn_policy_reports_and_continues(self):
        output = []

        reservation = prompt_reservation_date(
            DatePolicy.WARN,
            today=TODAY,
            read=scripted("2024", "1", "10"),
            write=output.append,
        )

        assert PAST_DATE_MESSAGE in output
        assert reservation.year_month_key == "202401"
        assert reservation.day_key == "10"

    def test_warn_policy_beyond_horizon(self):
        output = []

        reservation = prompt_reservation_date(
            today=TODAY, read=scripted("2024", "6", "1"), write=output.append
        )

        assert BEYOND_HORIZON_MESSAGE in output
        assert reservation.day_key == "01"

    def test_strict_policy_rejects_past_date(self):
        output = []
        with pytest.raises(DateInputError):
            prompt_reservation_date(
                DatePolicy.STRICT,
                today=TODAY,
                read=scripted("2024", "1", "10"),
                write=output.append,
            )
        assert PAST_DATE_MESSAGE in output

    def test_strict_policy_accepts_window_date(self):
        reservation = prompt_reservation_date(
            DatePolicy.STRICT,
            today=TODAY,
            read=scripted("2024", "1", "15"),
            write=lambda message: None,
        )
        assert reservation.as_date() == TODAY
