"""Configuration objects and helpers for the booking agent."""

from __future__ import annotations

from typing import List

from pydantic import Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .date_window import DEFAULT_TIMEZONE, DatePolicy, is_half_width_digit_string


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    login_url: HttpUrl = Field(..., alias="LOGIN_URL")
    login_id: str = Field(..., alias="LOGIN_ID")
    password: SecretStr = Field(..., alias="PASSWORD")
    card_number: SecretStr = Field(..., alias="CARD_NUMBER")
    security_code: SecretStr = Field(..., alias="SECURITY_CODE")

    headless: bool = Field(False, alias="HEADLESS")
    timeout_seconds: int = Field(30, alias="TIMEOUT_SECONDS", gt=0)
    slot_wait_seconds: float = Field(5.0, alias="SLOT_WAIT_SECONDS", gt=0)
    timezone: str = Field(DEFAULT_TIMEZONE, alias="TIMEZONE")
    date_policy: DatePolicy = Field(DatePolicy.WARN, alias="DATE_POLICY")

    # Reservation form
    party_size: int = Field(3, alias="PARTY_SIZE", ge=1)
    reservation_category: str = Field("0", alias="RESERVATION_CATEGORY")  # band practice
    payment_method: str = Field("3", alias="PAYMENT_METHOD")  # online payment
    equipment_ids: List[str] = Field(default_factory=lambda: ["bihin11", "bihin14"], alias="EQUIPMENT_IDS")

    # Payment form
    card_expiry_month: str = Field("10", alias="CARD_EXPIRY_MONTH")
    card_expiry_year: str = Field("26", alias="CARD_EXPIRY_YEAR")
    installment_option: str = Field("1", alias="INSTALLMENT_OPTION")  # one-time payment

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("card_expiry_month")
    @classmethod
    def check_expiry_month(cls, value: str) -> str:
        """Expiry month is the two-digit option value ``01``-``12``."""
        if len(value) != 2 or not is_half_width_digit_string(value) or not 1 <= int(value) <= 12:
            raise ValueError("card_expiry_month must be two digits between 01 and 12")
        return value

    @field_validator("card_expiry_year")
    @classmethod
    def check_expiry_year(cls, value: str) -> str:
        if len(value) != 2 or not is_half_width_digit_string(value):
            raise ValueError("card_expiry_year must be two digits")
        return value

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @property
    def timeout_ms(self) -> float:
        """Default Playwright timeout in milliseconds."""
        return self.timeout_seconds * 1000
