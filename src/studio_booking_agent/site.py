"""Markup of the studio booking site, expressed as per-stage action lists."""

from __future__ import annotations

from typing import List

from .actions import Action, Click, Evaluate, Navigate, SendKeys, SetOption, WaitAttached, WaitVisible
from .config import Settings
from .date_window import ReservationDate

BODY = "body"

# Login
LOGIN_ENTRY_BUTTON = 'input[value="ログイン"]'
MEMBER_ID_INPUT = 'input[name="in_member"]'
MEMBER_PASSWORD_INPUT = 'input[name="in_mpassword"]'
LOGIN_SUBMIT_BUTTON = 'input[name="ログイン"][type="submit"]'

# Calendar
YEAR_MONTH_SELECT = 'select.pull_160[name="Ym_select"]'
CALENDAR_UPDATE_BUTTON = 'input.btn_kousin[name="button"][type="submit"]'

# Slot table
SLOT_TABLE_ROW = "tr:nth-child(3)"

# Reservation form
OPEN_FORM_BUTTON = 'input.btn_yoyaku[name="yoyaku_btn"]'
PARTY_SIZE_INPUT = 'input[name="ninzu"]'
EQUIPMENT_TAB = 'a[href="#page5"]'
NEXT_BUTTON = 'input[type="button"][value="次へ"]'
FINAL_CONFIRM_BUTTON = 'input[type="button"][value="最終確認"]'
RESERVE_BUTTON = 'input[type="button"][value="予約する"]'
PROCEED_TO_PAYMENT_BUTTON = 'input[type="submit"][value="決済手続きへ"]'

# Payment form
CREDIT_CARD_RADIO = "input#paytype_credit"
PROCEED_BUTTON = 'input[type="submit"][value="進む"]'
INSTALLMENT_SELECT = "select#__pay_method_list"
CARD_NUMBER_INPUT = "input#Name"
EXPIRY_MONTH_SELECT = "select#__expire_month_list"
EXPIRY_YEAR_SELECT = "select#__expire_year_list"
SECURITY_CODE_INPUT = "input#SecurityCode"
CONFIRM_BUTTON = 'input[type="submit"][value="確認する"]'
PAY_BUTTON = 'input[type="submit"][value="決済する"]'


def day_button(day_key: str) -> str:
    return f'input[type="button"][name="{day_key}"]'


def slot_checkbox(slot_id: str) -> str:
    return f'{SLOT_TABLE_ROW} input[value="{slot_id}"]'


def slot_exists_script(slot_id: str) -> str:
    return f"!!document.querySelector('{slot_checkbox(slot_id)}')"


def slot_checked_script(slot_id: str) -> str:
    # Optional chaining keeps a vanished checkbox from throwing; it reads as unchecked.
    return f"!!document.querySelector('{slot_checkbox(slot_id)}')?.checked"


def reservation_category_radio(value: str) -> str:
    return f'input[name="tokutei_flg"][value="{value}"]'


def payment_method_radio(value: str) -> str:
    return f'input[name="s_pay"][value="{value}"]'


def equipment_checkbox(equipment_id: str) -> str:
    return f"input#{equipment_id}"


def login_actions(settings: Settings) -> List[Action]:
    return [
        Navigate(str(settings.login_url)),
        WaitVisible(BODY),
        Click(LOGIN_ENTRY_BUTTON),
        WaitVisible(BODY),
        SendKeys(MEMBER_ID_INPUT, settings.login_id),
        SendKeys(MEMBER_PASSWORD_INPUT, settings.password.get_secret_value(), secret=True),
        Click(LOGIN_SUBMIT_BUTTON),
    ]


def calendar_actions(reservation: ReservationDate) -> List[Action]:
    return [
        WaitVisible(BODY),
        SetOption(YEAR_MONTH_SELECT, reservation.year_month_key),
        Click(CALENDAR_UPDATE_BUTTON),
        WaitVisible(BODY),
        Click(day_button(reservation.day_key)),
    ]


def slot_probe_actions(slot_id: str, wait_seconds: float) -> List[Action]:
    """Wait for the slot table to render, then test for the slot checkbox."""
    return [WaitAttached(SLOT_TABLE_ROW, wait_seconds), Evaluate(slot_exists_script(slot_id))]


def slot_checked_actions(slot_id: str) -> List[Action]:
    return [Evaluate(slot_checked_script(slot_id))]


def slot_click_actions(slot_ids: List[str]) -> List[Action]:
    return [Click(slot_checkbox(slot_id)) for slot_id in slot_ids]


def reservation_form_actions(settings: Settings) -> List[Action]:
    """Open the form, fill it in and step through the confirmation wizard."""
    actions: List[Action] = [
        Click(OPEN_FORM_BUTTON),
        SendKeys(PARTY_SIZE_INPUT, str(settings.party_size)),
        Click(reservation_category_radio(settings.reservation_category)),
        Click(payment_method_radio(settings.payment_method)),
        Click(EQUIPMENT_TAB),
    ]
    actions.extend(Click(equipment_checkbox(item)) for item in settings.equipment_ids)
    actions.extend(
        [
            Click(NEXT_BUTTON),
            Click(FINAL_CONFIRM_BUTTON),
            Click(RESERVE_BUTTON),
            WaitVisible(PROCEED_TO_PAYMENT_BUTTON),
            Click(PROCEED_TO_PAYMENT_BUTTON),
        ]
    )
    return actions


def payment_actions(settings: Settings) -> List[Action]:
    return [
        Click(CREDIT_CARD_RADIO),
        Click(PROCEED_BUTTON),
        SetOption(INSTALLMENT_SELECT, settings.installment_option),
        SendKeys(CARD_NUMBER_INPUT, settings.card_number.get_secret_value(), secret=True),
        SetOption(EXPIRY_MONTH_SELECT, settings.card_expiry_month),
        SetOption(EXPIRY_YEAR_SELECT, settings.card_expiry_year),
        SendKeys(SECURITY_CODE_INPUT, settings.security_code.get_secret_value(), secret=True),
        Click(CONFIRM_BUTTON),
        Click(PAY_BUTTON),
    ]
