"""Shared fixtures: settings and a recording fake browser driver."""
from typing import Any, Dict, Iterable, Optional, Set, Tuple

import pytest

from studio_booking_agent.config import Settings
from studio_booking_agent.errors import BrowserActionError


class FakeDriver:
    """Browser driver double that records every call in order.

    ``evaluations`` maps a script to the value it returns; unknown scripts
    evaluate to True. ``failures`` holds ``(method, target)`` pairs that raise
    ``BrowserActionError``; ``raises`` maps such pairs to any other exception.
    """

    def __init__(
        self,
        evaluations: Optional[Dict[str, Any]] = None,
        failures: Iterable[Tuple[str, str]] = (),
        raises: Optional[Dict[Tuple[str, str], BaseException]] = None,
    ):
        self.calls = []
        self.evaluations = dict(evaluations or {})
        self.failures: Set[Tuple[str, str]] = set(failures)
        self.raises = dict(raises or {})
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    def _record(self, method, target, *args):
        self.calls.append((method, target, *args))
        if (method, target) in self.raises:
            raise self.raises[(method, target)]
        if (method, target) in self.failures:
            raise BrowserActionError(method, target)

    async def navigate(self, url):
        self._record("navigate", url)

    async def wait_visible(self, selector):
        self._record("wait_visible", selector)

    async def wait_attached(self, selector, timeout_seconds):
        self._record("wait_attached", selector, timeout_seconds)

    async def click(self, selector):
        self._record("click", selector)

    async def send_keys(self, selector, text):
        self._record("send_keys", selector, text)

    async def set_selected_option(self, selector, value):
        self._record("set_selected_option", selector, value)

    async def evaluate(self, script):
        self._record("evaluate", script)
        return self.evaluations.get(script, True)

    def methods(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def settings():
    """Settings built explicitly so the host environment cannot leak in."""
    return Settings(
        _env_file=None,
        LOGIN_URL="https://studio.example.jp/login",
        LOGIN_ID="member01",
        PASSWORD="secret-pass",
        CARD_NUMBER="4111111111111111",
        SECURITY_CODE="123",
        HEADLESS=True,
        TIMEZONE="Asia/Tokyo",
        SLOT_WAIT_SECONDS=5,
    )


@pytest.fixture
def driver():
    return FakeDriver()
