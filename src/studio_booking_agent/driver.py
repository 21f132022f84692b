"""Browser driver capability and its Playwright implementation."""

from __future__ import annotations

from typing import Any, Optional, Protocol

import structlog
from playwright.async_api import Browser, Error as PlaywrightError, Page, async_playwright

from .config import Settings
from .errors import BrowserActionError

LOGGER = structlog.get_logger(__name__)


class BrowserDriver(Protocol):
    """Page operations the reservation pipeline consumes."""

    async def navigate(self, url: str) -> None: ...

    async def wait_visible(self, selector: str) -> None: ...

    async def wait_attached(self, selector: str, timeout_seconds: float) -> None: ...

    async def click(self, selector: str) -> None: ...

    async def send_keys(self, selector: str, text: str) -> None: ...

    async def set_selected_option(self, selector: str, value: str) -> None: ...

    async def evaluate(self, script: str) -> Any: ...


class PlaywrightDriver:
    """Owns a single visible Chromium page for the whole run."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "PlaywrightDriver":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self._settings.headless)
            context = await self._browser.new_context()
            self._page = await context.new_page()
            self._page.set_default_timeout(self._settings.timeout_ms)
        except BaseException:
            await self.close()
            raise
        LOGGER.info("browser.open", headless=self._settings.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._page:
            await self._page.context.close()
            self._page = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
            LOGGER.info("browser.closed")

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Playwright page has not been initialised")
        return self._page

    async def navigate(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as exc:
            raise BrowserActionError("navigate", url, exc) from exc

    async def wait_visible(self, selector: str) -> None:
        try:
            await self.page.wait_for_selector(selector, state="visible")
        except PlaywrightError as exc:
            raise BrowserActionError("wait_visible", selector, exc) from exc

    async def wait_attached(self, selector: str, timeout_seconds: float) -> None:
        try:
            await self.page.wait_for_selector(selector, state="attached", timeout=timeout_seconds * 1000)
        except PlaywrightError as exc:
            raise BrowserActionError("wait_attached", selector, exc) from exc

    async def click(self, selector: str) -> None:
        try:
            await self.page.click(selector)
        except PlaywrightError as exc:
            raise BrowserActionError("click", selector, exc) from exc

    async def send_keys(self, selector: str, text: str) -> None:
        """Type ``text`` into the field, replacing its current value."""
        try:
            await self.page.fill(selector, text)
        except PlaywrightError as exc:
            raise BrowserActionError("send_keys", selector, exc) from exc

    async def set_selected_option(self, selector: str, value: str) -> None:
        try:
            await self.page.select_option(selector, value=value)
        except PlaywrightError as exc:
            raise BrowserActionError("set_selected_option", selector, exc) from exc

    async def evaluate(self, script: str) -> Any:
        try:
            return await self.page.evaluate(script)
        except PlaywrightError as exc:
            raise BrowserActionError("evaluate", script, exc) from exc
