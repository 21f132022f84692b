"""Typed browser action descriptors and the executor that replays them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Union

import structlog

from .driver import BrowserDriver

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Navigate:
    url: str


@dataclass(frozen=True)
class WaitVisible:
    selector: str


@dataclass(frozen=True)
class WaitAttached:
    selector: str
    timeout_seconds: float


@dataclass(frozen=True)
class Click:
    selector: str


@dataclass(frozen=True)
class SendKeys:
    selector: str
    text: str
    secret: bool = False


@dataclass(frozen=True)
class SetOption:
    selector: str
    value: str


@dataclass(frozen=True)
class Evaluate:
    script: str


Action = Union[Navigate, WaitVisible, WaitAttached, Click, SendKeys, SetOption, Evaluate]


def describe(action: Action) -> dict[str, Any]:
    """Loggable view of an action with secret text redacted."""
    fields = {"action": type(action).__name__}
    fields.update(vars(action))
    if isinstance(action, SendKeys):
        fields.pop("secret")
        if action.secret:
            fields["text"] = "********"
    return fields


async def execute(driver: BrowserDriver, actions: Sequence[Action], *, stage: str) -> List[Any]:
    """
    Run ``actions`` in order against ``driver``.

    Returns the results of the ``Evaluate`` actions in the order they ran. The
    first failing action propagates its ``BrowserActionError`` and the remaining
    actions are not attempted.
    """
    results: List[Any] = []
    for index, action in enumerate(actions):
        LOGGER.debug("action.run", stage=stage, step=index, **describe(action))
        if isinstance(action, Navigate):
            await driver.navigate(action.url)
        elif isinstance(action, WaitVisible):
            await driver.wait_visible(action.selector)
        elif isinstance(action, WaitAttached):
            await driver.wait_attached(action.selector, action.timeout_seconds)
        elif isinstance(action, Click):
            await driver.click(action.selector)
        elif isinstance(action, SendKeys):
            await driver.send_keys(action.selector, action.text)
        elif isinstance(action, SetOption):
            await driver.set_selected_option(action.selector, action.value)
        elif isinstance(action, Evaluate):
            results.append(await driver.evaluate(action.script))
        else:
            raise TypeError(f"Unsupported action: {action!r}")
    return results
