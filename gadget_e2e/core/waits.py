from __future__ import annotations

import time
from typing import Callable, Iterable, TypeVar

from playwright.sync_api import Locator, Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from gadget_e2e.core.exceptions import ConditionTimeout, RecoverableFault, classify_fault
from gadget_e2e.core.logging_config import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def wait_visible(page: Page, selector: str, timeout_ms: int) -> Locator:
    loc = page.locator(selector).first
    try:
        loc.wait_for(state="visible", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise ConditionTimeout(f"not visible within {timeout_ms}ms: {selector}") from e
    return loc


def wait_present(page: Page, selector: str, timeout_ms: int) -> Locator:
    """1件以上 DOM にあればOK（表示は問わない）"""
    loc = page.locator(selector)
    try:
        loc.first.wait_for(state="attached", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise ConditionTimeout(f"not present within {timeout_ms}ms: {selector}") from e
    return loc


def wait_clickable(page: Page, selector: str, timeout_ms: int, interval_sec: float = 0.2) -> Locator:
    """
    表示 + enabled になるまで待つ。
    """
    end = time.time() + timeout_ms / 1000
    loc = wait_visible(page, selector, timeout_ms)
    while True:
        try:
            if loc.is_enabled():
                return loc
        except PlaywrightError as e:
            if classify_fault(e) is None:
                raise
        if time.time() >= end:
            raise ConditionTimeout(f"not clickable within {timeout_ms}ms: {selector}")
        time.sleep(interval_sec)


def poll_until(
    predicate: Callable[[], T],
    timeout_sec: float = 30.0,
    interval_sec: float = 5.0,
    ignoring: Iterable[RecoverableFault] = (RecoverableFault.STALE_ELEMENT,),
    description: str = "condition",
) -> T:
    """
    predicate が truthy を返すまで interval ごとに叩く。
    ignoring に含まれる fault はその回だけ無視して続行、それ以外は即 raise。
    """
    ignored = set(ignoring)
    end = time.time() + timeout_sec
    while True:
        try:
            value = predicate()
            if value:
                return value
        except Exception as e:
            if classify_fault(e) not in ignored:
                raise
            log.debug("ignored transient fault while polling %s: %s", description, e)
        if time.time() >= end:
            raise ConditionTimeout(f"{description} not met within {timeout_sec}s")
        time.sleep(interval_sec)


def all_visible(page: Page, selector: str) -> int:
    """全件 visible なら件数、そうでなければ 0"""
    loc = page.locator(selector)
    n = loc.count()
    if n < 1:
        return 0
    for i in range(n):
        if not loc.nth(i).is_visible():
            return 0
    return n
