from __future__ import annotations

from typing import Iterable

from playwright.sync_api import Locator, Page


def is_domain_in(url: str, domains: Iterable[str]) -> bool:
    u = (url or "").lower()
    return any(d.lower() in u for d in domains)


def navigate(page: Page, url: str) -> None:
    """失敗はそのまま上に投げる（リトライしない）"""
    page.goto(url, wait_until="domcontentloaded")


def js_click(locator: Locator) -> None:
    """
    ネイティブ click だと被り要素に取られることがあるので、
    DOM 側で直接 click イベントを発火させる。
    """
    locator.evaluate("el => el.click()")
