from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, cast

from playwright.sync_api import sync_playwright, Browser, BrowserContext, Page, Playwright

from gadget_e2e.core.config import Settings
from gadget_e2e.core.exceptions import UnsupportedConfiguration
from gadget_e2e.core.logging_config import get_logger
from gadget_e2e.core.types import BrowserKind

log = get_logger(__name__)

# kind -> (engine名, channel)
BROWSER_ENGINES: Dict[str, tuple] = {
    "chrome": ("chromium", None),
    "firefox": ("firefox", None),
    "edge": ("chromium", "msedge"),
}

MAXIMIZED_VIEWPORT = {"width": 1920, "height": 1080}


@dataclass
class BrowserSession:
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    kind: BrowserKind
    timeout_ms: int = 20000


def resolve_browser_kind(kind: Optional[str]) -> BrowserKind:
    k = (kind or "").strip().lower()
    if k not in BROWSER_ENGINES:
        raise UnsupportedConfiguration(f"Unsupported browser: {kind}")
    return cast(BrowserKind, k)


def create_session(kind: str, settings: Optional[Settings] = None) -> BrowserSession:
    """
    ブラウザ起動 → ウィンドウ最大化 → cookie 全削除 → 待機タイムアウト統一。
    種別チェックは Playwright を起動する前にやる（不正ならセッションは作らない）。
    """
    settings = settings or Settings()
    k = resolve_browser_kind(kind)
    engine_name, channel = BROWSER_ENGINES[k]

    launch_kwargs: Dict[str, Any] = {"headless": settings.headless, "slow_mo": settings.slow_mo_ms}
    if channel:
        launch_kwargs["channel"] = channel

    context_kwargs: Dict[str, Any] = {}
    if not settings.headless and engine_name == "chromium":
        # chromium は起動引数で最大化できる
        launch_kwargs["args"] = ["--start-maximized"]
        context_kwargs["no_viewport"] = True
    else:
        # headless と firefox は最大化が効かないので画面サイズで固定
        context_kwargs["viewport"] = MAXIMIZED_VIEWPORT
        context_kwargs["screen"] = MAXIMIZED_VIEWPORT

    pw = sync_playwright().start()
    browser = None
    try:
        engine = getattr(pw, engine_name)
        browser = engine.launch(**launch_kwargs)
        context = browser.new_context(**context_kwargs)
        context.clear_cookies()
        context.set_default_timeout(settings.wait_timeout_ms)
        context.set_default_navigation_timeout(settings.nav_timeout_ms)
        page = context.new_page()
    except Exception:
        if browser is not None:
            try:
                browser.close()
            except Exception as e:
                log.warning("browser close failed: %s", e)
        pw.stop()
        raise

    log.info("browser session started: kind=%s engine=%s headless=%s", k, engine_name, settings.headless)
    return BrowserSession(
        playwright=pw,
        browser=browser,
        context=context,
        page=page,
        kind=k,
        timeout_ms=settings.wait_timeout_ms,
    )


def close_session(session: BrowserSession) -> None:
    try:
        session.context.close()
    except Exception as e:
        log.warning("context close failed: %s", e)
    try:
        session.browser.close()
    except Exception as e:
        log.warning("browser close failed: %s", e)
    try:
        session.playwright.stop()
    except Exception as e:
        log.warning("playwright stop failed: %s", e)
