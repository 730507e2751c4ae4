from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_true(name: str) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    return v in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = (os.getenv(name) or "").strip()
    return int(v) if v else default


@dataclass(frozen=True)
class Settings:
    browser: str = "chrome"
    headless: bool = False
    slow_mo_ms: int = 0
    wait_timeout_ms: int = 20000
    nav_timeout_ms: int = 45000
    screenshot_dir: Path = Path("screenshots")
    scenarios_path: Path = Path("scenarios/scenarios.yaml")


def load_settings(dotenv: bool = True) -> Settings:
    """
    .env → 環境変数の順で読む。
    PW_HEADLESS 未指定なら CI のときだけ headless。
    """
    if dotenv:
        load_dotenv()

    is_ci = _env_true("CI")
    headless = _env_true("PW_HEADLESS") if os.getenv("PW_HEADLESS") is not None else is_ci

    return Settings(
        browser=(os.getenv("E2E_BROWSER") or "chrome").strip(),
        headless=headless,
        slow_mo_ms=_env_int("PW_SLOWMO_MS", 0),
        wait_timeout_ms=_env_int("E2E_WAIT_TIMEOUT_MS", 20000),
        nav_timeout_ms=_env_int("E2E_NAV_TIMEOUT_MS", 45000),
        screenshot_dir=Path(os.getenv("SCREENSHOT_DIR", "screenshots")),
        scenarios_path=Path(os.getenv("E2E_SCENARIOS", "scenarios/scenarios.yaml")),
    )


def live_enabled() -> bool:
    return _env_true("E2E_LIVE")
