# gadget_e2e/flows/runner.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from gadget_e2e.core.artifacts import Artifacts
from gadget_e2e.core.config import Settings, load_settings
from gadget_e2e.core.logging_config import get_logger
from gadget_e2e.core.nav import navigate
from gadget_e2e.core.playwright_factory import BrowserSession, close_session, create_session
from gadget_e2e.core.types import RunReport, Scenario, StepResult
from gadget_e2e.flows import gadget_flow as G

log = get_logger(__name__)

StepAction = Callable[[BrowserSession, Artifacts], Any]


@dataclass(frozen=True)
class Step:
    name: str
    action: StepAction
    depends_on_previous: bool = True


class ScenarioRunner:
    """
    1セッションを専有して、名前付きステップを順番に流す。
    teardown は失敗しても必ず呼ぶ（execute 内の finally）。
    """

    def __init__(self, settings: Optional[Settings] = None, artifacts: Optional[Artifacts] = None):
        self.settings = settings or load_settings()
        self.artifacts = artifacts or Artifacts(base_dir=self.settings.screenshot_dir)
        self.session: Optional[BrowserSession] = None

    def initialize_session(self, browser_kind: Optional[str] = None) -> BrowserSession:
        if self.session is not None:
            raise RuntimeError("session already initialized")
        self.session = create_session(browser_kind or self.settings.browser, self.settings)
        return self.session

    def _require_session(self) -> BrowserSession:
        if self.session is None:
            raise RuntimeError("session not initialized")
        return self.session

    def navigate(self, url: str) -> None:
        navigate(self._require_session().page, url)

    def screenshot(self, label: str) -> Optional[Path]:
        if self.session is None:
            log.error("screenshot '%s' skipped: no session", label)
            return None
        return self.artifacts.screenshot(self.session.page, label)

    def teardown(self) -> None:
        if self.session is None:
            return
        session, self.session = self.session, None
        close_session(session)
        log.info("browser session closed")

    def run(self, steps: Sequence[Step]) -> RunReport:
        session = self._require_session()
        report = RunReport()
        prev_ok = True

        for step in steps:
            if step.depends_on_previous and not prev_ok:
                log.info("step %s skipped (previous step did not pass)", step.name)
                report.results.append(StepResult(name=step.name, status="skipped", message="previous step did not pass"))
                prev_ok = False
                continue

            self.artifacts.last_path = None
            try:
                out = step.action(session, self.artifacts)
            except Exception as e:
                log.error("step %s failed: %s", step.name, e)
                shot = self.artifacts.save_debug(session.page, f"FAILED_{step.name}")
                report.results.append(StepResult(name=step.name, status="failed", message=str(e), screenshot=shot))
                prev_ok = False
                continue

            log.info("step %s passed", step.name)
            report.results.append(
                StepResult(name=step.name, status="passed", screenshot=self.artifacts.last_path, output=out)
            )
            prev_ok = True

        return report

    def execute(self, steps: Sequence[Step], browser_kind: Optional[str] = None) -> RunReport:
        try:
            self.initialize_session(browser_kind)
            report = self.run(steps)
        finally:
            self.teardown()
        log.info("run finished:\n%s", report.summary())
        return report


def build_gadget_steps(sc: Scenario) -> List[Step]:
    return [
        Step("open_homepage", lambda s, a: G.open_homepage(s, a, sc.url, sc.expected_domain)),
        Step("search_product", lambda s, a: G.search(s, a, sc.query)),
        Step("sort_results", lambda s, a: G.sort_by_popularity(s, a)),
        Step("filter_by_price", lambda s, a: G.set_price_range(s, a, str(sc.price_min), str(sc.price_max))),
        Step(
            "print_top_products",
            lambda s, a: G.extract_top_products(s, a, sc.top_count, sc.price_min, sc.price_max),
        ),
    ]


def run_scenario(sc: Scenario, settings: Optional[Settings] = None, browser_kind: Optional[str] = None) -> RunReport:
    runner = ScenarioRunner(settings=settings)
    return runner.execute(build_gadget_steps(sc), browser_kind=browser_kind)
