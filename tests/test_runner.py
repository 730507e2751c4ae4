import pytest

from gadget_e2e.core import playwright_factory as F
from gadget_e2e.core.artifacts import Artifacts
from gadget_e2e.core.config import Settings
from gadget_e2e.core.exceptions import ConditionTimeout, UnsupportedConfiguration
from gadget_e2e.core.types import ProductRecord
from gadget_e2e.flows.runner import ScenarioRunner, Step, build_gadget_steps, run_scenario
from gadget_e2e.selectors import snapdeal_selectors as S

from fakes import FakePlaywright


@pytest.fixture()
def settings(tmp_path):
    return Settings(screenshot_dir=tmp_path / "screenshots", wait_timeout_ms=50)


@pytest.fixture()
def fake_pw(monkeypatch, snapdeal_page):
    pw = FakePlaywright(snapdeal_page)
    monkeypatch.setattr(F, "sync_playwright", lambda: pw)
    return pw


def test_teardown_without_session_is_noop(settings):
    runner = ScenarioRunner(settings=settings)
    runner.teardown()
    runner.teardown()
    assert runner.session is None


def test_teardown_closes_session_once(settings, fake_pw):
    runner = ScenarioRunner(settings=settings)
    runner.initialize_session("chrome")
    runner.teardown()
    assert fake_pw.stopped
    assert runner.session is None
    runner.teardown()


def test_unsupported_browser_fails_before_run(settings, fake_pw):
    runner = ScenarioRunner(settings=settings)
    called = []
    with pytest.raises(UnsupportedConfiguration):
        runner.execute([Step("never", lambda s, a: called.append(1))], browser_kind="opera")
    assert called == []
    assert runner.session is None
    assert fake_pw.started == 0


def test_browser_kind_defaults_to_settings(tmp_path, fake_pw):
    runner = ScenarioRunner(settings=Settings(browser="firefox", screenshot_dir=tmp_path))
    runner.initialize_session()
    assert runner.session.kind == "firefox"
    assert fake_pw.firefox.launches
    runner.teardown()


def test_screenshot_without_session(settings):
    assert ScenarioRunner(settings=settings).screenshot("homepage") is None


def test_navigate_and_screenshot(settings, fake_pw):
    runner = ScenarioRunner(settings=settings)
    runner.initialize_session("chrome")
    runner.navigate("https://www.snapdeal.com/")
    assert runner.session.page.url == "https://www.snapdeal.com/"
    assert runner.screenshot("homepage").exists()
    runner.teardown()


def test_steps_run_in_order(settings, fake_pw):
    order = []
    steps = [Step(f"s{i}", lambda s, a, i=i: order.append(i) or i) for i in range(1, 6)]
    report = ScenarioRunner(settings=settings).execute(steps, browser_kind="chrome")
    assert order == [1, 2, 3, 4, 5]
    assert report.passed
    assert [r.output for r in report.results] == [1, 2, 3, 4, 5]


def test_failure_skips_dependents_and_captures_screenshot(settings, fake_pw):
    def boom(s, a):
        raise ConditionTimeout("not visible within 50ms: div.sort-drop")

    ran = []
    steps = [
        Step("one", lambda s, a: ran.append("one")),
        Step("two", boom),
        Step("three", lambda s, a: ran.append("three")),
        Step("independent", lambda s, a: ran.append("independent"), depends_on_previous=False),
    ]
    report = ScenarioRunner(settings=settings).execute(steps, browser_kind="chrome")

    assert ran == ["one", "independent"]
    assert [r.status for r in report.results] == ["passed", "failed", "skipped", "passed"]
    assert not report.passed
    failed = report.failed[0]
    assert "div.sort-drop" in failed.message
    assert failed.screenshot is not None
    assert failed.screenshot.name.startswith("FAILED_two_")
    assert list(settings.screenshot_dir.glob("FAILED_two_*.html"))
    # 失敗してもセッションは閉じる
    assert fake_pw.stopped


def test_teardown_runs_when_step_raises_base_exception(settings, fake_pw):
    def interrupt(s, a):
        raise KeyboardInterrupt

    runner = ScenarioRunner(settings=settings)
    with pytest.raises(KeyboardInterrupt):
        runner.execute([Step("interrupt", interrupt)], browser_kind="chrome")
    assert fake_pw.stopped
    assert runner.session is None


def test_step_result_records_last_screenshot(settings, fake_pw):
    steps = [Step("shot", lambda s, a: a.screenshot(s.page, "homepage"))]
    report = ScenarioRunner(settings=settings).execute(steps, browser_kind="chrome")
    assert report.results[0].screenshot.name.startswith("homepage_")


def test_gadget_scenario_end_to_end(settings, fake_pw, snapdeal_page, scenario, no_sleep):
    report = run_scenario(scenario, settings=settings, browser_kind="chrome")

    assert report.passed, report.summary()
    assert [r.name for r in report.results] == [
        "open_homepage",
        "search_product",
        "sort_results",
        "filter_by_price",
        "print_top_products",
    ]
    assert "snapdeal.com" in snapdeal_page.url
    assert snapdeal_page.elements[S.SEARCH_INPUT_SELECTOR][0].events[0] == "fill:Bluetooth headphone"

    records = report.results[-1].output
    assert 0 < len(records) <= 5
    assert all(isinstance(r, ProductRecord) and 700 <= r.price <= 1400 for r in records)

    names = {p.name.rsplit("_", 2)[0] for p in settings.screenshot_dir.glob("*.png")}
    assert names == {"homepage", "search_results", "sorted_by_popularity", "filtered_by_price", "top_products"}


def test_gadget_scenario_stops_after_search_failure(settings, fake_pw, snapdeal_page, scenario):
    del snapdeal_page.elements[S.SEARCH_INPUT_SELECTOR]
    report = run_scenario(scenario, settings=settings, browser_kind="chrome")
    assert [r.status for r in report.results] == ["passed", "failed", "skipped", "skipped", "skipped"]
    assert list(settings.screenshot_dir.glob("FAILED_search_product_*.png"))


def test_build_gadget_steps_all_depend_on_previous(scenario):
    steps = build_gadget_steps(scenario)
    assert len(steps) == 5
    assert all(s.depends_on_previous for s in steps)


def test_runner_uses_given_artifacts(tmp_path, fake_pw):
    a = Artifacts(base_dir=tmp_path / "custom")
    runner = ScenarioRunner(settings=Settings(screenshot_dir=tmp_path / "unused"), artifacts=a)
    runner.execute([Step("shot", lambda s, art: art.screenshot(s.page, "x"))], browser_kind="edge")
    assert list((tmp_path / "custom").glob("x_*.png"))
    assert not (tmp_path / "unused").exists()


def test_default_settings_come_from_environment(tmp_path, monkeypatch, fake_pw):
    monkeypatch.setenv("E2E_BROWSER", "firefox")
    monkeypatch.setenv("PW_HEADLESS", "1")
    monkeypatch.setenv("E2E_WAIT_TIMEOUT_MS", "1234")
    monkeypatch.setenv("SCREENSHOT_DIR", str(tmp_path / "from_env"))

    runner = ScenarioRunner()
    assert runner.settings.browser == "firefox"
    assert runner.artifacts.base_dir == tmp_path / "from_env"

    runner.initialize_session()
    assert runner.session.kind == "firefox"
    assert runner.session.timeout_ms == 1234
    assert fake_pw.firefox.launches[0]["headless"] is True
    runner.teardown()
