import pytest
from dotenv import load_dotenv

from gadget_e2e.core.artifacts import Artifacts
from gadget_e2e.core.playwright_factory import BrowserSession
from gadget_e2e.core.types import Scenario
from gadget_e2e.selectors import snapdeal_selectors as S

from fakes import FakeBrowser, FakeElement, FakePage, FakePlaywright, product


def pytest_addoption(parser):
    parser.addoption("--browser-kind", action="store", default=None, help="chrome / firefox / edge")


@pytest.fixture(scope="session", autouse=True)
def _load_env():
    load_dotenv()


@pytest.fixture(scope="session")
def browser_kind(pytestconfig):
    return pytestconfig.getoption("--browser-kind")


@pytest.fixture()
def artifacts(tmp_path):
    return Artifacts(base_dir=tmp_path / "screenshots")


@pytest.fixture()
def snapdeal_page():
    """
    検索 → 並び替え → 価格フィルタ → 一覧 まで一通り揃ったページ
    """
    return FakePage(
        elements={
            S.SEARCH_INPUT_SELECTOR: [FakeElement()],
            S.SORT_TRIGGER_SELECTOR: [FakeElement()],
            S.SORT_OPTIONS_SELECTOR: [FakeElement()],
            S.SORT_POPULARITY_SELECTOR: [FakeElement()],
            S.PRICE_FROM_SELECTOR: [FakeElement()],
            S.PRICE_TO_SELECTOR: [FakeElement()],
            S.PRICE_APPLY_SELECTOR: [FakeElement()],
            S.PRODUCT_TUPLE_SELECTOR: [
                product("boAt Rockerz 255", "Rs. 1,099"),
                product("Cheap buds", "Rs. 499"),
                product("JBL Tune", "Rs.  1,399"),
                product("Sony WH", "Rs. 4,990"),
                product("Noise Flair", "Rs. 700"),
                product("pTron Bassbuds", "Rs. 1,400"),
                product("Boult Z40", "Rs. 899"),
                product("Realme Buds", "Rs. 1,299"),
            ],
        },
        title="Online Shopping Site India",
    )


@pytest.fixture()
def session(snapdeal_page):
    browser = FakeBrowser(snapdeal_page)
    return BrowserSession(
        playwright=FakePlaywright(snapdeal_page),
        browser=browser,
        context=browser.context,
        page=snapdeal_page,
        kind="chrome",
        timeout_ms=50,
    )


@pytest.fixture()
def scenario():
    return Scenario(
        id="snapdeal_bluetooth_headphone",
        name="Snapdeal Bluetooth headphone top 5 (Rs. 700-1400)",
        url="https://www.snapdeal.com/",
        expected_domain="snapdeal.com",
        query="Bluetooth headphone",
        price_min=700,
        price_max=1400,
        top_count=5,
    )


@pytest.fixture()
def no_sleep(monkeypatch):
    calls = []
    monkeypatch.setattr("gadget_e2e.core.waits.time.sleep", lambda s: calls.append(s))
    return calls
