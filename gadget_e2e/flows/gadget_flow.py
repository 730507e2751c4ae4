# gadget_e2e/flows/gadget_flow.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from playwright.sync_api import Error as PlaywrightError

from gadget_e2e.core.artifacts import Artifacts
from gadget_e2e.core.exceptions import ConditionTimeout, RecoverableFault, classify_fault
from gadget_e2e.core.logging_config import get_logger
from gadget_e2e.core.nav import is_domain_in, js_click, navigate
from gadget_e2e.core.playwright_factory import BrowserSession
from gadget_e2e.core.soft_assert import SoftAssert
from gadget_e2e.core.text import normalize_text, parse_price
from gadget_e2e.core.types import ProductRecord
from gadget_e2e.core.waits import all_visible, poll_until, wait_clickable, wait_present, wait_visible
from gadget_e2e.selectors import snapdeal_selectors as S

log = get_logger(__name__)

LISTING_POLL_TIMEOUT_SEC = 30.0
LISTING_POLL_INTERVAL_SEC = 5.0
# 同じ index の stale リトライ上限（DOM が落ち着かない場合の無限ループ防止）
STALE_RETRY_LIMIT = 10


def open_homepage(session: BrowserSession, artifacts: Artifacts, url: str, expected_domain: str) -> None:
    page = session.page
    soft = SoftAssert()

    navigate(page, url)
    log.info("Page title: %s", page.title())
    log.info("Page URL: %s", page.url)

    soft.check(
        is_domain_in(page.url, [expected_domain]),
        f"Homepage not loaded! Current URL: {page.url}",
    )
    artifacts.screenshot(page, "homepage")
    soft.assert_all()


def search(session: BrowserSession, artifacts: Artifacts, query: str) -> None:
    page = session.page
    box = wait_visible(page, S.SEARCH_INPUT_SELECTOR, session.timeout_ms)
    box.fill(query)
    box.press(S.SEARCH_SUBMIT_KEY)
    artifacts.screenshot(page, "search_results")


def sort_by_popularity(session: BrowserSession, artifacts: Artifacts) -> None:
    page = session.page
    wait_clickable(page, S.SORT_TRIGGER_SELECTOR, session.timeout_ms).click()
    wait_visible(page, S.SORT_OPTIONS_SELECTOR, session.timeout_ms)

    # 選択肢が他要素に隠れることがあるので JS で click
    popularity = wait_clickable(page, S.SORT_POPULARITY_SELECTOR, session.timeout_ms)
    js_click(popularity)
    artifacts.screenshot(page, "sorted_by_popularity")


def set_price_range(session: BrowserSession, artifacts: Artifacts, min_price: str, max_price: str) -> None:
    for v in (min_price, max_price):
        if not isinstance(v, str) or not v.isdigit():
            raise ValueError(f"price bound must be a string of digits: {v!r}")

    page = session.page
    from_val = wait_visible(page, S.PRICE_FROM_SELECTOR, session.timeout_ms)
    from_val.clear()
    from_val.fill(min_price)

    to_val = wait_visible(page, S.PRICE_TO_SELECTOR, session.timeout_ms)
    to_val.clear()
    to_val.fill(max_price)

    wait_clickable(page, S.PRICE_APPLY_SELECTOR, session.timeout_ms).click()

    wait_present(page, S.PRODUCT_TUPLE_SELECTOR, session.timeout_ms)
    artifacts.screenshot(page, "filtered_by_price")


def extract_top_products(
    session: BrowserSession,
    artifacts: Artifacts,
    count: int,
    min_price: int,
    max_price: int,
) -> List[ProductRecord]:
    """
    一覧を上から見て、価格が [min_price, max_price] に入るものを count 件まで拾う。
    stale になった index は飛ばさずに同じ index をもう一度読む。
    """
    page = session.page
    soft = SoftAssert()

    total = poll_until(
        lambda: all_visible(page, S.PRODUCT_TUPLE_SELECTOR),
        timeout_sec=LISTING_POLL_TIMEOUT_SEC,
        interval_sec=LISTING_POLL_INTERVAL_SEC,
        ignoring=(RecoverableFault.STALE_ELEMENT,),
        description="product listing visible",
    )

    records: List[ProductRecord] = []
    stale_retries: Dict[int, int] = defaultdict(int)
    i = 0
    while i < total and len(records) < count:
        try:
            # 毎回取り直す（前回の参照は再描画で無効になっている可能性がある）
            product = page.locator(S.PRODUCT_TUPLE_SELECTOR).nth(i)
            name = normalize_text(product.locator(S.PRODUCT_TITLE_SELECTOR).first.inner_text())
            price_text = normalize_text(product.locator(S.PRODUCT_PRICE_SELECTOR).first.inner_text())
        except PlaywrightError as e:
            if classify_fault(e) is not RecoverableFault.STALE_ELEMENT:
                raise
            stale_retries[i] += 1
            if stale_retries[i] > STALE_RETRY_LIMIT:
                raise ConditionTimeout(
                    f"product at index {i} still stale after {STALE_RETRY_LIMIT} retries"
                ) from e
            log.warning("Stale element at index %d, retrying...", i)
            continue

        price = parse_price(price_text)
        if min_price <= price <= max_price:
            records.append(ProductRecord(name=name, price=price))
            log.info("%d. %s - Rs. %d", len(records), name, price)
            soft.check(
                min_price <= price <= max_price,
                f"Price not in expected range for product: {name}",
            )
        i += 1

    artifacts.screenshot(page, "top_products")
    soft.assert_all()
    return records
