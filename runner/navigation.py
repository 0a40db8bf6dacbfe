# runner/navigation.py
from urllib.parse import urljoin
from playwright.async_api import Page, TimeoutError as PWTimeoutError
from . import config
from .action_executor import pause
from .errors import NavigationError
from .logger import log
from .retry import async_retry

GRAPH_SELECTOR = 'svg, canvas'
TABLE_SELECTOR = 'table, [role="table"]'


def page_url(base_url: str, path: str) -> str:
    return urljoin(base_url, path or "/")


@async_retry(
    retries=config.NAVIGATION_RETRIES,
    delay=1.0,
    exceptions=(PWTimeoutError,),
    describe=lambda page, url: {"url": url},
)
async def _goto(page: Page, url: str):
    await page.goto(url, wait_until="load", timeout=config.NAVIGATION_TIMEOUT_MS)


async def open_page(page: Page, url: str):
    """
    Navigate and let the page settle: DOM ready, a fixed settle delay, then a
    bounded wait for network idle. A network that never idles is tolerated.
    """
    log("INFO", "nav_start", "Navigating", url=url)
    try:
        await _goto(page, url)
    except Exception as e:
        log("ERROR", "nav_failed", "Navigation failed", url=url, error=str(e))
        raise NavigationError(f"navigate to {url} failed: {e}")

    await pause(config.SETTLE_DELAY_MS)
    try:
        await page.wait_for_load_state("networkidle", timeout=config.NETWORK_IDLE_TIMEOUT_MS)
    except PWTimeoutError:
        log("DEBUG", "nav_networkidle_timeout", "Network did not go idle, continuing", url=url)
    log("INFO", "nav_done", "Page ready", url=url)


async def _wait_for_content(page: Page, selector: str, timeout_ms: int, found_ms: int, fallback_ms: int):
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
        await pause(found_ms)
    except PWTimeoutError:
        await pause(fallback_ms)


async def wait_by_strategy(page: Page, strategy: str = "basic"):
    """Extra wait tailored to the kind of content the page renders."""
    log("DEBUG", "wait_strategy", "Applying wait strategy", strategy=strategy)
    if strategy == "graph":
        await _wait_for_content(page, GRAPH_SELECTOR, 10000, 3000, 5000)
    elif strategy == "table":
        await _wait_for_content(page, TABLE_SELECTOR, 5000, 2000, 3000)
    elif strategy == "live":
        await pause(4000)
    elif strategy == "video":
        await pause(3000)
    else:
        await pause(2000)
