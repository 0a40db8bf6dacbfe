# runner/browser_manager.py
import traceback
from typing import Optional
from playwright.async_api import async_playwright, Playwright, Browser, BrowserContext
from . import config, logger, errors, metrics
from .browser_profile import BrowserProfile, ViewportSize

class BrowserManager:
    """
    Owns the Playwright Chromium instance for one run and hands out a fresh,
    isolated context per page.
    """

    def __init__(self, profile: Optional[BrowserProfile] = None):
        self.profile = profile or BrowserProfile()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    # -------------------------
    # Lifecycle: start / stop
    # -------------------------
    async def start(self):
        if self._browser:
            return
        try:
            launch_args = self.profile.get_playwright_args()
            logger.log("INFO", "bm_launch", "Launching Playwright + Chromium",
                       headless=self.profile.headless,
                       exec_path=self.profile.executable_path,
                       args=launch_args)
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.profile.headless,
                executable_path=self.profile.executable_path,
                args=launch_args,
            )
            metrics.BROWSER_UP.set(1)
            if config.METRICS_ENABLED:
                metrics.start_metrics_server(config.PROMETHEUS_METRICS_PORT)
            logger.log("INFO", "bm_launched", "Chromium launched")
        except Exception as e:
            logger.log("ERROR", "bm_launch_error", "Failed to launch browser", error=str(e), tb=traceback.format_exc())
            metrics.BROWSER_UP.set(0)
            await self.stop()
            raise errors.BrowserStartError(str(e))

    async def stop(self):
        if self._browser:
            logger.log("INFO", "bm_browser_close", "Closing browser process")
            try:
                await self._browser.close()
            except Exception as e:
                logger.log("WARN", "bm_browser_close_err", "Error while closing browser", error=str(e))
            self._browser = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.log("WARN", "bm_playwright_stop_err", "Error while stopping playwright", error=str(e))
            self._playwright = None
        metrics.BROWSER_UP.set(0)

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    # -------------------------
    # Context factory for pages
    # -------------------------
    async def new_context(self, viewport: Optional[ViewportSize] = None, **kwargs) -> BrowserContext:
        """
        Create and return an isolated browser context.
        Raises BrowserHealthError if browser is not available.
        """
        if not self._browser:
            raise errors.BrowserHealthError("Browser not started")

        context_kwargs = {**self.profile.context_kwargs(viewport), **kwargs}
        try:
            ctx = await self._browser.new_context(**context_kwargs)
            logger.log("DEBUG", "bm_new_context", "Created new browser context", viewport=context_kwargs.get("viewport"))
            return ctx
        except Exception as e:
            logger.log("ERROR", "bm_new_context_error", "Failed to create context", error=str(e), tb=traceback.format_exc())
            raise errors.BrowserHealthError(str(e))
