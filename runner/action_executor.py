# runner/action_executor.py
import time
import uuid
import asyncio
from typing import Optional, Dict, Any, List, Sequence
from playwright.async_api import Page, TimeoutError as PWTimeoutError
from specsheet.config import ActionConfig
from .logger import log
from .errors import ActionExecutionError, BrowserHealthError

DEFAULT_WAIT_AFTER_MS = 200
DEFAULT_WAIT_MS = 1000
DEFAULT_SELECTOR_TIMEOUT_MS = 5000


async def pause(ms: int):
    if ms and ms > 0:
        await asyncio.sleep(ms / 1000)


class ActionExecutor:
    """
    Replays the scripted actions configured for a page before it is captured.

    Each action is logged with start/success/failure events. A failing action
    is skipped unless it is marked `required`, in which case the page fails
    with ActionExecutionError.
    """

    def __init__(self, page: Page, page_name: Optional[str] = None):
        self.page = page
        self.page_name = page_name or "unknown"
        self._action_prefix = "action"
        if not hasattr(self.page, "evaluate"):
            raise BrowserHealthError("Invalid Playwright page object passed to ActionExecutor")

    # --------------------------
    # Helpers & logging
    # --------------------------
    def _new_action_id(self) -> str:
        return uuid.uuid4().hex

    def _log_start(self, aid: str, name: str, payload: Dict[str, Any]):
        log("INFO", f"{self._action_prefix}_start", f"Action {name} start", page=self.page_name, action_id=aid, **payload)

    def _log_success(self, aid: str, name: str, payload: Dict[str, Any], duration: float):
        log("INFO", f"{self._action_prefix}_success", f"Action {name} success", page=self.page_name, action_id=aid, duration_ms=int(duration*1000), **payload)

    def _log_failure(self, aid: str, name: str, payload: Dict[str, Any], error: str, required: bool):
        level = "ERROR" if required else "WARN"
        log(level, f"{self._action_prefix}_failed", f"Action {name} failed", page=self.page_name, action_id=aid, required=required, error=error, **payload)

    # --------------------------
    # Action primitives
    # --------------------------
    async def click(self, action: ActionConfig):
        if action.selector:
            await self.page.click(action.selector)

    async def type(self, action: ActionConfig):
        if action.selector and action.value is not None:
            await self.page.fill(action.selector, str(action.value))

    async def scroll(self, action: ActionConfig):
        if action.x is not None and action.y is not None:
            await self.page.evaluate("([x, y]) => window.scrollTo(x, y)", [action.x, action.y])

    async def hover(self, action: ActionConfig):
        if action.selector:
            await self.page.hover(action.selector)

    async def select(self, action: ActionConfig):
        if action.selector and action.value is not None:
            await self.page.select_option(action.selector, action.value)

    async def wait(self, action: ActionConfig):
        await pause(action.duration or DEFAULT_WAIT_MS)

    async def wait_for_selector(self, action: ActionConfig):
        if action.selector:
            await self.page.wait_for_selector(action.selector, timeout=action.timeout or DEFAULT_SELECTOR_TIMEOUT_MS)

    async def evaluate(self, action: ActionConfig):
        if action.code:
            await self.page.evaluate(action.code)

    # --------------------------
    # Sequence execution
    # --------------------------
    def _handler(self, action_type: str):
        return {
            "click": self.click,
            "type": self.type,
            "scroll": self.scroll,
            "hover": self.hover,
            "select": self.select,
            "wait": self.wait,
            "waitForSelector": self.wait_for_selector,
            "evaluate": self.evaluate,
        }.get(action_type)

    async def execute(self, action: ActionConfig) -> Dict[str, Any]:
        aid = self._new_action_id()
        payload = {"action": action.type, "selector": action.selector}
        self._log_start(aid, action.type, payload)
        start = time.time()

        handler = self._handler(action.type)
        if handler is None:
            log("WARN", "action_unknown", f"Unknown action type: {action.type}", page=self.page_name, action_id=aid)
            return {"action_id": aid, "status": "skipped", "duration": 0.0}

        try:
            await handler(action)
            wait_after = DEFAULT_WAIT_AFTER_MS if action.wait_after is None else action.wait_after
            await pause(wait_after)
        except PWTimeoutError as te:
            self._log_failure(aid, action.type, payload, str(te), action.required)
            if action.required:
                raise ActionExecutionError(f"{action.type} timeout: {te}")
            return {"action_id": aid, "status": "failed", "duration": time.time() - start, "error": str(te)}
        except Exception as e:
            self._log_failure(aid, action.type, payload, str(e), action.required)
            if action.required:
                raise ActionExecutionError(f"{action.type} failed: {e}")
            return {"action_id": aid, "status": "failed", "duration": time.time() - start, "error": str(e)}

        duration = time.time() - start
        self._log_success(aid, action.type, payload, duration)
        return {"action_id": aid, "status": "success", "duration": duration}

    async def execute_sequence(self, actions: Sequence[ActionConfig]) -> List[Dict[str, Any]]:
        """
        Run actions in order. Returns one result dict per action; stops early
        only when a required action raises.
        """
        results = []
        for action in actions:
            res = await self.execute(action)
            results.append({"type": action.type, "result": res})
        return results
