# runner/browser_profile.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from . import config

class ViewportSize(BaseModel):
    width: int = config.DEFAULT_VIEWPORT_WIDTH
    height: int = config.DEFAULT_VIEWPORT_HEIGHT

class BrowserProfile(BaseModel):
    """
    Launch and context settings for the capture browser.
    """
    model_config = ConfigDict(extra='ignore')

    headless: bool = config.HEADLESS
    executable_path: Optional[str] = config.BROWSER_EXEC_PATH
    viewport: ViewportSize = Field(default_factory=ViewportSize)
    # Screenshots must map 1:1 onto CSS pixel coordinates
    device_scale_factor: float = 1
    user_agent: Optional[str] = None
    extra_args: List[str] = Field(default_factory=list)

    def get_playwright_args(self) -> List[str]:
        args = [
            '--no-sandbox',
            '--disable-infobars',
            '--disable-background-timer-throttling',
            '--disable-renderer-backgrounding',
            '--hide-scrollbars',
        ]
        args.extend(self.extra_args)
        return args

    def context_kwargs(self, viewport: Optional[ViewportSize] = None) -> Dict[str, Any]:
        kwargs = {
            "viewport": (viewport or self.viewport).model_dump(),
            "device_scale_factor": self.device_scale_factor,
            "user_agent": self.user_agent,
            "ignore_https_errors": True,
        }
        return {k: v for k, v in kwargs.items() if v is not None}
