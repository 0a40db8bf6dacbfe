# api/deps.py
from runner import config
from runner.browser_manager import BrowserManager

def get_artifacts_root() -> str:
    return config.ARTIFACTS_ROOT

def get_browser_manager() -> BrowserManager:
    return BrowserManager()
