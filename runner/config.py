# runner/config.py
import os

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

HEADLESS = _env_bool("SPECSHEET_HEADLESS", True)
BROWSER_EXEC_PATH = os.getenv("SPECSHEET_BROWSER_EXEC_PATH") or None

DEFAULT_VIEWPORT_WIDTH = int(os.getenv("SPECSHEET_VIEWPORT_WIDTH", "1440"))
DEFAULT_VIEWPORT_HEIGHT = int(os.getenv("SPECSHEET_VIEWPORT_HEIGHT", "900"))

NAVIGATION_TIMEOUT_MS = int(os.getenv("SPECSHEET_NAV_TIMEOUT_MS", "45000"))
NAVIGATION_RETRIES = int(os.getenv("SPECSHEET_NAV_RETRIES", "2"))
SETTLE_DELAY_MS = int(os.getenv("SPECSHEET_SETTLE_MS", "1500"))
NETWORK_IDLE_TIMEOUT_MS = int(os.getenv("SPECSHEET_NETWORK_IDLE_TIMEOUT_MS", "10000"))
POST_ACTIONS_DELAY_MS = int(os.getenv("SPECSHEET_POST_ACTIONS_MS", "1000"))

ARTIFACTS_ROOT = os.getenv("SPECSHEET_ARTIFACTS_ROOT", "/tmp/specsheet_artifacts")
PROMETHEUS_METRICS_PORT = int(os.getenv("SPECSHEET_METRICS_PORT", "9108"))
METRICS_ENABLED = _env_bool("SPECSHEET_METRICS_ENABLED", True)
