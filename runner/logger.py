# runner/logger.py
import json
import os
from datetime import datetime, timezone
from typing import Any

LOG_LEVEL = os.getenv("SPECSHEET_LOG_LEVEL", "INFO").upper()
LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40, "CRITICAL": 50}

def _should_log(level: str) -> bool:
    return LEVELS.get(level, 20) >= LEVELS.get(LOG_LEVEL, 20)

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def log(level: str, event: str, message: str = "", **kwargs: Any) -> None:
    if not _should_log(level):
        return
    entry = {
        "ts": _now(),
        "level": level,
        "event": event,
        "message": str(message),
        "payload": kwargs
    }
    try:
        print(json.dumps(entry, default=str, ensure_ascii=False), flush=True)
    except Exception as e:
        # Fallback if something is really broken
        print(json.dumps({
            "ts": _now(),
            "level": "ERROR",
            "event": "log_serialization_error",
            "message": f"Failed to log event {event}: {str(e)}",
            "payload": {"original_message": str(message)}
        }), flush=True)

def pretty_path(path: os.PathLike) -> str:
    return str(path).replace(os.path.expanduser("~"), "~")
