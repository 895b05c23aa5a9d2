# diag.py
from datetime import datetime

import app_config

LOG_PATH = None


def configure(path):
    """Point the diagnostics file at `path` (None keeps print-only logging)."""
    global LOG_PATH
    LOG_PATH = path


def log(msg: str):
    print(msg)
    if not LOG_PATH:
        return
    try:
        ts = datetime.now().strftime("%H:%M:%S")
        with open(LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"{ts} {msg}\n")
    except Exception:
        pass


def vlog(msg: str):
    if app_config.DEBUG_VERBOSE:
        log(msg)
