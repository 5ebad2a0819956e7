"""Server health utilities.

Provides a simple `get_health` function returning server status, start
time, uptime in seconds and the session store in use.
"""
from datetime import datetime, timezone
import time
from typing import Optional

# record process start time at import
_START_TIME = time.time()


def get_health(store_name: Optional[str] = None) -> dict:
    """Return a dict representing server health.

    Fields:
    - status: 'ok'
    - start_time: ISO 8601 UTC timestamp when the process started
    - uptime_seconds: integer seconds since start
    - store: name of the configured session store
    """
    now = time.time()
    start_dt = datetime.fromtimestamp(_START_TIME, tz=timezone.utc)
    return {
        "status": "ok",
        "start_time": start_dt.isoformat(),
        "uptime_seconds": int(now - _START_TIME),
        "store": store_name,
    }
