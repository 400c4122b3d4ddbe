from __future__ import annotations

import threading
import time
from typing import Any, Dict, Optional, Tuple

# name -> (timestamp, data). Process memory only; nothing is written to disk.
_CACHE: Dict[str, Tuple[float, Any]] = {}
_LOCK = threading.Lock()


def load_cache(name: str, max_age_seconds: int) -> Optional[Any]:
    with _LOCK:
        entry = _CACHE.get(name)
    if entry is None:
        return None

    ts, data = entry
    age = time.time() - ts
    if age > max_age_seconds:
        with _LOCK:
            # Only drop it if nobody saved a fresh copy in the meantime.
            if _CACHE.get(name) is entry:
                del _CACHE[name]
        return None

    return data


def save_cache(name: str, data: Any) -> None:
    with _LOCK:
        _CACHE[name] = (time.time(), data)


def clear_cache() -> None:
    with _LOCK:
        _CACHE.clear()
