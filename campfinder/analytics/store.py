from __future__ import annotations

import logging
import time
from collections import deque
from typing import Any

logger = logging.getLogger(__name__)

# Oldest events are dropped once the log is full.
MAX_EVENTS = 5000

_events: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)


def record_event(event: str, data: dict[str, Any] | None = None) -> None:
    logger.debug("[Quiz Analytics] %s %s", event, data)
    _events.append({
        "event": event,
        "timestamp": time.time(),
        "metadata": dict(data or {}),
    })


def get_events(event: str | None = None) -> list[dict[str, Any]]:
    """Recorded events, oldest first, optionally only those named ``event``."""
    if event is None:
        return list(_events)
    return [e for e in _events if e["event"] == event]


def clear_events() -> None:
    _events.clear()
