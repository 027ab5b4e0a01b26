from __future__ import annotations

import logging
import time
from collections.abc import MutableMapping
from typing import Any

from pydantic import ValidationError

from .models import QuizSessionState

logger = logging.getLogger(__name__)

SESSION_KEY = "camp_quiz_session_v1"
SESSION_EXPIRY_SECONDS = 7 * 24 * 60 * 60


class SessionRepository:
    """
    Resume-on-reload storage for one visitor's quiz state.

    Backed by any mutable mapping; the app passes the Starlette cookie
    session. The recommendation engine never reads or writes this.
    """

    def __init__(
        self,
        backing: MutableMapping[str, Any],
        key: str = SESSION_KEY,
        expiry_seconds: int = SESSION_EXPIRY_SECONDS,
    ) -> None:
        self._backing = backing
        self._key = key
        self._expiry_seconds = expiry_seconds

    def load(self, now: float | None = None) -> QuizSessionState | None:
        raw = self._backing.get(self._key)
        if not raw:
            return None
        try:
            state = QuizSessionState.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable quiz session", exc_info=True)
            self.clear()
            return None

        now = time.time() if now is None else now
        if now - state.last_updated > self._expiry_seconds:
            self.clear()
            return None
        return state

    def save(self, state: QuizSessionState) -> None:
        self._backing[self._key] = state.model_dump(mode="json")

    def clear(self) -> None:
        self._backing.pop(self._key, None)
