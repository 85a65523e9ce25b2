# src/storage/session_store.py

"""In-memory conversation store with idle-time eviction."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from src.config.settings import Settings

logger = logging.getLogger("food_finder.sessions")


@dataclass
class Conversation:
    """One chat session's state."""

    history: list[dict[str, str]] = field(
        default_factory=lambda: list[dict[str, str]]()
    )
    last_activity: float = 0.0
    last_food_items: list[str] = field(
        default_factory=lambda: list[str]()
    )
    language: str = "en"

    def add_message(self, role: str, content: str, limit: int) -> None:
        """Append a message, keeping only the newest *limit* entries."""
        self.history.append({"role": role, "content": content})
        if len(self.history) > limit:
            del self.history[:-limit]


class SessionStore:
    """Keyed conversation store owned by the application, not the module.

    Entries idle for longer than ``ttl`` seconds are evicted whenever
    the store is accessed, or explicitly via :meth:`evict_expired`.
    Route handlers reach the store from worker threads, so every access
    holds ``_lock``.
    """

    def __init__(
        self,
        ttl: float = Settings.SESSION_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._conversations)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._conversations

    def get(self, session_id: str) -> Conversation | None:
        """Return the live conversation and refresh its activity time."""
        with self._lock:
            return self._lookup(session_id, self._clock())

    def get_or_create(
        self, session_id: str, language: str = "en",
    ) -> Conversation:
        with self._lock:
            now = self._clock()
            conversation = self._lookup(session_id, now)
            if conversation is None:
                conversation = Conversation(
                    last_activity=now, language=language,
                )
                self._conversations[session_id] = conversation
                logger.debug(
                    "Created session %s (%s)", session_id, language
                )
            return conversation

    def delete(self, session_id: str) -> bool:
        """Drop a session.  Returns ``True`` if it existed."""
        with self._lock:
            removed = self._conversations.pop(session_id, None) is not None
        if removed:
            logger.debug("Deleted session %s", session_id)
        return removed

    def clear(self) -> int:
        """Purge all sessions.

        Returns the number of sessions that were removed.
        """
        with self._lock:
            count = len(self._conversations)
            self._conversations.clear()
        logger.info("Session store purged (%d sessions removed)", count)
        return count

    def evict_expired(self) -> int:
        """Remove idle sessions now; returns how many were evicted."""
        with self._lock:
            return self._evict_expired(self._clock())

    def _lookup(self, session_id: str, now: float) -> Conversation | None:
        # Caller holds _lock
        self._evict_expired(now)
        conversation = self._conversations.get(session_id)
        if conversation is not None:
            conversation.last_activity = now
        return conversation

    def _evict_expired(self, now: float) -> int:
        # Caller holds _lock
        expired = [
            sid
            for sid, conv in list(self._conversations.items())
            if now - conv.last_activity >= self._ttl
        ]
        for sid in expired:
            del self._conversations[sid]
        if expired:
            logger.debug("Evicted %d expired sessions", len(expired))
        return len(expired)
