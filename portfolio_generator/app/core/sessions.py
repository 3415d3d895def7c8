import logging
import secrets
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from portfolio_generator.app.core.config import get_settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginSession:
    """A server-side login session.

    Attributes:
        session_id (str): Opaque random identifier sent to the client in a cookie.
        user_id (int): The account the session was issued for.
        expires_at (datetime): UTC instant after which the session is no longer valid.

    """

    session_id: str
    user_id: int
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore(ABC):
    """Storage for login sessions.

    Implementations only need to keep sessions for as long as the process or
    backing store lives. Routes receive the store through the
    `get_session_store` dependency, so a different backend can be swapped in.
    """

    @abstractmethod
    def create(self, user_id: int) -> LoginSession:
        """Issue a new session bound to `user_id`."""

    @abstractmethod
    def get(self, session_id: str) -> LoginSession | None:
        """Return the live session for `session_id`, or None if missing or expired."""

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Invalidate a session. Unknown ids are ignored."""


class InMemorySessionStore(SessionStore):
    """Process-local session store backed by a dict.

    Args:
        lifetime (timedelta): How long a session stays valid after it is issued.
        clock (Callable[[], datetime]): Source of the current UTC time.

    Notes:
        1. Handlers run in a threadpool, so every access is guarded by a lock.
        2. Expired sessions are purged when they are looked up.

    """

    def __init__(
        self,
        lifetime: timedelta,
        clock: Callable[[], datetime] | None = None,
    ):
        self._lifetime = lifetime
        self._clock = clock or (lambda: datetime.now(UTC))
        self._sessions: dict[str, LoginSession] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> LoginSession:
        _msg = f"Creating session for user {user_id}"
        log.debug(_msg)
        session = LoginSession(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=self._clock() + self._lifetime,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> LoginSession | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(self._clock()):
                _msg = f"Session for user {session.user_id} expired"
                log.debug(_msg)
                del self._sessions[session_id]
                return None
            return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            _msg = f"Deleted session for user {session.user_id}"
            log.debug(_msg)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


@lru_cache
def get_session_store() -> SessionStore:
    """Get the process-wide session store.

    Returns:
        SessionStore: An `InMemorySessionStore` whose lifetime comes from the settings.

    Notes:
        1. The store is created on first use and reused for the life of the process.
        2. Tests override this dependency to inject their own store.

    """
    settings = get_settings()
    _msg = f"Creating in-memory session store ({settings.session_expire_hours}h lifetime)"
    log.debug(_msg)
    return InMemorySessionStore(lifetime=timedelta(hours=settings.session_expire_hours))
