"""Session provider - who is signed in, and notifications when that changes."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel

from takify.utils.logger import get_logger

SessionListener = Callable[["Session | None"], None]


class Session(BaseModel):
    """An authenticated session.

    Attributes:
        user_id: Identifier of the signed-in user (the task owner)
        token: Bearer token for the backend API
        email: Optional email address for display
    """

    user_id: str
    token: str
    email: str | None = None


class SessionProvider:
    """Holds the current session and notifies listeners on acquire/loss.

    Listeners are called synchronously with the new session, or ``None``
    when the session is lost. Setting the same session again does not
    notify.
    """

    def __init__(self, session: Session | None = None):
        self._session = session
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def user_id(self) -> str | None:
        return self._session.user_id if self._session else None

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    def set_session(self, session: Session) -> None:
        """Record a newly acquired session."""
        if session == self._session:
            return
        self._session = session
        get_logger().info("session acquired for %s", session.user_id)
        self._notify()

    def clear(self) -> None:
        """Drop the current session (logout or session loss)."""
        if self._session is None:
            return
        get_logger().info("session lost for %s", self._session.user_id)
        self._session = None
        self._notify()

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)
