from contextlib import asynccontextmanager
from enum import Enum
from typing import Callable, Optional

from prompt_admin.schemas import Session
from prompt_admin.services.auth import AuthProvider
from prompt_admin.logging import AuthError, logger


AUTH_ERROR_MESSAGE = "Authentication error. Please try again."


class GateState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionGate:
    """
    Decides whether the caller may see the prompt form.

    Use as `async with gate.open():`. While the block runs the gate listens
    for session changes; a session loss flips it to UNAUTHENTICATED and calls
    `on_redirect`. The subscription is always released when the block exits.
    """

    def __init__(self, auth: AuthProvider, on_redirect: Optional[Callable[[], None]] = None):
        self.auth = auth
        self.on_redirect = on_redirect
        self.state = GateState.UNKNOWN
        self.session: Optional[Session] = None
        self.error: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.state == GateState.AUTHENTICATED

    @property
    def redirect_required(self) -> bool:
        return self.state == GateState.UNAUTHENTICATED

    @asynccontextmanager
    async def open(self):
        subscription = None
        try:
            session = await self.auth.get_session()
        except AuthError as e:
            logger.error(f"Authentication error: {e.message}")
            self.error = AUTH_ERROR_MESSAGE
        else:
            if session is None:
                self._deny()
            else:
                self.session = session
                self.state = GateState.AUTHENTICATED
                subscription = self.auth.on_session_change(self._handle_session_change)

        try:
            yield self
        finally:
            if subscription is not None:
                subscription.unsubscribe()

    def _handle_session_change(self, session: Optional[Session]) -> None:
        if session is not None:
            self.session = session
            return
        if self.state == GateState.AUTHENTICATED:
            logger.info("Session ended while the form was open")
            self._deny()

    def _deny(self) -> None:
        self.session = None
        self.state = GateState.UNAUTHENTICATED
        if self.on_redirect is not None:
            self.on_redirect()
