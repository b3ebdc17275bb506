"""
Auth provider boundary.

The gate only talks to the `AuthProvider` protocol; `SupabaseAuthProvider`
is the production implementation backed by the Supabase (GoTrue) REST API.
"""
import threading
from typing import Callable, Optional, Protocol
import requests
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as SchemaError

from prompt_admin.schemas import Session
from prompt_admin.logging import AuthError, logger


SessionCallback = Callable[[Optional[Session]], None]


class Subscription:
    """Handle returned by `on_session_change`; `unsubscribe()` is idempotent."""

    def __init__(self, release: Callable[[], None]):
        self._release = release
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._release()


class SessionEvents:
    """Process-wide hub of session-change listeners, keyed by access token."""

    def __init__(self):
        self._listeners: dict[str, list[SessionCallback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, token: str, callback: SessionCallback) -> Subscription:
        with self._lock:
            self._listeners.setdefault(token, []).append(callback)

        def release():
            with self._lock:
                callbacks = self._listeners.get(token, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._listeners.pop(token, None)

        return Subscription(release)

    def publish(self, token: str, session: Optional[Session]) -> None:
        with self._lock:
            callbacks = list(self._listeners.get(token, []))
        for callback in callbacks:
            callback(session)


session_events = SessionEvents()


class AuthProvider(Protocol):
    async def get_session(self) -> Optional[Session]:
        ...

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        ...


class SupabaseAuthProvider:
    """Supabase auth client bound to the access token of one caller."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        events: SessionEvents = None,
        http: requests.Session = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.events = events or session_events
        self.http = http or requests.Session()

    def _headers(self, token: Optional[str] = None) -> dict:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def get_session(self) -> Optional[Session]:
        if not self.access_token:
            return None
        return await run_in_threadpool(self._fetch_user)

    def _fetch_user(self) -> Optional[Session]:
        try:
            resp = self.http.get(
                f"{self.base_url}/auth/v1/user",
                headers=self._headers(self.access_token),
            )
        except requests.RequestException as e:
            logger.error(f"Auth provider unreachable: {e}")
            raise AuthError("Auth provider unreachable") from e

        if resp.status_code in (401, 403):
            logger.info("Access token rejected by auth provider")
            return None
        if resp.status_code != 200:
            logger.error(f"Session lookup failed: HTTP {resp.status_code}")
            raise AuthError("Session lookup failed", {"status_code": resp.status_code})

        try:
            user = resp.json()
            return Session(access_token=self.access_token, user_id=user["id"], email=user.get("email"))
        except (ValueError, KeyError, TypeError, AttributeError, SchemaError) as e:
            logger.error(f"Malformed user payload from auth provider: {e}")
            raise AuthError("Malformed session payload") from e

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        if not self.access_token:
            return Subscription(lambda: None)
        return self.events.subscribe(self.access_token, callback)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        return await run_in_threadpool(self._password_grant, email, password)

    def _password_grant(self, email: str, password: str) -> Session:
        try:
            resp = self.http.post(
                f"{self.base_url}/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers=self._headers(),
            )
        except requests.RequestException as e:
            logger.error(f"Auth provider unreachable: {e}")
            raise AuthError("Auth provider unreachable") from e

        if resp.status_code != 200:
            logger.warning(f"Sign-in rejected for {email}: HTTP {resp.status_code}")
            raise AuthError("Invalid email or password", {"status_code": resp.status_code})

        try:
            payload = resp.json()
            user = payload.get("user") or {}
            session = Session(
                access_token=payload["access_token"],
                user_id=user["id"],
                email=user.get("email", email),
            )
        except (ValueError, KeyError, TypeError, AttributeError, SchemaError) as e:
            logger.error(f"Malformed sign-in payload from auth provider: {e}")
            raise AuthError("Malformed sign-in response") from e
        self.access_token = session.access_token
        logger.info(f"User signed in: {session.email}")
        return session

    async def sign_out(self) -> None:
        if not self.access_token:
            return
        token = self.access_token
        try:
            await run_in_threadpool(
                self.http.post,
                f"{self.base_url}/auth/v1/logout",
                headers=self._headers(token),
            )
        except requests.RequestException as e:
            # Local session is dropped regardless of the remote revoke.
            logger.warning(f"Remote sign-out failed: {e}")
        self.access_token = None
        self.events.publish(token, None)
        logger.info("User signed out")
