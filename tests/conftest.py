import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "https://auth.example.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("DB_AUTO_CREATE", "false")

import pytest

from prompt_admin.schemas import ConfigRecord, SaveKind, Session
from prompt_admin.services.auth import Subscription


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeRepository:
    """In-memory stand-in for PromptRepository that records every call."""

    def __init__(self, record=None, next_id="abc-123", fetch_error=None, save_error=None):
        self.record = record
        self.next_id = next_id
        self.fetch_error = fetch_error
        self.save_error = save_error
        self.fetch_calls = 0
        self.saved = []
        self.controller = None
        self.loading_seen = []

    def _observe(self):
        if self.controller is not None:
            self.loading_seen.append(self.controller.loading)

    async def fetch_one(self):
        self.fetch_calls += 1
        self._observe()
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.record

    async def save(self, record):
        self.saved.append(record)
        self._observe()
        if self.save_error is not None:
            raise self.save_error
        if record.id:
            self.record = ConfigRecord(id=record.id, prompt_text=record.prompt_text)
            return SaveKind.UPDATED
        self.record = ConfigRecord(id=self.next_id, prompt_text=record.prompt_text, created_by=record.created_by)
        return SaveKind.INSERTED


class FakeAuth:
    """Auth provider double with manual session-change notifications."""

    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error
        self.listeners = []
        self.get_session_calls = 0

    async def get_session(self):
        self.get_session_calls += 1
        if self.error is not None:
            raise self.error
        return self.session

    def on_session_change(self, callback):
        self.listeners.append(callback)
        return Subscription(lambda: self.listeners.remove(callback))

    def emit(self, session):
        for callback in list(self.listeners):
            callback(session)


@pytest.fixture
def session():
    return Session(access_token="token-1", user_id="user-42", email="admin@example.com")


@pytest.fixture
def existing_record():
    return ConfigRecord(id="abc-123", prompt_text="Old")
