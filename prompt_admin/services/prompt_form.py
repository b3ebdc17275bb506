"""
Form controller for the SDR prompt page.

Holds the edit buffer and drives load-on-mount and save-on-submit. Every
failure is turned into a status message here; nothing propagates to the view.
"""
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Union

from prompt_admin.schemas import ConfigRecord, SaveKind
from prompt_admin.logging import NotFoundSignal, RepositoryError, ValidationError, logger


CONFIRM_QUESTION = "Are you sure you want to save the changes?"
EMPTY_PROMPT_MESSAGE = "Please fill in the SDR prompt"
LOAD_FAILED_MESSAGE = "Could not load the SDR prompt."
SAVE_FAILED_MESSAGE = "Could not save the SDR prompt. Please try again later."
SAVED_MESSAGES = {
    SaveKind.UPDATED: "SDR prompt updated successfully!",
    SaveKind.INSERTED: "SDR prompt added successfully!",
}

Confirm = Callable[[str], Union[bool, Awaitable[bool]]]


class StatusKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class StatusMessage:
    text: str
    kind: StatusKind


class Repository(Protocol):
    async def fetch_one(self) -> Optional[ConfigRecord]:
        ...

    async def save(self, record: ConfigRecord) -> SaveKind:
        ...


class PromptFormController:
    def __init__(
        self,
        repository: Repository,
        confirm: Confirm,
        user_id: Optional[str] = None,
        prompt_text: str = "",
        current_id: Optional[str] = None,
    ):
        self.repository = repository
        self.confirm = confirm
        self.user_id = user_id
        self.prompt_text = prompt_text
        self.current_id = current_id
        self.loading = False
        self.status: Optional[StatusMessage] = None

    def set_prompt_text(self, text: str) -> None:
        self.prompt_text = text

    async def on_mount(self) -> None:
        self.loading = True
        try:
            await self._load_current()
        finally:
            self.loading = False

    async def on_submit(self) -> None:
        try:
            self._validate()
        except ValidationError as e:
            self.status = StatusMessage(e.message, StatusKind.ERROR)
            return

        if not await self._confirmed():
            return

        self.loading = True
        try:
            record = ConfigRecord(id=self.current_id, prompt_text=self.prompt_text, created_by=self.user_id)
            kind = await self.repository.save(record)
            self.status = StatusMessage(SAVED_MESSAGES[kind], StatusKind.SUCCESS)
            if kind == SaveKind.INSERTED:
                # learn the id the backend assigned
                await self._load_current()
        except RepositoryError as e:
            logger.error(f"Failed to save SDR prompt: {e.message}")
            self.status = StatusMessage(SAVE_FAILED_MESSAGE, StatusKind.ERROR)
        finally:
            self.loading = False

    def _validate(self) -> None:
        if not self.prompt_text.strip():
            raise ValidationError(EMPTY_PROMPT_MESSAGE)

    async def _confirmed(self) -> bool:
        answer = self.confirm(CONFIRM_QUESTION)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def _load_current(self) -> None:
        try:
            record = await self.repository.fetch_one()
        except NotFoundSignal:
            self.status = StatusMessage(f"{LOAD_FAILED_MESSAGE} No record found.", StatusKind.ERROR)
            return
        except RepositoryError as e:
            logger.error(f"Failed to fetch SDR prompt: {e.message}")
            self.status = StatusMessage(f"{LOAD_FAILED_MESSAGE} Please try again later.", StatusKind.ERROR)
            return

        if record is None:
            self.prompt_text = ""
            self.current_id = None
        else:
            self.prompt_text = record.prompt_text
            self.current_id = record.id
