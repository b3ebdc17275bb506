from typing import Optional
from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from prompt_admin.core.config import settings
from prompt_admin.core.dependencies import get_auth_provider, get_prompt_repository
from prompt_admin.services.auth import AuthProvider
from prompt_admin.services.prompt_form import PromptFormController, StatusKind, StatusMessage
from prompt_admin.services.prompt_repository import PromptRepository
from prompt_admin.services.session_gate import SessionGate
from prompt_admin.utils.render import render_message_page, render_prompt_page


router = APIRouter(tags=["Prompt SDR"])


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(settings.login_path, status_code=303)


def _gate_failure(gate: SessionGate):
    if gate.redirect_required:
        return _login_redirect()
    return HTMLResponse(render_message_page(StatusMessage(gate.error, StatusKind.ERROR)))


@router.get("/", include_in_schema=False)
async def index():
    return RedirectResponse("/prompt-sdr", status_code=303)


@router.get("/prompt-sdr", response_class=HTMLResponse)
async def prompt_sdr_page(
    auth: AuthProvider = Depends(get_auth_provider),
    repository: PromptRepository = Depends(get_prompt_repository),
):
    """Show the current SDR prompt for editing."""
    gate = SessionGate(auth)
    async with gate.open():
        if not gate.authenticated:
            return _gate_failure(gate)

        controller = PromptFormController(repository, confirm=lambda _: False, user_id=gate.session.user_id)
        await controller.on_mount()

        if gate.redirect_required:
            return _login_redirect()
        return HTMLResponse(render_prompt_page(controller, gate.session))


@router.post("/prompt-sdr", response_class=HTMLResponse)
async def save_prompt_sdr(
    prompt_text: str = Form(""),
    current_id: Optional[str] = Form(None),
    confirmed: str = Form(""),
    auth: AuthProvider = Depends(get_auth_provider),
    repository: PromptRepository = Depends(get_prompt_repository),
):
    """Save the submitted SDR prompt (update if it has an id, insert otherwise)."""
    gate = SessionGate(auth)
    async with gate.open():
        if not gate.authenticated:
            return _gate_failure(gate)

        controller = PromptFormController(
            repository,
            confirm=lambda _: confirmed == "yes",
            user_id=gate.session.user_id,
            prompt_text=prompt_text,
            current_id=current_id or None,
        )
        await controller.on_submit()

        if gate.redirect_required:
            return _login_redirect()
        return HTMLResponse(render_prompt_page(controller, gate.session))
