"""
HTML rendering for the prompt page and the login page.

Pages are plain `string.Template` files under `prompt_admin/templates`;
every interpolated value is escaped here.
"""
import json
from functools import lru_cache
from html import escape
from pathlib import Path
from string import Template
from typing import Optional

from prompt_admin.core.config import settings
from prompt_admin.schemas import Session
from prompt_admin.services.prompt_form import CONFIRM_QUESTION, PromptFormController, StatusMessage


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache
def _template(name: str) -> Template:
    return Template((TEMPLATES_DIR / name).read_text(encoding="utf-8"))


def _banner(status: Optional[StatusMessage]) -> str:
    if status is None:
        return ""
    return f'<div class="banner banner-{status.kind.value}">{escape(status.text)}</div>'


def _page(title: str, content: str, session: Optional[Session] = None) -> str:
    navbar = ""
    if session is not None:
        navbar = _template("navbar.html").substitute(
            app_name=escape(settings.app_name),
            email=escape(session.email or ""),
        )
    return _template("base.html").substitute(title=escape(title), navbar=navbar, content=content)


def render_prompt_page(controller: PromptFormController, session: Session) -> str:
    loading = controller.loading
    content = _template("prompt_sdr.html").substitute(
        banner=_banner(controller.status),
        loading_hidden="" if loading else " hidden",
        form_dimmed=" dimmed" if loading else "",
        current_id=escape(controller.current_id or ""),
        prompt_text=escape(controller.prompt_text),
        button_disabled=" disabled" if loading else "",
        button_label="Saving..." if loading else "Save",
        confirm_question=json.dumps(CONFIRM_QUESTION),
    )
    return _page("SDR Prompt", content, session)


def render_message_page(status: StatusMessage) -> str:
    """Bare page carrying only a status banner (auth failures)."""
    return _page("SDR Prompt", f"<h1>SDR Prompt</h1>\n{_banner(status)}")


def render_login_page(status: Optional[StatusMessage] = None, email: str = "") -> str:
    content = _template("login.html").substitute(banner=_banner(status), email=escape(email))
    return _page("Sign in", content)
