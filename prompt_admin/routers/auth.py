from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from prompt_admin.core.config import settings
from prompt_admin.core.dependencies import get_auth_provider
from prompt_admin.services.auth import SupabaseAuthProvider
from prompt_admin.services.prompt_form import StatusKind, StatusMessage
from prompt_admin.utils.render import render_login_page
from prompt_admin.logging import AuthError


router = APIRouter(tags=["Auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page():
    return HTMLResponse(render_login_page())


@router.post("/login", response_class=HTMLResponse)
async def login(
    email: str = Form(...),
    password: str = Form(...),
    auth: SupabaseAuthProvider = Depends(get_auth_provider),
):
    try:
        session = await auth.sign_in_with_password(email, password)
    except AuthError as e:
        status = StatusMessage(f"Sign-in failed: {e.message}", StatusKind.ERROR)
        return HTMLResponse(render_login_page(status, email=email), status_code=401)

    response = RedirectResponse("/prompt-sdr", status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.post("/logout")
async def logout(auth: SupabaseAuthProvider = Depends(get_auth_provider)):
    await auth.sign_out()
    response = RedirectResponse(settings.login_path, status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response
