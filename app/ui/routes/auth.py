"""
Authentication routes for UI.
"""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_session_manager
from app.routers.auth import set_session_cookie
from app.services.auth_service import AuthService
from app.ui.dependencies import get_optional_ui_user
from app.ui.session import SessionManager
from app.ui.templating import render


router = APIRouter()


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    current_user=Depends(get_optional_ui_user),
):
    """
    Display login form.

    If user is already logged in, redirect to the members list.
    """
    if current_user:
        return RedirectResponse(url="/members", status_code=303)

    return render(request, "login.html", {"email": None})


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    session: AsyncSession = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
):
    """
    Process login form submission.

    Validates credentials and creates session cookie on success.
    """
    auth_service = AuthService(session)
    user = await auth_service.authenticate_user(email=email, password=password)

    if not user:
        return render(
            request,
            "login.html",
            {"error": "Invalid email or password", "email": email},
            status_code=401,
        )

    response = RedirectResponse(url="/members", status_code=303)
    set_session_cookie(response, manager, user)
    return response


@router.get("/logout")
async def logout(manager: SessionManager = Depends(get_session_manager)):
    """
    Log out user by clearing session cookie.
    """
    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(key=manager.cookie_name)
    return response
