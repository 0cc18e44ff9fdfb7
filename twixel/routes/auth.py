"""
Authentication Routes

- GET /login: login/registration form
- POST /login: log in or register, depending on the loginType radio
- POST /logout: drop the session cookie (GET /logout only redirects home)

A successful login or registration answers with a 303 redirect that sets the
signed session cookie. A rejected one re-renders the form with status 400,
the errors and the submitted values.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from twixel.database import get_db
from twixel.limiter import limiter
from twixel.schemas import ActionData, LoginFieldErrors, LoginFields, has_errors
from twixel.services import auth
from twixel.services.session import create_user_session, destroy_user_session
from twixel.templating import templates
from twixel.utils.validators import validate_password, validate_username
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

DEFAULT_REDIRECT = "/twixes"


def bad_request(request: Request, data: ActionData, redirect_to: str | None):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"action_data": data, "redirect_to": redirect_to},
        status_code=400,
    )


@router.get("/login")
async def login_page(request: Request, redirectTo: str | None = None):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"action_data": None, "redirect_to": redirectTo},
    )


@router.post("/login")
@limiter.limit("10/minute")
async def login(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Login/registration action.

    Every failure path answers 400 with an ActionData:
    - a missing field: form error only, there is nothing to echo back
    - short (or blank) username/password: field errors
    - wrong credentials, taken username, unknown loginType: form error

    Returns:
        Redirect to redirectTo (default /twixes) with the session cookie set
    """
    # Read the raw form: a blank field is still a submitted one and goes
    # through the length checks below
    form = await request.form()
    loginType = form.get("loginType")
    username = form.get("username")
    password = form.get("password")
    redirectTo = form.get("redirectTo")
    if not isinstance(redirectTo, str):
        redirectTo = None

    redirect_to = redirectTo or DEFAULT_REDIRECT
    if not all(isinstance(value, str) for value in (loginType, username, password)):
        return bad_request(
            request,
            ActionData(form_error="Form not submitted correctly."),
            redirectTo,
        )

    fields = LoginFields(login_type=loginType, username=username, password=password)
    field_errors = LoginFieldErrors(
        username=validate_username(username),
        password=validate_password(password),
    )
    if has_errors(field_errors):
        return bad_request(request, ActionData(field_errors=field_errors, fields=fields), redirectTo)

    if loginType == "login":
        user = await auth.login(db, username, password)
        if not user:
            return bad_request(
                request,
                ActionData(fields=fields, form_error="Username/Password combination is incorrect"),
                redirectTo,
            )
        return create_user_session(user.id, redirect_to)

    if loginType == "register":
        if await auth.get_user_by_username(db, username):
            return bad_request(
                request,
                ActionData(fields=fields, form_error=f"User with username {username} already exists"),
                redirectTo,
            )
        try:
            user = await auth.register(db, username, password)
        except IntegrityError:
            # Lost a race with another registration for the same name
            await db.rollback()
            logger.warning(f"Registration of {username} failed on the unique constraint")
            return bad_request(
                request,
                ActionData(fields=fields, form_error="Something went wrong trying to create a new user."),
                redirectTo,
            )
        return create_user_session(user.id, redirect_to)

    return bad_request(request, ActionData(fields=fields, form_error="Login type invalid"), redirectTo)


@router.post("/logout")
async def logout():
    """Log the user out and send them to the login page."""
    return destroy_user_session("/login")


@router.get("/logout")
async def logout_page():
    # Only the POST form logs out
    return RedirectResponse(url="/", status_code=303)
