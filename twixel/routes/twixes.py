"""
Twix Routes - Random Twix, Posting, Detail and Deletion

- GET /twixes: a random twix
- GET /twixes/new: the new-twix form (logged in users only)
- POST /twixes/new: create a twix
- GET /twixes/{twix_id}: one twix, with a delete button for its twixester
- POST /twixes/{twix_id}: delete it (form field _method=delete)

Every page of the section shares the twixes/layout.html frame: a header with
the current user and a sidebar listing the latest twixes. get_layout_data
loads both and each handler merges it into its template context.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, func
from twixel.database import get_db
from twixel.dependencies import get_optional_user, get_user_id, require_user, require_user_id
from twixel.limiter import limiter
from twixel.models import Twix, User
from twixel.schemas import ActionData, TwixFieldErrors, TwixFields, has_errors
from twixel.templating import templates
from twixel.utils.validators import validate_twix_content, validate_twix_title
import logging
import random

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/twixes", tags=["twixes"])

# Number of twixes listed in the sidebar
LATEST_TWIXES_LIMIT = 5


async def get_layout_data(
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Loader shared by every /twixes page.

    Returns:
        Dict with the current user (or None) and the latest twixes,
        newest first, as {"id", "title"} dicts
    """
    result = await db.execute(
        select(Twix.id, Twix.title)
        .order_by(desc(Twix.created_at))
        .limit(LATEST_TWIXES_LIMIT)
    )
    twix_list_items = [{"id": row.id, "title": row.title} for row in result.all()]
    return {"user": user, "twix_list_items": twix_list_items}


async def get_random_twix(db: AsyncSession) -> Twix | None:
    """
    Pick one twix uniformly at random.

    Counts the rows and fetches the one at a random offset; two cheap
    queries instead of ORDER BY RANDOM() over the whole table.
    """
    count = (await db.execute(select(func.count(Twix.id)))).scalar_one()
    if count == 0:
        return None
    offset = random.randrange(count)
    result = await db.execute(
        select(Twix).order_by(Twix.created_at).offset(offset).limit(1)
    )
    return result.scalars().first()


@router.get("")
async def random_twix(
    request: Request,
    layout: dict = Depends(get_layout_data),
    db: AsyncSession = Depends(get_db)
):
    twix = await get_random_twix(db)
    if not twix:
        raise HTTPException(status_code=404, detail="There are no twixes to display.")

    return templates.TemplateResponse(request, "twixes/random.html", {
        **layout,
        "twix": twix,
    })


@router.get("/new")
async def new_twix_page(
    request: Request,
    user_id: str | None = Depends(get_user_id),
    layout: dict = Depends(get_layout_data)
):
    """
    New-twix form.

    Anonymous visitors get a 401, which the error page renders with a
    link to the login page.
    """
    if not user_id:
        raise HTTPException(status_code=401, detail="You must be logged in to create a twix.")

    return templates.TemplateResponse(request, "twixes/new.html", {
        **layout,
        "action_data": None,
    })


@router.post("/new")
@limiter.limit("10/minute")
async def create_twix(
    request: Request,
    user: User = Depends(require_user),
    layout: dict = Depends(get_layout_data),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a twix for the logged in user.

    Returns:
        Redirect to the new twix's page, or the form again with status 400
        when a field is missing or too short (nothing is stored then)
    """
    # Raw form, so that a blank title or content still gets its field error
    form = await request.form()
    title = form.get("title")
    content = form.get("content")

    def bad_request(data: ActionData):
        return templates.TemplateResponse(request, "twixes/new.html", {
            **layout,
            "action_data": data,
        }, status_code=400)

    if not isinstance(title, str) or not isinstance(content, str):
        return bad_request(ActionData(form_error="Form not submitted correctly."))

    fields = TwixFields(title=title, content=content)
    field_errors = TwixFieldErrors(
        title=validate_twix_title(title),
        content=validate_twix_content(content),
    )
    if has_errors(field_errors):
        return bad_request(ActionData(field_errors=field_errors, fields=fields))

    twix = Twix(title=title, content=content, twixester_id=user.id)
    db.add(twix)
    await db.commit()
    await db.refresh(twix)
    logger.info(f"Twix {twix.id} created by {user.username}")

    return RedirectResponse(url=f"/twixes/{twix.id}", status_code=303)


@router.get("/{twix_id}")
async def twix_detail(
    request: Request,
    twix_id: str,
    user_id: str | None = Depends(get_user_id),
    layout: dict = Depends(get_layout_data),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Twix).filter(Twix.id == twix_id))
    twix = result.scalars().first()
    if not twix:
        raise HTTPException(status_code=404, detail=f"Huh? What is {twix_id}?")

    return templates.TemplateResponse(request, "twixes/detail.html", {
        **layout,
        "twix": twix,
        "is_owner": user_id == twix.twixester_id,
    })


@router.post("/{twix_id}")
async def twix_action(
    request: Request,
    twix_id: str,
    method: str | None = Form(None, alias="_method"),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a twix (method override: HTML forms can only POST).

    Ownership is checked here again, whatever the page showed.

    Raises:
        HTTPException: 400 for any _method but "delete", 404 if the twix is
                       gone, 401 if the session user is not its twixester
    """
    if method != "delete":
        raise HTTPException(
            status_code=400,
            detail=f"The _method {method} is not supported"
        )

    # Resolved only once the method is known to be supported
    user_id = await require_user_id(request, await get_user_id(request))

    result = await db.execute(select(Twix).filter(Twix.id == twix_id))
    twix = result.scalars().first()
    if not twix:
        raise HTTPException(status_code=404, detail="Can't delete what does not exist")

    if twix.twixester_id != user_id:
        logger.warning(f"User {user_id} tried to delete twix {twix_id} of {twix.twixester_id}")
        raise HTTPException(status_code=401, detail=f"Nice try! But {twix_id} is not your twix")

    await db.delete(twix)
    await db.commit()
    logger.info(f"Twix {twix_id} deleted by {user_id}")

    return RedirectResponse(url="/twixes", status_code=303)
