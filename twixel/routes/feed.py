"""
Feed Routes - RSS

- GET /twixes.rss: the 100 latest twixes as an RSS 2.0 document

Links in the feed must be absolute, so the base URL is rebuilt from the
request headers (see utils.text.get_domain_url).
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc
from sqlalchemy.orm import selectinload
from twixel.database import get_db
from twixel.models import Twix
from twixel.templating import templates
from twixel.utils.text import get_domain_url


router = APIRouter(tags=["feed"])

# Maximum number of items in the feed
FEED_LIMIT = 100

# Browsers may reuse the feed for 10 minutes, shared caches for a day
CACHE_CONTROL = f"public, max-age={60 * 10}, s-maxage={60 * 60 * 24}"


async def get_feed_twixes(db: AsyncSession, limit: int = FEED_LIMIT) -> list[Twix]:
    # selectinload: the template reads twix.twixester.username for every item
    result = await db.execute(
        select(Twix)
        .options(selectinload(Twix.twixester))
        .order_by(desc(Twix.created_at))
        .limit(limit)
    )
    return list(result.scalars().all())


def render_feed(twixes: list[Twix], domain_url: str) -> str:
    """
    Render the RSS document.

    Titles and authors go in CDATA sections, the description is HTML
    escaped; see twixes.rss.
    """
    template = templates.get_template("twixes.rss")
    return template.render(twixes=twixes, twixes_url=f"{domain_url}/twixes").strip()


@router.get("/twixes.rss")
async def twixes_rss(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    RSS feed of the latest twixes, newest first.

    Raises:
        ValueError: if the request carries neither X-Forwarded-Host nor
                    Host; the error handler turns it into a 500 page
    """
    twixes = await get_feed_twixes(db)
    domain_url = get_domain_url(request.headers)
    rss = render_feed(twixes, domain_url)

    return Response(
        content=rss,
        media_type="application/xml",
        headers={"Cache-Control": CACHE_CONTROL},
    )
