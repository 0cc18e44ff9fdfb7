"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Database initialization on startup
- Static file serving
- Route registration
- Error pages: typed HTTP errors (4xx) get a message of their own,
  anything unexpected gets a generic page and a log entry
- Homepage
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from twixel.config import settings
from twixel.database import engine
from twixel.dependencies import LoginRequired
from twixel.limiter import limiter
from twixel.models import Base
from twixel.routes import auth, feed, twixes
from twixel.templating import templates
import logging


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: create the tables that do not exist yet.
    """
    async with engine.begin() as conn:
        # create_all() is synchronous, run_sync() bridges it into the async connection
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready")

    yield

    # SHUTDOWN: release pooled connections
    await engine.dispose()


app = FastAPI(title="Twixel", lifespan=lifespan)

# slowapi looks the limiter up on app.state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Register route modules
app.include_router(feed.router)
app.include_router(auth.router)
app.include_router(twixes.router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Send anonymous users to the login page, remembering where they were going."""
    return RedirectResponse(url=exc.login_url, status_code=303)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render 4xx/5xx HTTPExceptions as an HTML error page.

    The route decides the message through the exception detail; 401 pages
    also offer a login link.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed with {exc.status_code}: {exc.detail}")
    return templates.TemplateResponse(request, "error.html", {
        "status_code": exc.status_code,
        "message": exc.detail,
    }, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Anything not raised on purpose; the page stays generic
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return templates.TemplateResponse(request, "error.html", {
        "status_code": 500,
        "message": "Something went wrong, sorry about that.",
    }, status_code=500)


@app.get("/")
async def root(request: Request):
    """Homepage: links to the twixes and to the RSS feed."""
    return templates.TemplateResponse(request, "index.html", {})
