"""
Jinja2 Template Configuration

Centralized template loader for rendering HTML responses and the RSS feed.
This instance is imported by route handlers to render templates.
"""

from pathlib import Path
from fastapi.templating import Jinja2Templates
from twixel.utils.text import escape_cdata, escape_html, format_rss_date


TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Filters used by twixes.rss; their output is marked |safe there since the
# environment autoescapes every template
templates.env.filters["cdata"] = escape_cdata
templates.env.filters["escape_html"] = escape_html
templates.env.filters["rss_date"] = format_rss_date
