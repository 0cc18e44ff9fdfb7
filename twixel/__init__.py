"""
Twixel Application Package

Twixel is a small server-rendered posting app: users register, log in,
write short titled posts ("twixes"), read a random one or the latest ones,
delete their own, and follow everything through an RSS feed.

- config.py: Application configuration and environment settings
- database.py: Database connection and session management
- dependencies.py: FastAPI dependencies reading the session cookie
- limiter.py: Rate limiting configuration
- main.py: FastAPI application entry point, error pages and homepage
- models.py: SQLAlchemy ORM database models
- schemas.py: Pydantic payloads for rejected form submissions
- templating.py: Jinja2 template configuration

Subpackages:
- routes/: Route handlers (auth, twixes, feed)
- services/: Business logic services (credentials, session tokens)
- utils/: Utility functions (text escaping for RSS, form validators)
- templates/: HTML templates and the RSS template
- static/: Static assets (CSS, JS)
"""
