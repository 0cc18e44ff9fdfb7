"""
Routes Package

Each module defines the routes of one area of the site:

- auth.py: /login and /logout
- twixes.py: /twixes pages (random twix, new twix, detail and deletion)
- feed.py: /twixes.rss

Routes are registered in main.py using FastAPI's router system.
"""
