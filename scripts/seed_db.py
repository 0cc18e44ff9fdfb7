"""
Database Seed Script

Creates the tables and fills an empty database with a demo user and a few
twixes, so the random twix page and the RSS feed have something to show.

Usage:
    python scripts/seed_db.py

Log in afterwards as kody / twixrox.
"""

import asyncio
import os
import sys

# Add parent directory to Python path so we can import twixel modules
# This allows running the script from any directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func
from sqlalchemy.future import select
from twixel.database import AsyncSessionLocal, engine
from twixel.models import Base, Twix
from twixel.services.auth import get_user_by_username, register


DEMO_USERNAME = "kody"
DEMO_PASSWORD = "twixrox"

DEMO_TWIXES = [
    {
        "title": "Road worker",
        "content": "I never wanted to believe that my Dad was stealing from his job as a road worker. But when I got home, all the signs were there.",
    },
    {
        "title": "Frisbee",
        "content": "I was wondering why the frisbee was getting bigger, then it hit me.",
    },
    {
        "title": "Trees",
        "content": "Why do trees seem suspicious on sunny days? Dunno, they're just a bit shady.",
    },
    {
        "title": "Skeletons",
        "content": "Why don't skeletons ride roller coasters? They don't have the stomach for it.",
    },
    {
        "title": "Hippos",
        "content": "Why don't you find hippopotamuses hiding in trees? They're really good at it.",
    },
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        count = (await db.execute(select(func.count(Twix.id)))).scalar_one()
        if count:
            print(f"Database already holds {count} twixes, nothing to do")
            await engine.dispose()
            return

        user = await get_user_by_username(db, DEMO_USERNAME)
        if not user:
            user = await register(db, DEMO_USERNAME, DEMO_PASSWORD)

        for data in DEMO_TWIXES:
            db.add(Twix(twixester_id=user.id, **data))
        await db.commit()
        print(f"Seeded {len(DEMO_TWIXES)} twixes for {DEMO_USERNAME}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
