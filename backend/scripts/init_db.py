"""
Initialize the database: create all tables.
Run with: python -m scripts.init_db
"""

import asyncio
from mess_feedback.config import get_settings
from mess_feedback.database import build_engine, create_tables


async def init():
    settings = get_settings()
    engine = build_engine(settings.database_url)
    print("Creating database tables...")
    await create_tables(engine)
    print("All tables created successfully.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
