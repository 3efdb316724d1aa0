import os
import logging
from typing import AsyncIterator
from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

# Importing the models registers the reservations table on SQLModel.metadata
import models  # noqa: F401

logger = logging.getLogger(__name__)

# 1. Load environment variables from .env file
load_dotenv()

# 2. Fall back to a local SQLite file next to the process
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./reservations.db")


class Database:
    """Owns the async engine for the lifetime of the application."""

    def __init__(self, url: str = DATABASE_URL, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init_db(self):
        async with self.engine.begin() as conn:
            # This creates the tables if they don't exist
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Reservations table ready")

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database connection closed.")


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    db: Database = request.app.state.db
    async with db.session_factory() as session:
        yield session
