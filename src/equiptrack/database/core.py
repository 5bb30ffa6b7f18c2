"""
Database core functionality for async SQLAlchemy
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from ..config import settings

DATABASE_URL = settings.database_url

# Convert PostgreSQL URL to async version
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
elif DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

# asyncpg does not understand libpq's sslmode parameter
if "?sslmode=" in DATABASE_URL or "&sslmode=" in DATABASE_URL:
    DATABASE_URL = re.sub(r'[?&]sslmode=\w+', '', DATABASE_URL)

# Supabase and other hosted Postgres instances require TLS
_requires_ssl = "supabase" in DATABASE_URL or ".aws" in DATABASE_URL

engine = create_async_engine(
    DATABASE_URL,
    pool_size=20,
    max_overflow=40,
    pool_pre_ping=True,
    pool_recycle=3600,
    echo=False,
    connect_args={"ssl": "require"} if _requires_ssl else {}
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db():
    """Async dependency to get database session"""
    async with AsyncSessionLocal() as session:
        yield session
