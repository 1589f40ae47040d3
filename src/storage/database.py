from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from src.config import settings
from src.storage.models import Base
import logging

logger = logging.getLogger(__name__)


def get_async_url(url: str) -> str:
    """Point a plain sqlite URL at the aiosqlite driver.

    Anything already carrying a driver, or another backend, is returned as-is.
    """
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def build_engine(url: str, **options) -> AsyncEngine:
    """Async engine for the reports database"""
    options.setdefault("echo", False)
    if not url.startswith("sqlite"):
        options.setdefault("pool_pre_ping", True)
    return create_async_engine(get_async_url(url), **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)


async def init_db(bind: AsyncEngine = None):
    """Create report tables"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Report tables ready")


class DatabaseManager:
    """One session per `async with` block; rolled back when the block raises"""

    def __init__(self, session_factory: async_sessionmaker = None):
        self.session_factory = session_factory or AsyncSessionLocal
        self.session: AsyncSession = None

    async def __aenter__(self) -> AsyncSession:
        self.session = self.session_factory()
        return self.session

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.warning(f"Rolling back report session: {exc_val}")
            await self.session.rollback()
        await self.session.close()


def get_db():
    return DatabaseManager()
