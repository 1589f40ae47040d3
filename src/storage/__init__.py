from .database import init_db, get_db, AsyncSessionLocal
from .models import Base, UserReport
from .repository import UserReportRepository

__all__ = [
    "init_db", "get_db", "AsyncSessionLocal",
    "Base", "UserReport",
    "UserReportRepository",
]
