from datetime import datetime
from typing import Optional
from sqlalchemy import Integer, String, Boolean, DateTime, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserReport(Base):
    """Generated report PDFs owned by a user / matter"""
    __tablename__ = "user_reports"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    matter_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    report_id: Mapped[Optional[int]] = mapped_column(Integer)
    report_name: Mapped[str] = mapped_column(String(255), nullable=False)  # filename incl. .pdf
    is_paid: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_user_reports_user_matter', 'user_id', 'matter_id'),
    )
