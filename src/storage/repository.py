from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from src.storage.models import UserReport
import logging

logger = logging.getLogger(__name__)


class UserReportRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        report_name: str,
        user_id: Optional[int] = None,
        matter_id: Optional[int] = None,
        report_id: Optional[int] = None,
        is_paid: bool = True,
    ) -> UserReport:
        report = UserReport(
            user_id=user_id,
            matter_id=matter_id,
            report_id=report_id,
            report_name=report_name,
            is_paid=is_paid,
        )
        self.session.add(report)
        await self.session.commit()
        await self.session.refresh(report)
        logger.info(f"Saved user report {report.id}: {report_name}")
        return report
