import logging
from typing import List, Optional, Union

from ..entities.report import ReportReason, UserReport
from ..entities.verification import Applicant
from ..errors import NotAuthenticated, ValidationError
from ..repositories.report_repository import ReportRepository


class ReportService:
    """Lets users report other users and administrators review the reports."""

    def __init__(self, report_repository: ReportRepository):
        self.report_repository = report_repository
        self.logger = logging.getLogger(__name__)

    async def submit_report(self, reporter: Optional[Applicant], reported_user_id: str,
                            reason: Union[ReportReason, str], description: str,
                            reported_user_name: Optional[str] = None) -> UserReport:
        if reporter is None or not reporter.email:
            raise NotAuthenticated()

        if not reason:
            raise ValidationError("Please select a reason for reporting.", fields={"reason": "required"})
        try:
            reason = ReportReason(reason)
        except ValueError:
            raise ValidationError(f"Unknown report reason: {reason}", fields={"reason": "invalid"})

        if not description or not description.strip():
            raise ValidationError(
                "Please provide additional details about this report.",
                fields={"description": "required"}
            )
        if not reported_user_id or not reported_user_id.strip():
            raise ValidationError("Reported user is required", fields={"reported_user_id": "required"})

        report = UserReport.create(
            reporter_id=reporter.email,
            reported_user_id=reported_user_id.strip(),
            reason=reason,
            description=description,
            reported_user_name=reported_user_name
        )
        created = await self.report_repository.create(report)

        self.logger.info(f"Report {created.id} filed against {created.reported_user_id} ({reason.value})")
        return created

    async def list_reports(self, limit: int = 100, offset: int = 0) -> List[UserReport]:
        return await self.report_repository.list_reports(limit=limit, offset=offset)
