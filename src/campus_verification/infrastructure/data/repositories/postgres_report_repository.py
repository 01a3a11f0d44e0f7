from typing import List

from ....domain.entities.report import ReportReason, UserReport
from ....domain.repositories.report_repository import ReportRepository
from .postgres_base import PostgresRepository, measure_performance


class PostgresReportRepository(PostgresRepository, ReportRepository):
    """PostgreSQL implementation of ReportRepository"""

    @measure_performance("create_report")
    async def create(self, report: UserReport) -> UserReport:
        async with self.get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO reports (
                    id, reporter_id, reported_user_id, reported_user_name,
                    reason, description, created_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7)
                """,
                report.id,
                report.reporter_id,
                report.reported_user_id,
                report.reported_user_name,
                report.reason.value,
                report.description,
                report.created_at
            )
        return report

    @measure_performance("list_reports")
    async def list_reports(self, limit: int = 100, offset: int = 0) -> List[UserReport]:
        async with self.get_connection() as conn:
            rows = await conn.fetch(
                """
                SELECT id, reporter_id, reported_user_id, reported_user_name,
                       reason, description, created_at
                FROM reports
                ORDER BY created_at DESC
                LIMIT $1 OFFSET $2
                """,
                limit,
                offset
            )

        return [
            UserReport(
                id=row['id'],
                reporter_id=row['reporter_id'],
                reported_user_id=row['reported_user_id'],
                reported_user_name=row['reported_user_name'],
                reason=ReportReason(row['reason']),
                description=row['description'],
                created_at=row['created_at']
            )
            for row in rows
        ]
