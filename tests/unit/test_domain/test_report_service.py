"""
Unit tests for user reports.
"""

import pytest
from datetime import datetime, timedelta

from campus_verification.domain.entities.report import REPORT_REASON_LABELS, ReportReason
from campus_verification.domain.errors import NotAuthenticated, ValidationError
from tests.utils.data_factories import ReportFactory


class TestReportReason:

    def test_every_reason_has_a_label(self):
        assert set(REPORT_REASON_LABELS) == set(ReportReason)
        assert ReportReason.SCAM.label == "Scam or fraud"


class TestReportService:

    @pytest.mark.asyncio
    async def test_submit_report(self, report_service, report_repository, applicant):
        report = await report_service.submit_report(
            applicant,
            reported_user_id="seller-42",
            reason="scam",
            description="  Asked me to pay through a link  ",
            reported_user_name="Shady Seller"
        )

        assert report.reporter_id == applicant.email
        assert report.reported_user_id == "seller-42"
        assert report.reason == ReportReason.SCAM
        assert report.description == "Asked me to pay through a link"
        assert report.reported_user_name == "Shady Seller"
        assert report_repository.reports == [report]

    @pytest.mark.asyncio
    async def test_requires_authentication(self, report_service):
        with pytest.raises(NotAuthenticated):
            await report_service.submit_report(None, "seller-42", "spam", "details")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason,description,field", [
        ("", "details", "reason"),
        ("not-a-reason", "details", "reason"),
        ("spam", "   ", "description"),
    ])
    async def test_validation(self, report_service, report_repository, applicant,
                              reason, description, field):
        with pytest.raises(ValidationError) as exc_info:
            await report_service.submit_report(applicant, "seller-42", reason, description)

        assert field in exc_info.value.fields
        assert report_repository.reports == []

    @pytest.mark.asyncio
    async def test_requires_reported_user(self, report_service, applicant):
        with pytest.raises(ValidationError) as exc_info:
            await report_service.submit_report(applicant, " ", ReportReason.FAKE, "details")
        assert "reported_user_id" in exc_info.value.fields

    @pytest.mark.asyncio
    async def test_list_reports_newest_first(self, report_service, report_repository):
        factory = ReportFactory()
        older = factory.create()
        older.created_at = datetime.utcnow() - timedelta(hours=2)
        newer = factory.create()
        report_repository.reports.extend([older, newer])

        reports = await report_service.list_reports()

        assert reports == [newer, older]
