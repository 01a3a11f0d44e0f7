import logging

from fastapi import APIRouter, Depends

from ...dto.report_dto import ReportCreateRequest, ReportResponse
from ....domain.entities.verification import Applicant
from ....domain.errors import VerificationError
from ....domain.services.report_service import ReportService
from ....security.auth.dependencies import get_current_applicant
from ..dependencies import get_report_service, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=201)
async def submit_report(
    body: ReportCreateRequest,
    applicant: Applicant = Depends(get_current_applicant),
    reports: ReportService = Depends(get_report_service)
):
    """Report another user for review by an administrator."""
    try:
        report = await reports.submit_report(
            applicant,
            reported_user_id=body.reported_user_id,
            reason=body.reason,
            description=body.description,
            reported_user_name=body.reported_user_name
        )
        return ReportResponse.from_entity(report)
    except VerificationError as e:
        raise to_http_exception(e)
