"""
Admin API router.

Endpoints for the verification dashboard, decisions on pending requests,
account moderation (freeze, suspend, credential reset, deletion) and the
user report queue. Every endpoint requires the admin role.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ...dto.admin_dto import (
    CredentialResetResponse, DashboardStatsResponse, DecisionRequest, DecisionResponse,
    RequestListingResponse, SuspendRequest, SuspendResponse, UserResponse
)
from ...dto.report_dto import ReportResponse
from ....domain.entities.verification import Applicant, VerificationStatus
from ....domain.errors import ValidationError, VerificationError
from ....domain.services.moderation_service import ModerationService
from ....domain.services.report_service import ReportService
from ....domain.services.verification_service import VerificationService
from ....security.auth.dependencies import require_admin
from ..dependencies import (
    get_moderation_service, get_report_service, get_verification_service, to_http_exception
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    """Counts of pending, approved and rejected requests plus total users."""
    try:
        stats = await moderation.get_dashboard_stats()
        return DashboardStatsResponse.from_stats(stats)
    except VerificationError as e:
        raise to_http_exception(e)


@router.get("/verifications", response_model=List[RequestListingResponse])
async def list_verification_requests(
    status: Optional[str] = Query(None, description="Filter by pending, approved or rejected"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    """All verification requests, newest first, with applicant names."""
    try:
        status_filter = None
        if status:
            try:
                status_filter = VerificationStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown status filter: {status}", fields={"status": "invalid"})

        listings = await moderation.list_requests(status=status_filter, limit=limit, offset=offset)
        return [RequestListingResponse.from_listing(listing) for listing in listings]

    except VerificationError as e:
        raise to_http_exception(e)


@router.post("/verifications/{request_id}/decision", response_model=DecisionResponse)
async def decide_verification_request(
    request_id: UUID,
    body: DecisionRequest,
    admin: Applicant = Depends(require_admin),
    service: VerificationService = Depends(get_verification_service)
):
    """
    Approve or reject a request.

    On approval the phone number and student id are copied onto the user
    record. A failed copy does not undo the decision; it is reported in
    `copy_through_error`.
    """
    try:
        result = await service.decide(request_id, body.decision)
        logger.info(f"Admin {admin.email} set verification {request_id} to {result.request.status.value}")
        return DecisionResponse.from_result(result)
    except VerificationError as e:
        raise to_http_exception(e)


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    try:
        users = await moderation.list_users(limit=limit, offset=offset)
        return [UserResponse.from_entity(user) for user in users]
    except VerificationError as e:
        raise to_http_exception(e)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    try:
        return UserResponse.from_entity(await moderation.get_user(user_id))
    except VerificationError as e:
        raise to_http_exception(e)


@router.post("/users/{user_id}/freeze", response_model=UserResponse)
async def freeze_user(
    user_id: UUID,
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    try:
        await moderation.freeze(user_id)
        logger.info(f"Admin {admin.email} froze user {user_id}")
        return UserResponse.from_entity(await moderation.get_user(user_id))
    except VerificationError as e:
        raise to_http_exception(e)


@router.post("/users/{user_id}/suspend", response_model=SuspendResponse)
async def suspend_user(
    user_id: UUID,
    body: SuspendRequest,
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    """Suspend a user for a positive whole number of days."""
    try:
        until = await moderation.suspend(user_id, body.days)
        logger.info(f"Admin {admin.email} suspended user {user_id}")
        return SuspendResponse(user_id=user_id, suspended_until=until)
    except VerificationError as e:
        raise to_http_exception(e)


@router.post("/users/{user_id}/reset-credential", response_model=CredentialResetResponse)
async def reset_user_credential(
    user_id: UUID,
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    """Invalidate the user's credential and return a one-time reset token."""
    try:
        reset = await moderation.reset_credential(user_id)
        logger.info(f"Admin {admin.email} reset credential for user {user_id}")
        return CredentialResetResponse.from_reset(reset)
    except VerificationError as e:
        raise to_http_exception(e)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: UUID,
    confirm: bool = Query(False, description="Must be true; deletion is irreversible"),
    admin: Applicant = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service)
):
    try:
        await moderation.delete(user_id, confirm=confirm)
        logger.warning(f"Admin {admin.email} deleted user {user_id}")
        return {"deleted": True, "user_id": str(user_id)}
    except VerificationError as e:
        raise to_http_exception(e)


@router.get("/reports", response_model=List[ReportResponse])
async def list_reports(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Applicant = Depends(require_admin),
    reports: ReportService = Depends(get_report_service)
):
    """User reports, newest first."""
    try:
        return [ReportResponse.from_entity(r) for r in await reports.list_reports(limit=limit, offset=offset)]
    except VerificationError as e:
        raise to_http_exception(e)
