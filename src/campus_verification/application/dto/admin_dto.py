from typing import Any, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from ...domain.entities.user import AccountStatus, UserRecord
from ...domain.services.moderation_service import CredentialReset, DashboardStats, RequestListing
from ...domain.services.verification_service import DecisionResult
from .verification_dto import VerificationRequestResponse


class DecisionRequest(BaseModel):
    """Administrator decision on a verification request"""
    decision: str = Field(..., description="approved or rejected")


class DecisionResponse(BaseModel):
    request: VerificationRequestResponse
    copy_through_applied: bool = False
    copy_through_error: Optional[str] = None

    @classmethod
    def from_result(cls, result: DecisionResult) -> "DecisionResponse":
        return cls(
            request=VerificationRequestResponse.from_entity(result.request),
            copy_through_applied=result.copy_through_applied,
            copy_through_error=result.copy_through_error
        )


class SuspendRequest(BaseModel):
    # validated by the moderation service so malformed input maps to InvalidDuration
    days: Any = Field(..., description="Suspension length in whole days")


class SuspendResponse(BaseModel):
    user_id: UUID
    suspended_until: datetime


class CredentialResetResponse(BaseModel):
    user_id: UUID
    reset_token: str = Field(..., description="One-time token, shown only in this response")
    issued_at: datetime

    @classmethod
    def from_reset(cls, reset: CredentialReset) -> "CredentialResetResponse":
        return cls(user_id=reset.user_id, reset_token=reset.reset_token, issued_at=reset.issued_at)


class DashboardStatsResponse(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total_users: int = 0

    @classmethod
    def from_stats(cls, stats: DashboardStats) -> "DashboardStatsResponse":
        return cls(
            pending=stats.pending,
            approved=stats.approved,
            rejected=stats.rejected,
            total_users=stats.total_users
        )


class RequestListingResponse(VerificationRequestResponse):
    applicant_name: str

    @classmethod
    def from_listing(cls, listing: RequestListing) -> "RequestListingResponse":
        request = listing.request
        return cls(
            id=request.id,
            email=request.email,
            phone_number=request.phone_number,
            student_id=request.student_id,
            id_image=request.id_image,
            cor_image=request.cor_image,
            status=request.status,
            created_at=request.created_at,
            applicant_name=listing.applicant_name
        )


class UserResponse(BaseModel):
    """Administrator view of a user account"""
    id: UUID
    email: str
    name: Optional[str] = None
    display_name: str
    phone_number: Optional[str] = None
    student_id: Optional[str] = None
    account_status: AccountStatus
    effective_status: AccountStatus
    is_restricted: bool
    suspended_until: Optional[datetime] = None
    created_at: datetime

    class Config:
        json_encoders = {
            UUID: str,
            datetime: lambda v: v.isoformat()
        }

    @classmethod
    def from_entity(cls, user: UserRecord, now: Optional[datetime] = None) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            display_name=user.display_name,
            phone_number=user.phone_number,
            student_id=user.student_id,
            account_status=user.account_status,
            effective_status=user.effective_status(now),
            is_restricted=user.is_restricted(now),
            suspended_until=user.suspended_until,
            created_at=user.created_at
        )
