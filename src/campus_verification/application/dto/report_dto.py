from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from ...domain.entities.report import ReportReason, UserReport


class ReportCreateRequest(BaseModel):
    """Request model for reporting another user"""
    reported_user_id: str = Field(..., description="Identifier of the reported user")
    reported_user_name: Optional[str] = Field(None, description="Name shown to the reporter")
    reason: str = Field(..., description="One of: " + ", ".join(r.value for r in ReportReason))
    description: str = Field(..., description="Additional details about the report")


class ReportResponse(BaseModel):
    id: UUID
    reporter_id: str
    reported_user_id: str
    reported_user_name: Optional[str] = None
    reason: ReportReason
    reason_label: str
    description: str
    created_at: datetime

    @classmethod
    def from_entity(cls, report: UserReport) -> "ReportResponse":
        return cls(
            id=report.id,
            reporter_id=report.reporter_id,
            reported_user_id=report.reported_user_id,
            reported_user_name=report.reported_user_name,
            reason=report.reason,
            reason_label=report.reason.label,
            description=report.description,
            created_at=report.created_at
        )
