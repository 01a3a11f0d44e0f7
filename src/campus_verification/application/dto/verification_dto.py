import re
from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field, validator

from ...domain.entities.verification import (
    AccessGate, VerificationRequest, VerificationStatus, VerificationStatusView
)

PHONE_NUMBER_PATTERN = re.compile(r"^09\d{9}$")
MIN_STUDENT_ID_DIGITS = 10


class VerificationFormRequest(BaseModel):
    """Text fields of the verification submission form"""
    phone_number: str = Field(..., description="Mobile number, 11 digits starting with 09")
    student_id: str = Field(..., description="Student ID number")

    @validator('phone_number')
    def validate_phone_number(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Phone number is required')
        if not PHONE_NUMBER_PATTERN.match(v):
            raise ValueError('Phone number must be 11 digits starting with 09')
        return v

    @validator('student_id')
    def validate_student_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Student ID is required')
        digits = re.sub(r"\s", "", v)
        if not digits.isdigit() or len(digits) < MIN_STUDENT_ID_DIGITS:
            raise ValueError(f'Student ID must contain at least {MIN_STUDENT_ID_DIGITS} digits')
        return v


class VerificationRequestResponse(BaseModel):
    """Response model for a stored verification request"""
    id: UUID
    email: str
    phone_number: str
    student_id: str
    id_image: str
    cor_image: str
    status: VerificationStatus
    created_at: datetime

    class Config:
        json_encoders = {
            UUID: str,
            datetime: lambda v: v.isoformat()
        }

    @classmethod
    def from_entity(cls, request: VerificationRequest) -> "VerificationRequestResponse":
        return cls(
            id=request.id,
            email=request.email,
            phone_number=request.phone_number,
            student_id=request.student_id,
            id_image=request.id_image,
            cor_image=request.cor_image,
            status=request.status,
            created_at=request.created_at
        )


class VerificationStatusResponse(BaseModel):
    """Latest verification state for the calling applicant"""
    status: Optional[VerificationStatus] = Field(None, description="Latest status, null when never submitted")
    access_gate: AccessGate
    can_submit: bool
    request: Optional[VerificationRequestResponse] = None

    @classmethod
    def from_view(cls, view: VerificationStatusView) -> "VerificationStatusResponse":
        return cls(
            status=view.status,
            access_gate=view.access_gate,
            can_submit=view.can_submit,
            request=VerificationRequestResponse.from_entity(view.request) if view.request else None
        )


class AccessGateResponse(BaseModel):
    access_gate: AccessGate
    redirect_target: Optional[str] = Field(None, description="Screen to send the user to, null when allowed")
    allows_restricted_actions: bool

    @classmethod
    def from_gate(cls, gate: AccessGate) -> "AccessGateResponse":
        return cls(
            access_gate=gate,
            redirect_target=gate.redirect_target,
            allows_restricted_actions=gate.allows_restricted_actions()
        )
