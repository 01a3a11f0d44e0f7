from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AccessGate(str, Enum):
    """Navigation gate derived from the latest verification status."""
    APPROVED = "approved"
    PENDING = "pending"
    NOT_REQUESTED = "not_requested"

    @classmethod
    def from_status(cls, status: Optional[VerificationStatus]) -> "AccessGate":
        if status == VerificationStatus.APPROVED:
            return cls.APPROVED
        if status == VerificationStatus.PENDING:
            return cls.PENDING
        # rejected requests send the applicant back to the call-to-action screen
        return cls.NOT_REQUESTED

    @property
    def redirect_target(self) -> Optional[str]:
        if self == AccessGate.PENDING:
            return "VerificationStatus"
        if self == AccessGate.NOT_REQUESTED:
            return "NotVerified"
        return None

    def allows_restricted_actions(self) -> bool:
        return self == AccessGate.APPROVED


class DocumentType(str, Enum):
    STUDENT_ID = "student_id"
    COR = "cor"


@dataclass
class ImageUpload:
    data: bytes
    content_type: str
    filename: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.data


@dataclass
class Applicant:
    """Authenticated caller on whose behalf an operation runs."""
    user_id: str
    email: Optional[str]
    is_admin: bool = False


@dataclass
class VerificationRequest:
    id: UUID
    user_id: str
    email: str
    phone_number: str
    student_id: str
    id_image: str
    cor_image: str
    status: VerificationStatus
    created_at: datetime

    @classmethod
    def create(cls, applicant: Applicant, phone_number: str, student_id: str,
               id_image: str, cor_image: str):
        return cls(
            id=uuid4(),
            user_id=applicant.user_id,
            email=applicant.email,
            phone_number=phone_number,
            student_id=student_id,
            id_image=id_image,
            cor_image=cor_image,
            status=VerificationStatus.PENDING,
            created_at=datetime.utcnow()
        )

    @property
    def is_pending(self) -> bool:
        return self.status == VerificationStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == VerificationStatus.APPROVED

    @property
    def is_rejected(self) -> bool:
        return self.status == VerificationStatus.REJECTED

    def has_contact_details(self) -> bool:
        return bool(self.phone_number) or bool(self.student_id)


@dataclass
class VerificationStatusView:
    status: Optional[VerificationStatus]
    access_gate: AccessGate
    request: Optional[VerificationRequest]
    can_submit: bool

    @classmethod
    def from_request(cls, request: Optional[VerificationRequest]) -> "VerificationStatusView":
        if request is None:
            return cls(
                status=None,
                access_gate=AccessGate.NOT_REQUESTED,
                request=None,
                can_submit=True
            )
        return cls(
            status=request.status,
            access_gate=AccessGate.from_status(request.status),
            request=request,
            can_submit=request.is_rejected
        )
