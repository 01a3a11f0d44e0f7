from .verification import (
    AccessGate,
    Applicant,
    DocumentType,
    ImageUpload,
    VerificationRequest,
    VerificationStatus,
    VerificationStatusView,
)
from .user import AccountStatus, UserRecord
from .report import ReportReason, UserReport

__all__ = [
    'AccessGate',
    'Applicant',
    'DocumentType',
    'ImageUpload',
    'VerificationRequest',
    'VerificationStatus',
    'VerificationStatusView',
    'AccountStatus',
    'UserRecord',
    'ReportReason',
    'UserReport',
]
