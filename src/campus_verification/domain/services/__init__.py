from .verification_service import DecisionResult, Liveness, VerificationService
from .moderation_service import (
    CredentialReset, DashboardStats, ModerationService, RequestListing, parse_suspension_days
)
from .directory_service import UserDirectoryService
from .report_service import ReportService

__all__ = [
    'DecisionResult',
    'Liveness',
    'VerificationService',
    'CredentialReset',
    'DashboardStats',
    'ModerationService',
    'RequestListing',
    'parse_suspension_days',
    'UserDirectoryService',
    'ReportService',
]
