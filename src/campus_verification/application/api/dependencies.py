"""
Request-scoped dependencies and the mapping from workflow errors to HTTP
status codes.
"""

from typing import Dict, Type

from fastapi import HTTPException, Request

from ...domain.errors import (
    AlreadyPending, AlreadyVerified, ConfirmationRequired, InvalidDuration,
    NotAuthenticated, RecordStoreError, RequestNotFound, UploadError,
    UserNotFound, ValidationError, VerificationError
)
from ...domain.services import (
    ModerationService, ReportService, UserDirectoryService, VerificationService
)

ERROR_STATUS_CODES: Dict[Type[VerificationError], int] = {
    ValidationError: 400,
    InvalidDuration: 400,
    ConfirmationRequired: 400,
    NotAuthenticated: 401,
    RequestNotFound: 404,
    UserNotFound: 404,
    AlreadyPending: 409,
    AlreadyVerified: 409,
    UploadError: 502,
    RecordStoreError: 503,
}


def status_code_for(error: VerificationError) -> int:
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return 500


def to_http_exception(error: VerificationError) -> HTTPException:
    detail = error.message
    if isinstance(error, ValidationError) and error.fields:
        detail = {"message": error.message, "fields": error.fields}
    return HTTPException(status_code=status_code_for(error), detail=detail)


def get_repository_factory(request: Request):
    """Dependency to get repository factory from app state"""
    return request.app.state.repository_factory


def get_verification_service(request: Request) -> VerificationService:
    return get_repository_factory(request).get_verification_service()


def get_moderation_service(request: Request) -> ModerationService:
    return get_repository_factory(request).get_moderation_service()


def get_directory_service(request: Request) -> UserDirectoryService:
    return get_repository_factory(request).get_directory_service()


def get_report_service(request: Request) -> ReportService:
    return get_repository_factory(request).get_report_service()
