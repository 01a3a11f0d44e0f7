"""
Error hierarchy for the verification workflow.

Every error carries a user-facing ``message``; the API layer maps each class
to an HTTP status code.
"""

from typing import Dict, Optional


class VerificationError(Exception):
    """Base class for workflow errors surfaced to the caller."""

    default_message = "Verification workflow error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(VerificationError):
    default_message = "Missing required fields"

    def __init__(self, message: Optional[str] = None, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class AlreadyPending(VerificationError):
    default_message = "You already have a pending verification request."


class AlreadyVerified(VerificationError):
    default_message = "Your account is already verified!"


class UploadError(VerificationError):
    default_message = "Upload failed"


class RecordStoreError(VerificationError):
    default_message = "Record store request failed"


class InvalidDuration(VerificationError):
    default_message = "Suspension length must be a positive whole number of days"


class RequestNotFound(VerificationError):
    default_message = "Verification request not found"


class UserNotFound(VerificationError):
    default_message = "User not found"


class ConfirmationRequired(VerificationError):
    default_message = "This action is irreversible and must be explicitly confirmed"


class NotAuthenticated(VerificationError):
    default_message = "User not authenticated"
