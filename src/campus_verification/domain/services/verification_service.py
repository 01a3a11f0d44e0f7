"""
Verification workflow controller.

Mediates the lifecycle of an applicant's identity-verification request:
submission (with resubmission after rejection), status queries, the
administrator decision with copy-through of contact details onto the user
record, and the access gate derived from the latest status.
"""

import hashlib
import logging
import mimetypes
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from uuid import UUID

from ..entities.verification import (
    AccessGate, Applicant, DocumentType, ImageUpload,
    VerificationRequest, VerificationStatus, VerificationStatusView
)
from ..errors import (
    AlreadyPending, AlreadyVerified, NotAuthenticated, RequestNotFound, ValidationError
)
from ..repositories.blob_store import BlobStore
from ..repositories.user_repository import UserRepository
from ..repositories.verification_repository import VerificationRepository


ProgressCallback = Callable[[int], None]

# Progress checkpoints reported while a submission runs
PROGRESS_STUDENT_ID_UPLOAD = 25
PROGRESS_COR_UPLOAD = 60
PROGRESS_RECORD_INSERT = 85
PROGRESS_DONE = 100


class Liveness:
    """Tracks whether the caller that started an operation still exists.

    Progress callbacks are skipped once ``dispose()`` has been called.
    """

    def __init__(self):
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def dispose(self):
        self._alive = False


@dataclass
class DecisionResult:
    request: VerificationRequest
    copy_through_applied: bool = False
    copy_through_error: Optional[str] = None


class VerificationService:
    """Controller for the verification request lifecycle."""

    def __init__(self, verification_repository: VerificationRepository,
                 user_repository: UserRepository, blob_store: BlobStore,
                 key_prefix: str = "verification"):
        self.verification_repository = verification_repository
        self.user_repository = user_repository
        self.blob_store = blob_store
        self.key_prefix = key_prefix
        self.logger = logging.getLogger(__name__)

    async def submit(self, applicant: Optional[Applicant], phone_number: str, student_id: str,
                     id_image: Optional[ImageUpload], cor_image: Optional[ImageUpload],
                     progress: Optional[ProgressCallback] = None,
                     liveness: Optional[Liveness] = None) -> VerificationRequest:
        """
        Submit a verification request for ``applicant``.

        Fails with AlreadyPending / AlreadyVerified when the latest request
        blocks resubmission. A latest rejected request is replaced: both images
        are uploaded first, then the rejected row is deleted and the new pending
        row inserted in one repository call.
        """
        self._require_authenticated(applicant)
        self._validate_submission(phone_number, student_id, id_image, cor_image)

        latest = await self.verification_repository.get_latest_by_email(applicant.email)
        supersedes: Optional[UUID] = None

        if latest is not None:
            if latest.is_pending:
                self.logger.info(f"Rejected submission for {applicant.email}: request pending")
                raise AlreadyPending()
            if latest.is_approved:
                self.logger.info(f"Rejected submission for {applicant.email}: already verified")
                raise AlreadyVerified()
            supersedes = latest.id

        self._report(progress, liveness, PROGRESS_STUDENT_ID_UPLOAD)
        id_image_url = await self._upload_document(applicant, DocumentType.STUDENT_ID, id_image)

        self._report(progress, liveness, PROGRESS_COR_UPLOAD)
        cor_image_url = await self._upload_document(applicant, DocumentType.COR, cor_image)

        self._report(progress, liveness, PROGRESS_RECORD_INSERT)
        request = VerificationRequest.create(
            applicant=applicant,
            phone_number=phone_number.strip(),
            student_id=student_id.strip(),
            id_image=id_image_url,
            cor_image=cor_image_url
        )
        created = await self.verification_repository.create(request, supersedes=supersedes)

        self._report(progress, liveness, PROGRESS_DONE)

        if supersedes:
            self.logger.info(
                f"Resubmitted verification {created.id} for {applicant.email}, replacing {supersedes}"
            )
        else:
            self.logger.info(f"Submitted verification {created.id} for {applicant.email}")
        return created

    async def get_latest_status(self, applicant: Applicant) -> Optional[VerificationStatus]:
        """Latest request status, or None when the applicant never submitted."""
        if not applicant or not applicant.email:
            return None

        latest = await self.verification_repository.get_latest_by_email(applicant.email)
        return latest.status if latest else None

    async def get_status_view(self, applicant: Applicant) -> VerificationStatusView:
        if not applicant or not applicant.email:
            return VerificationStatusView.from_request(None)

        latest = await self.verification_repository.get_latest_by_email(applicant.email)
        return VerificationStatusView.from_request(latest)

    async def get_access_gate(self, applicant: Applicant) -> AccessGate:
        return self.access_gate(await self.get_latest_status(applicant))

    @staticmethod
    def access_gate(status: Optional[VerificationStatus]) -> AccessGate:
        return AccessGate.from_status(status)

    async def decide(self, request_id: UUID, decision: VerificationStatus) -> DecisionResult:
        """
        Apply an administrator decision to a request.

        The status update must succeed. On approval the request's phone number
        and student id are copied onto the user record; that copy is
        best-effort and its failure is reported in the result only.
        """
        decision = self._parse_decision(decision)

        request = await self.verification_repository.get_by_id(request_id)
        if request is None:
            raise RequestNotFound(f"Verification request {request_id} not found")

        updated = await self.verification_repository.update_status(request_id, decision)
        if not updated:
            raise RequestNotFound(f"Verification request {request_id} not found")

        request.status = decision
        result = DecisionResult(request=request)
        self.logger.info(f"Verification {request_id} for {request.email} marked {decision.value}")

        if decision == VerificationStatus.APPROVED and request.has_contact_details():
            try:
                await self.user_repository.update_contact_details(
                    request.email,
                    phone_number=request.phone_number or None,
                    student_id=request.student_id or None
                )
                result.copy_through_applied = True
            except Exception as e:
                # best-effort; the status update stands
                self.logger.error(
                    f"Copy-through to user {request.email} failed after approving {request_id}: {e}"
                )
                result.copy_through_error = str(e)

        return result

    def _require_authenticated(self, applicant: Optional[Applicant]):
        if applicant is None or not applicant.user_id or not applicant.email:
            raise NotAuthenticated()

    def _validate_submission(self, phone_number: str, student_id: str,
                             id_image: Optional[ImageUpload], cor_image: Optional[ImageUpload]):
        errors: Dict[str, str] = {}

        if not phone_number or not phone_number.strip():
            errors["phone_number"] = "Phone number is required"
        if not student_id or not student_id.strip():
            errors["student_id"] = "Student ID is required"
        if id_image is None or id_image.is_empty():
            errors["id_image"] = "Please upload your Student ID"
        if cor_image is None or cor_image.is_empty():
            errors["cor_image"] = "Please upload your COR"

        if errors:
            raise ValidationError(
                f"Missing required fields: {', '.join(errors)}",
                fields=errors
            )

    @staticmethod
    def _parse_decision(decision) -> VerificationStatus:
        try:
            decision = VerificationStatus(decision)
        except ValueError:
            raise ValidationError(f"Unknown decision: {decision}")

        if decision == VerificationStatus.PENDING:
            raise ValidationError("Decision must be approved or rejected")
        return decision

    async def _upload_document(self, applicant: Applicant, document_type: DocumentType,
                               image: ImageUpload) -> str:
        key = self.document_key(applicant, document_type, image)
        url = await self.blob_store.upload(key, image.data, image.content_type)
        self.logger.debug(f"Uploaded {document_type.value} for {applicant.email} to {key}")
        return url

    def document_key(self, applicant: Applicant, document_type: DocumentType,
                     image: ImageUpload) -> str:
        """Per-applicant key, addressed by content so a new upload never
        replaces the bytes behind a URL that was already handed out."""
        digest = hashlib.sha256(image.data).hexdigest()[:16]
        return f"{self.key_prefix}/{applicant.user_id}/{document_type.value}-{digest}{_extension(image)}"

    @staticmethod
    def _report(progress: Optional[ProgressCallback], liveness: Optional[Liveness], value: int):
        if progress is None:
            return
        if liveness is not None and not liveness.alive:
            return
        progress(value)


def _extension(image: ImageUpload) -> str:
    if image.filename and "." in image.filename:
        suffix = image.filename.rsplit(".", 1)[-1].split("?")[0].lower()
        if suffix:
            return "." + suffix

    extension = mimetypes.guess_extension(image.content_type or "")
    if extension:
        return extension
    subtype = (image.content_type or "").split("/")[-1]
    return f".{subtype}" if subtype else ""
