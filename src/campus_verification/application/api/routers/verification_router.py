"""
Verification API router for applicants.

Endpoints for submitting a verification request with the two document
images, reading the latest status and resolving the access gate.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import ValidationError as FormValidationError

from ...dto.verification_dto import (
    AccessGateResponse, VerificationFormRequest, VerificationRequestResponse,
    VerificationStatusResponse
)
from ....domain.entities.verification import Applicant, ImageUpload
from ....domain.errors import ValidationError, VerificationError
from ....domain.services.verification_service import VerificationService
from ....security.auth.dependencies import get_current_applicant
from ..dependencies import get_verification_service, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


def _form_errors(error: FormValidationError) -> Dict[str, str]:
    fields = {}
    for item in error.errors():
        field = str(item["loc"][-1]) if item.get("loc") else "form"
        fields[field] = item["msg"].replace("Value error, ", "")
    return fields


async def _read_image(upload: Optional[UploadFile], field: str) -> Optional[ImageUpload]:
    if upload is None:
        return None

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError(
            f"{field} must be an image",
            fields={field: f"Unsupported content type: {content_type or 'unknown'}"}
        )

    data = await upload.read()
    return ImageUpload(data=data, content_type=content_type, filename=upload.filename)


@router.get("/status", response_model=VerificationStatusResponse)
async def get_verification_status(
    applicant: Applicant = Depends(get_current_applicant),
    service: VerificationService = Depends(get_verification_service)
):
    """
    Get the caller's latest verification request.

    `can_submit` is true when no request exists or the latest was rejected.
    """
    try:
        view = await service.get_status_view(applicant)
        return VerificationStatusResponse.from_view(view)

    except VerificationError as e:
        raise to_http_exception(e)


@router.get("/gate", response_model=AccessGateResponse)
async def get_access_gate(
    applicant: Applicant = Depends(get_current_applicant),
    service: VerificationService = Depends(get_verification_service)
):
    """Resolve where the caller may navigate based on the latest status."""
    try:
        gate = await service.get_access_gate(applicant)
        return AccessGateResponse.from_gate(gate)

    except VerificationError as e:
        raise to_http_exception(e)


@router.post("", response_model=VerificationRequestResponse, status_code=201)
async def submit_verification(
    phone_number: str = Form(""),
    student_id: str = Form(""),
    id_image: Optional[UploadFile] = File(None),
    cor_image: Optional[UploadFile] = File(None),
    applicant: Applicant = Depends(get_current_applicant),
    service: VerificationService = Depends(get_verification_service)
):
    """
    Submit a verification request.

    Resubmission is allowed only after a rejection; the rejected request is
    replaced by the new one.
    """
    try:
        try:
            form = VerificationFormRequest(phone_number=phone_number, student_id=student_id)
        except FormValidationError as e:
            fields = _form_errors(e)
            raise ValidationError(f"Invalid fields: {', '.join(fields)}", fields=fields)

        id_upload = await _read_image(id_image, "id_image")
        cor_upload = await _read_image(cor_image, "cor_image")

        created = await service.submit(
            applicant,
            phone_number=form.phone_number,
            student_id=form.student_id,
            id_image=id_upload,
            cor_image=cor_upload,
            progress=lambda value: logger.debug(f"Verification upload for {applicant.email}: {value}%")
        )
        return VerificationRequestResponse.from_entity(created)

    except HTTPException:
        raise
    except VerificationError as e:
        logger.warning(f"Verification submission for {applicant.email} failed: {e.message}")
        raise to_http_exception(e)
