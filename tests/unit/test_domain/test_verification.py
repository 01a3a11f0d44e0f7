"""
Unit tests for the verification domain entities.

Tests VerificationRequest, AccessGate and VerificationStatusView.
"""

import pytest
from datetime import datetime
from uuid import UUID

from campus_verification.domain.entities.verification import (
    AccessGate, ImageUpload, VerificationRequest, VerificationStatus, VerificationStatusView
)
from tests.utils.data_factories import ApplicantFactory, VerificationRequestFactory, FactoryConfig


class TestVerificationRequest:
    """Test cases for VerificationRequest entity."""

    def setup_method(self):
        self.applicants = ApplicantFactory(FactoryConfig(seed=42))

    def test_create_starts_pending(self):
        applicant = self.applicants.create(email="ana@campus.edu")
        before = datetime.utcnow()

        request = VerificationRequest.create(
            applicant=applicant,
            phone_number="09171234567",
            student_id="2021123456",
            id_image="https://storage.test/id.png",
            cor_image="https://storage.test/cor.png"
        )

        assert isinstance(request.id, UUID)
        assert request.status == VerificationStatus.PENDING
        assert request.is_pending
        assert not request.is_approved
        assert not request.is_rejected
        assert request.email == "ana@campus.edu"
        assert request.user_id == applicant.user_id
        assert request.created_at >= before

    def test_create_generates_unique_ids(self):
        factory = VerificationRequestFactory(FactoryConfig(seed=1))
        ids = {factory.create().id for _ in range(5)}
        assert len(ids) == 5

    def test_has_contact_details(self):
        factory = VerificationRequestFactory()
        assert factory.create().has_contact_details()
        assert factory.create(phone_number="", student_id="2021123456").has_contact_details()
        assert not factory.create(phone_number="", student_id="").has_contact_details()

    def test_status_properties(self):
        factory = VerificationRequestFactory()
        assert factory.create_with_status(VerificationStatus.APPROVED).is_approved
        assert factory.create_with_status(VerificationStatus.REJECTED).is_rejected


class TestAccessGate:
    """Test cases for the access gate mapping."""

    @pytest.mark.parametrize("status,expected", [
        (VerificationStatus.APPROVED, AccessGate.APPROVED),
        (VerificationStatus.PENDING, AccessGate.PENDING),
        (VerificationStatus.REJECTED, AccessGate.NOT_REQUESTED),
        (None, AccessGate.NOT_REQUESTED),
    ])
    def test_from_status(self, status, expected):
        assert AccessGate.from_status(status) == expected

    def test_redirect_targets(self):
        assert AccessGate.APPROVED.redirect_target is None
        assert AccessGate.PENDING.redirect_target == "VerificationStatus"
        assert AccessGate.NOT_REQUESTED.redirect_target == "NotVerified"

    def test_only_approved_allows_restricted_actions(self):
        assert AccessGate.APPROVED.allows_restricted_actions()
        assert not AccessGate.PENDING.allows_restricted_actions()
        assert not AccessGate.NOT_REQUESTED.allows_restricted_actions()

    def test_values_are_stable_strings(self):
        assert AccessGate("not_requested") is AccessGate.NOT_REQUESTED
        assert AccessGate.APPROVED.value == "approved"


class TestVerificationStatusView:
    """Test cases for the status view shown to applicants."""

    def test_no_request_can_submit(self):
        view = VerificationStatusView.from_request(None)

        assert view.status is None
        assert view.access_gate == AccessGate.NOT_REQUESTED
        assert view.request is None
        assert view.can_submit is True

    def test_rejected_request_can_resubmit(self):
        request = VerificationRequestFactory().create_with_status(VerificationStatus.REJECTED)
        view = VerificationStatusView.from_request(request)

        assert view.status == VerificationStatus.REJECTED
        assert view.access_gate == AccessGate.NOT_REQUESTED
        assert view.can_submit is True

    @pytest.mark.parametrize("status", [VerificationStatus.PENDING, VerificationStatus.APPROVED])
    def test_pending_or_approved_cannot_submit(self, status):
        request = VerificationRequestFactory().create_with_status(status)
        view = VerificationStatusView.from_request(request)

        assert view.can_submit is False
        assert view.request is request


class TestImageUpload:

    def test_is_empty(self):
        assert ImageUpload(data=b"", content_type="image/png").is_empty()
        assert not ImageUpload(data=b"\x89PNG", content_type="image/png").is_empty()
