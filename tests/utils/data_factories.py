"""
Data factories for generating test data for the verification service.

This module provides factory classes for creating consistent test data
across different test modules.
"""

import random
from typing import List, Optional
from datetime import datetime, timedelta
from uuid import uuid4
from dataclasses import dataclass

from campus_verification.domain.entities.report import ReportReason, UserReport
from campus_verification.domain.entities.user import AccountStatus, UserRecord
from campus_verification.domain.entities.verification import (
    Applicant, ImageUpload, VerificationRequest, VerificationStatus
)

# Smallest valid PNG: signature plus an IHDR chunk header
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"


@dataclass
class FactoryConfig:
    """Configuration for data factories."""
    seed: int = 42


class ApplicantFactory:
    """Factory for creating authenticated callers."""

    FIRST_NAMES = ['juan', 'maria', 'jose', 'ana', 'mark', 'grace', 'paolo', 'bea']

    def __init__(self, config: FactoryConfig = None):
        self.config = config or FactoryConfig()
        self.random = random.Random(self.config.seed)
        self._counter = 0

    def create(self, **kwargs) -> Applicant:
        self._counter += 1
        name = self.random.choice(self.FIRST_NAMES)
        defaults = {
            'user_id': str(uuid4()),
            'email': f"{name}{self._counter}@campus.edu",
            'is_admin': False
        }
        defaults.update(kwargs)
        return Applicant(**defaults)

    def create_admin(self, **kwargs) -> Applicant:
        kwargs.setdefault('email', 'admin@campus.edu')
        return self.create(is_admin=True, **kwargs)


class ImageFactory:
    """Factory for uploaded document images."""

    @staticmethod
    def create(data: bytes = None, content_type: str = "image/png",
               filename: Optional[str] = "document.png") -> ImageUpload:
        return ImageUpload(
            data=data if data is not None else PNG_BYTES + uuid4().bytes,
            content_type=content_type,
            filename=filename
        )


class VerificationRequestFactory:
    """Factory for creating VerificationRequest entities."""

    def __init__(self, config: FactoryConfig = None):
        self.config = config or FactoryConfig()
        self.random = random.Random(self.config.seed)

    def create(self, applicant: Optional[Applicant] = None, **kwargs) -> VerificationRequest:
        applicant = applicant or ApplicantFactory(self.config).create()
        request = VerificationRequest.create(
            applicant=applicant,
            phone_number=kwargs.pop('phone_number', self._phone_number()),
            student_id=kwargs.pop('student_id', self._student_id()),
            id_image=kwargs.pop('id_image', f"https://storage.test/id-{uuid4().hex[:8]}.png"),
            cor_image=kwargs.pop('cor_image', f"https://storage.test/cor-{uuid4().hex[:8]}.png")
        )
        for key, value in kwargs.items():
            setattr(request, key, value)
        return request

    def create_batch(self, count: int, **common_kwargs) -> List[VerificationRequest]:
        base = datetime.utcnow()
        requests = []
        for i in range(count):
            kwargs = common_kwargs.copy()
            kwargs.setdefault('created_at', base - timedelta(minutes=i))
            requests.append(self.create(**kwargs))
        return requests

    def create_with_status(self, status: VerificationStatus, **kwargs) -> VerificationRequest:
        return self.create(status=status, **kwargs)

    def _phone_number(self) -> str:
        return "09" + "".join(str(self.random.randint(0, 9)) for _ in range(9))

    def _student_id(self) -> str:
        return str(self.random.randint(2015, 2025)) + "".join(
            str(self.random.randint(0, 9)) for _ in range(6)
        )


class UserRecordFactory:
    """Factory for creating UserRecord entities."""

    def __init__(self, config: FactoryConfig = None):
        self.config = config or FactoryConfig()
        self.random = random.Random(self.config.seed)

    def create(self, **kwargs) -> UserRecord:
        email = kwargs.pop('email', f"student{self.random.randint(1000, 9999)}@campus.edu")
        user = UserRecord.create(
            email=email,
            name=kwargs.pop('name', "Test Student"),
            phone_number=kwargs.pop('phone_number', None),
            student_id=kwargs.pop('student_id', None)
        )
        for key, value in kwargs.items():
            setattr(user, key, value)
        return user

    def create_batch(self, count: int, **common_kwargs) -> List[UserRecord]:
        return [
            self.create(email=f"student{i}@campus.edu", **common_kwargs)
            for i in range(count)
        ]

    def create_suspended(self, until: datetime, **kwargs) -> UserRecord:
        return self.create(account_status=AccountStatus.SUSPENDED, suspended_until=until, **kwargs)


class ReportFactory:
    """Factory for creating UserReport entities."""

    def __init__(self, config: FactoryConfig = None):
        self.config = config or FactoryConfig()
        self.random = random.Random(self.config.seed)

    def create(self, **kwargs) -> UserReport:
        defaults = {
            'reporter_id': "reporter@campus.edu",
            'reported_user_id': str(uuid4()),
            'reason': self.random.choice(list(ReportReason)),
            'description': "Asked for payment outside the app",
            'reported_user_name': "Seller Person"
        }
        defaults.update(kwargs)
        return UserReport.create(**defaults)
