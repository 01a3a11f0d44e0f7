from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class AccountStatus(str, Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    SUSPENDED = "suspended"


@dataclass
class UserRecord:
    id: UUID
    email: str
    created_at: datetime
    name: Optional[str] = None
    phone_number: Optional[str] = None
    student_id: Optional[str] = None
    account_status: AccountStatus = AccountStatus.ACTIVE
    suspended_until: Optional[datetime] = None
    profile_photo: Optional[str] = None
    credential: Optional[str] = None

    @classmethod
    def create(cls, email: str, name: Optional[str] = None, phone_number: Optional[str] = None,
               student_id: Optional[str] = None):
        return cls(
            id=uuid4(),
            email=email,
            created_at=datetime.utcnow(),
            name=name,
            phone_number=phone_number,
            student_id=student_id
        )

    def effective_status(self, now: Optional[datetime] = None) -> AccountStatus:
        """Account status with lapsed suspensions treated as active."""
        now = now or datetime.utcnow()
        if (self.account_status == AccountStatus.SUSPENDED
                and self.suspended_until is not None
                and self.suspended_until <= now):
            return AccountStatus.ACTIVE
        return self.account_status

    def is_restricted(self, now: Optional[datetime] = None) -> bool:
        return self.effective_status(now) != AccountStatus.ACTIVE

    @property
    def display_name(self) -> str:
        if self.name and self.name.strip():
            return self.name.strip()
        return self.email.split("@", 1)[0]
