from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..entities.user import AccountStatus, UserRecord


class UserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def update_contact_details(self, email: str, phone_number: Optional[str],
                                     student_id: Optional[str]) -> UserRecord:
        """Copy phone number and student id onto the user with this email,
        creating the user record when none exists."""
        pass

    @abstractmethod
    async def set_account_status(self, user_id: UUID, status: AccountStatus,
                                 suspended_until: Optional[datetime] = None) -> bool:
        pass

    @abstractmethod
    async def set_credential(self, user_id: UUID, credential: Optional[str]) -> bool:
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        pass

    @abstractmethod
    async def get_all(self, limit: int = 100, offset: int = 0) -> List[UserRecord]:
        pass

    @abstractmethod
    async def get_count(self) -> int:
        pass
