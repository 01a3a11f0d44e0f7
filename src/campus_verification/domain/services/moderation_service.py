"""
Administrator moderation of user accounts and the verification dashboard.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..entities.user import AccountStatus, UserRecord
from ..entities.verification import VerificationRequest, VerificationStatus
from ..errors import ConfirmationRequired, InvalidDuration, UserNotFound
from ..repositories.user_repository import UserRepository
from ..repositories.verification_repository import VerificationRepository
from .directory_service import UserDirectoryService

MAX_SUSPENSION_DAYS = 3650


@dataclass
class DashboardStats:
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total_users: int = 0


@dataclass
class RequestListing:
    request: VerificationRequest
    applicant_name: str


@dataclass
class CredentialReset:
    user_id: UUID
    reset_token: str
    issued_at: datetime = field(default_factory=datetime.utcnow)


def parse_suspension_days(days: Any) -> int:
    """Validate an administrator-entered suspension length."""
    if isinstance(days, bool):
        raise InvalidDuration()

    if isinstance(days, int):
        value = days
    elif isinstance(days, str) and _is_plain_number(days.strip()):
        value = int(days.strip())
    else:
        raise InvalidDuration()

    if value <= 0 or value > MAX_SUSPENSION_DAYS:
        raise InvalidDuration()
    return value


def _is_plain_number(text: str) -> bool:
    # ascii digits only, short enough for int()
    return text.isascii() and text.isdigit() and len(text) <= 12


class ModerationService:

    def __init__(self, user_repository: UserRepository,
                 verification_repository: VerificationRepository,
                 directory: UserDirectoryService):
        self.user_repository = user_repository
        self.verification_repository = verification_repository
        self.directory = directory
        self.logger = logging.getLogger(__name__)

    async def get_user(self, user_id: UUID) -> UserRecord:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")
        return user

    async def list_users(self, limit: int = 100, offset: int = 0) -> List[UserRecord]:
        return await self.user_repository.get_all(limit=limit, offset=offset)

    async def freeze(self, user_id: UUID) -> None:
        updated = await self.user_repository.set_account_status(user_id, AccountStatus.FROZEN)
        if not updated:
            raise UserNotFound(f"User {user_id} not found")
        self.logger.info(f"Froze user {user_id}")

    async def suspend(self, user_id: UUID, days: Any, now: Optional[datetime] = None) -> datetime:
        """Suspend a user for ``days`` days; returns the suspension end."""
        days = parse_suspension_days(days)
        until = (now or datetime.utcnow()) + timedelta(days=days)

        updated = await self.user_repository.set_account_status(
            user_id, AccountStatus.SUSPENDED, suspended_until=until
        )
        if not updated:
            raise UserNotFound(f"User {user_id} not found")

        self.logger.info(f"Suspended user {user_id} for {days} days until {until.isoformat()}")
        return until

    async def reset_credential(self, user_id: UUID) -> CredentialReset:
        """
        Invalidate the user's credential and issue a one-time reset token.

        Only the token's hash is stored; the plain token is returned once so the
        administrator can hand it to the user.
        """
        token = secrets.token_urlsafe(24)
        token_hash = hashlib.sha256(token.encode("utf-8")).hexdigest()

        updated = await self.user_repository.set_credential(user_id, token_hash)
        if not updated:
            raise UserNotFound(f"User {user_id} not found")

        self.logger.info(f"Issued credential reset for user {user_id}")
        return CredentialReset(user_id=user_id, reset_token=token)

    async def delete(self, user_id: UUID, confirm: bool = False) -> None:
        """Permanently remove a user record. Irreversible."""
        if confirm is not True:
            raise ConfirmationRequired()

        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")

        deleted = await self.user_repository.delete(user_id)
        if not deleted:
            raise UserNotFound(f"User {user_id} not found")

        await self.directory.forget(user.email)
        self.logger.warning(f"Deleted user {user_id} ({user.email})")

    async def get_dashboard_stats(self) -> DashboardStats:
        counts: Dict[VerificationStatus, int] = await self.verification_repository.count_by_status()
        total_users = await self.user_repository.get_count()

        return DashboardStats(
            pending=counts.get(VerificationStatus.PENDING, 0),
            approved=counts.get(VerificationStatus.APPROVED, 0),
            rejected=counts.get(VerificationStatus.REJECTED, 0),
            total_users=total_users
        )

    async def list_requests(self, status: Optional[VerificationStatus] = None,
                            limit: int = 100, offset: int = 0) -> List[RequestListing]:
        requests = await self.verification_repository.list_requests(
            status=status, limit=limit, offset=offset
        )
        names = await self.directory.get_display_names(r.email for r in requests)

        return [
            RequestListing(request=r, applicant_name=names[r.email])
            for r in requests
        ]
