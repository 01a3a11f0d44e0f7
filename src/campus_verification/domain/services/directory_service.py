import logging
from typing import Dict, Iterable

from ..repositories.name_cache import DisplayNameCache
from ..repositories.user_repository import UserRepository

UNKNOWN_USER_NAME = "Unknown user"


class UserDirectoryService:
    """Resolves display names by email through an injected cache."""

    def __init__(self, user_repository: UserRepository, name_cache: DisplayNameCache):
        self.user_repository = user_repository
        self.name_cache = name_cache
        self.logger = logging.getLogger(__name__)

    async def get_display_name(self, email: str) -> str:
        if not email or not email.strip():
            return UNKNOWN_USER_NAME

        cached = await self.name_cache.get(email)
        if cached is not None:
            return cached

        user = await self.user_repository.get_by_email(email)
        if user is None:
            # misses are not cached so a later registration shows up immediately
            return UNKNOWN_USER_NAME

        name = user.display_name
        await self.name_cache.set(email, name)
        return name

    async def get_display_names(self, emails: Iterable[str]) -> Dict[str, str]:
        names = {}
        for email in emails:
            if email not in names:
                names[email] = await self.get_display_name(email)
        return names

    async def forget(self, email: str):
        await self.name_cache.invalidate(email)
