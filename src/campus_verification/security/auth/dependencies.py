"""
FastAPI Authentication Dependencies

Resolves the applicant behind the bearer token and guards admin routes.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ...domain.entities.verification import Applicant
from ...domain.repositories.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)

security_scheme = HTTPBearer(auto_error=False)


def get_identity_provider(request: Request) -> IdentityProvider:
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity provider not available"
        )
    return provider


async def get_optional_applicant(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    provider: IdentityProvider = Depends(get_identity_provider)
) -> Optional[Applicant]:
    """Current applicant, or None when the request carries no valid token"""
    token = credentials.credentials if credentials else None
    return await provider.current_user(token)


async def get_current_applicant(
    applicant: Optional[Applicant] = Depends(get_optional_applicant)
) -> Applicant:
    """Current applicant (required authentication)"""
    if applicant is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return applicant


async def require_admin(
    applicant: Applicant = Depends(get_current_applicant)
) -> Applicant:
    """Current applicant, who must hold the admin role"""
    if not applicant.is_admin:
        logger.warning(f"Non-admin user {applicant.user_id} attempted an admin action")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required"
        )
    return applicant
