"""
JWT Identity Provider

Resolves the caller behind a bearer token issued by the campus identity
service. Tokens are verified with a shared secret; nothing is issued here
except by ``create_token`` which exists for tooling and tests.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import jwt

from ...domain.entities.verification import Applicant
from ...domain.repositories.identity_provider import IdentityProvider
from ...infrastructure.data.config import AuthConfig


class JWTIdentityProvider(IdentityProvider):
    """Identity provider backed by HMAC-signed JWTs"""

    ADMIN_ROLE = "admin"

    def __init__(self, config: AuthConfig):
        self.logger = logging.getLogger(__name__)
        self.secret = config.jwt_secret
        self.algorithm = config.jwt_algorithm
        self.audience = config.audience
        self.admin_emails: List[str] = [e.lower() for e in config.admin_emails]

        self._token_stats = {
            "verified": 0,
            "expired": 0,
            "invalid": 0
        }

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a JWT

        Returns:
            Token payload if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_aud": self.audience is not None
                }
            )

            self._token_stats["verified"] += 1
            return payload

        except jwt.ExpiredSignatureError:
            self._token_stats["expired"] += 1
            self.logger.debug("Token has expired")
            return None

        except jwt.InvalidTokenError as e:
            self._token_stats["invalid"] += 1
            self.logger.warning(f"Invalid token: {e}")
            return None

    async def current_user(self, token: Optional[str]) -> Optional[Applicant]:
        if not token:
            return None

        payload = self.verify_token(token)
        if not payload:
            return None

        user_id = payload.get("user_id") or payload.get("sub")
        if not user_id:
            self.logger.warning("Token has no subject claim")
            return None

        email = payload.get("email")
        return Applicant(
            user_id=str(user_id),
            email=email,
            is_admin=self._is_admin(payload, email)
        )

    def _is_admin(self, payload: Dict[str, Any], email: Optional[str]) -> bool:
        roles = payload.get("roles") or []
        if payload.get("role") == self.ADMIN_ROLE or self.ADMIN_ROLE in roles:
            return True
        return bool(email) and email.lower() in self.admin_emails

    def create_token(self, user_id: str, email: Optional[str], role: Optional[str] = None,
                     expires_in: timedelta = timedelta(hours=1)) -> str:
        now = datetime.utcnow()
        claims: Dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + expires_in
        }
        if role:
            claims["role"] = role
        if self.audience:
            claims["aud"] = self.audience
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def get_token_stats(self) -> Dict[str, int]:
        return dict(self._token_stats)
