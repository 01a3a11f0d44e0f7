from .jwt_manager import JWTIdentityProvider
from .dependencies import (
    security_scheme,
    get_identity_provider,
    get_optional_applicant,
    get_current_applicant,
    require_admin
)

__all__ = [
    'JWTIdentityProvider',
    'security_scheme',
    'get_identity_provider',
    'get_optional_applicant',
    'get_current_applicant',
    'require_admin'
]
