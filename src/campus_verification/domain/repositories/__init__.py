from .verification_repository import VerificationRepository
from .user_repository import UserRepository
from .report_repository import ReportRepository
from .blob_store import BlobStore
from .identity_provider import IdentityProvider
from .name_cache import DisplayNameCache

__all__ = [
    'VerificationRepository',
    'UserRepository',
    'ReportRepository',
    'BlobStore',
    'IdentityProvider',
    'DisplayNameCache',
]
