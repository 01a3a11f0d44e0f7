# Repository implementations
from .postgres_verification_repository import PostgresVerificationRepository
from .postgres_user_repository import PostgresUserRepository
from .postgres_report_repository import PostgresReportRepository
from .redis_cache_repository import RedisDisplayNameCache

__all__ = [
    'PostgresVerificationRepository',
    'PostgresUserRepository',
    'PostgresReportRepository',
    'RedisDisplayNameCache'
]
