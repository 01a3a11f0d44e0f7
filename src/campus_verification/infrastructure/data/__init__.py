# Data infrastructure layer
from .config import DataConfig, DatabaseConfig, RedisConfig, StorageConfig, AuthConfig, CacheConfig
from .repository_factory import (
    RepositoryFactory,
    get_repository_factory,
    close_repository_factory
)
from .repositories import (
    PostgresVerificationRepository,
    PostgresUserRepository,
    PostgresReportRepository,
    RedisDisplayNameCache
)

__all__ = [
    # Configuration
    'DataConfig',
    'DatabaseConfig',
    'RedisConfig',
    'StorageConfig',
    'AuthConfig',
    'CacheConfig',

    # Factory and management
    'RepositoryFactory',
    'get_repository_factory',
    'close_repository_factory',

    # Repository implementations
    'PostgresVerificationRepository',
    'PostgresUserRepository',
    'PostgresReportRepository',
    'RedisDisplayNameCache'
]
