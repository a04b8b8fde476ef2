# Data infrastructure layer
from .config import DataConfig, RedisConfig, CatalogConfig, BehaviorStoreConfig, RecommendationSettings
from .repository_factory import (
    RepositoryFactory,
    get_repository_factory,
    close_repository_factory
)
from .repositories import (
    RedisBehaviorRepository,
    JsonFileBehaviorRepository,
    HttpPropertyRepository
)

__all__ = [
    # Configuration
    'DataConfig',
    'RedisConfig',
    'CatalogConfig',
    'BehaviorStoreConfig',
    'RecommendationSettings',

    # Factory and management
    'RepositoryFactory',
    'get_repository_factory',
    'close_repository_factory',

    # Repository implementations
    'RedisBehaviorRepository',
    'JsonFileBehaviorRepository',
    'HttpPropertyRepository'
]
