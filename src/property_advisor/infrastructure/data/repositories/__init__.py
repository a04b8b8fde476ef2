from .redis_behavior_repository import RedisBehaviorRepository
from .json_file_behavior_repository import JsonFileBehaviorRepository
from .http_property_repository import HttpPropertyRepository

__all__ = [
    'RedisBehaviorRepository',
    'JsonFileBehaviorRepository',
    'HttpPropertyRepository'
]
