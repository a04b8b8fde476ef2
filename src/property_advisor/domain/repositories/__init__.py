from .behavior_repository import BehaviorRepository
from .property_repository import PropertyRepository, CatalogUnavailableError

__all__ = [
    'BehaviorRepository',
    'PropertyRepository',
    'CatalogUnavailableError'
]
