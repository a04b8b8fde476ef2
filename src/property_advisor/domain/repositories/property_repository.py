from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.property import Property


class CatalogUnavailableError(Exception):
    """Raised when the property catalog cannot be fetched"""


class PropertyRepository(ABC):
    
    @abstractmethod
    async def get_all(self) -> List[Property]:
        pass
    
    @abstractmethod
    async def get_by_id(self, property_id: str) -> Optional[Property]:
        pass
    
    @abstractmethod
    async def health_check(self) -> bool:
        pass
