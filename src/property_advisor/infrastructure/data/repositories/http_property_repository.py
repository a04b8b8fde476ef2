import asyncio
import logging
from typing import List, Optional, Any

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from ....domain.entities.property import Property
from ....domain.repositories.property_repository import PropertyRepository, CatalogUnavailableError
from ..config import CatalogConfig


class HttpPropertyRepository(PropertyRepository):
    """Reads the property catalog from the listings API over HTTP"""

    def __init__(self, config: CatalogConfig, session: Optional[ClientSession] = None):
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = logging.getLogger(__name__)

    async def initialize(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"Accept": "application/json"}
            )
            self._owns_session = True
        self.logger.info(f"Catalog client ready for {self.config.properties_url}")

    async def close(self):
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None

    async def get_all(self) -> List[Property]:
        payload = await self._get_json(self.config.properties_url)
        if not isinstance(payload, list):
            raise CatalogUnavailableError("Catalog response is not a list of properties")

        properties = []
        for item in payload:
            try:
                properties.append(Property.from_dict(item))
            except (KeyError, TypeError, AttributeError) as e:
                self.logger.warning(f"Skipping malformed catalog entry: {e}")
        self.logger.debug(f"Fetched {len(properties)} properties from catalog")
        return properties

    async def get_by_id(self, property_id: str) -> Optional[Property]:
        url = f"{self.config.properties_url}/{property_id}"
        payload = await self._get_json(url, allow_missing=True)
        if payload is None:
            return None
        try:
            return Property.from_dict(payload)
        except (KeyError, TypeError, AttributeError) as e:
            raise CatalogUnavailableError(f"Malformed property {property_id}: {e}") from e

    async def health_check(self) -> bool:
        try:
            await self._get_json(self.config.properties_url)
            return True
        except CatalogUnavailableError as e:
            self.logger.error(f"Catalog health check failed: {e}")
            return False

    async def _get_json(self, url: str, allow_missing: bool = False) -> Any:
        if self.session is None:
            await self.initialize()

        try:
            async with self.session.get(url) as response:
                if allow_missing and response.status == 404:
                    return None
                if response.status != 200:
                    raise CatalogUnavailableError(f"Catalog returned HTTP {response.status} for {url}")
                return await response.json()
        except CatalogUnavailableError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.error(f"Failed to fetch {url}: {e}")
            raise CatalogUnavailableError(str(e)) from e
