import math
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
from uuid import uuid4


PROPERTY_TYPES = ["apartment", "villa", "plot"]
PROPERTY_STATUSES = ["pre-launch", "active", "under-construction", "completed", "sold-out"]
PROPERTY_ZONES = ["north", "south", "east", "west", "central"]


def finite_or_zero(value: Any) -> float:
    """Coerce a numeric field to a finite float, treating junk as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


@dataclass
class PropertyConfiguration:
    configuration: str
    price: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyConfiguration":
        return cls(
            configuration=str(data.get("configuration") or ""),
            price=finite_or_zero(data.get("price"))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"configuration": self.configuration, "price": self.price}


@dataclass
class Property:
    id: str
    name: str
    type: str
    status: str
    zone: str
    area: str
    developer: str = ""
    tags: List[str] = field(default_factory=list)
    configurations: List[PropertyConfiguration] = field(default_factory=list)
    overall_score: Optional[float] = None
    images: List[str] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, type: str, status: str, zone: str, area: str,
               developer: str = "", tags: List[str] = None,
               configurations: List[PropertyConfiguration] = None,
               overall_score: Optional[float] = None, images: List[str] = None):
        return cls(
            id=str(uuid4()),
            name=name,
            type=type,
            status=status,
            zone=zone,
            area=area,
            developer=developer,
            tags=tags or [],
            configurations=configurations or [],
            overall_score=overall_score,
            images=images or []
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Property":
        """Build a Property from the catalog's camelCase JSON shape.

        Optional keys may be missing or null; they become empty values.
        """
        configurations = [
            PropertyConfiguration.from_dict(config)
            for config in (data.get("configurations") or [])
            if isinstance(config, dict)
        ]
        overall_score = data.get("overallScore", data.get("overall_score"))
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            type=data.get("type") or "",
            status=data.get("status") or "",
            zone=data.get("zone") or "",
            area=data.get("area") or "",
            developer=data.get("developer") or "",
            tags=[str(tag) for tag in (data.get("tags") or [])],
            configurations=configurations,
            overall_score=overall_score,
            images=list(data.get("images") or [])
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "zone": self.zone,
            "area": self.area,
            "developer": self.developer,
            "tags": list(self.tags),
            "configurations": [config.to_dict() for config in self.configurations],
            "overallScore": self.overall_score,
            "images": list(self.images)
        }

    def has_tag(self, tag: str) -> bool:
        return tag in (self.tags or [])

    def has_layout(self, layout: str) -> bool:
        return any(layout in config.configuration for config in self.configurations or [])

    def get_base_score(self) -> float:
        return finite_or_zero(self.overall_score)

    def get_starting_price(self) -> Optional[float]:
        if self.configurations:
            return self.configurations[0].price
        return None
