import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Tuple, Any

from .property import finite_or_zero

logger = logging.getLogger(__name__)


class BehaviorAction(Enum):
    """Actions that mutate a user's behavior history"""
    VIEW_PROPERTY = "view_property"
    SAVE_PROPERTY = "save_property"
    SEARCH = "search"
    TIME_SPENT = "time_spent"
    CLICK_FEATURE = "click_feature"


REQUIRED_PAYLOAD_KEYS = {
    BehaviorAction.VIEW_PROPERTY: "propertyId",
    BehaviorAction.SAVE_PROPERTY: "propertyId",
    BehaviorAction.SEARCH: "searchTerm",
    BehaviorAction.TIME_SPENT: "propertyId",
    BehaviorAction.CLICK_FEATURE: "feature",
}


@dataclass
class UserBehavior:
    """Interaction history of one client, persisted across sessions.

    Identifier lists are append-only and deduplicated, search history is
    append-only, and dwell times are overwritten per property.
    """
    viewed_properties: List[str] = field(default_factory=list)
    search_history: List[str] = field(default_factory=list)
    saved_properties: List[str] = field(default_factory=list)
    price_range_history: List[Tuple[float, float]] = field(default_factory=list)
    location_preferences: List[str] = field(default_factory=list)
    property_type_preferences: List[str] = field(default_factory=list)
    time_spent_on_properties: Dict[str, float] = field(default_factory=dict)
    clicked_features: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "UserBehavior":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserBehavior":
        """Rebuild from the stored JSON object.

        Raises ValueError when the payload does not have the stored shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Behavior payload must be an object, got {type(data).__name__}")

        def string_list(key: str) -> List[str]:
            value = data.get(key, [])
            if not isinstance(value, list):
                raise ValueError(f"Behavior field {key} must be a list")
            return [str(item) for item in value]

        price_ranges = data.get("priceRangeHistory", [])
        if not isinstance(price_ranges, list):
            raise ValueError("Behavior field priceRangeHistory must be a list")
        parsed_ranges = []
        for price_range in price_ranges:
            if not isinstance(price_range, (list, tuple)) or len(price_range) != 2:
                raise ValueError(f"Invalid price range entry: {price_range!r}")
            parsed_ranges.append((finite_or_zero(price_range[0]), finite_or_zero(price_range[1])))

        time_spent = data.get("timeSpentOnProperties", {})
        if not isinstance(time_spent, dict):
            raise ValueError("Behavior field timeSpentOnProperties must be an object")

        return cls(
            viewed_properties=string_list("viewedProperties"),
            search_history=string_list("searchHistory"),
            saved_properties=string_list("savedProperties"),
            price_range_history=parsed_ranges,
            location_preferences=string_list("locationPreferences"),
            property_type_preferences=string_list("propertyTypePreferences"),
            time_spent_on_properties={
                str(key): finite_or_zero(value) for key, value in time_spent.items()
            },
            clicked_features=string_list("clickedFeatures")
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "viewedProperties": list(self.viewed_properties),
            "searchHistory": list(self.search_history),
            "savedProperties": list(self.saved_properties),
            "priceRangeHistory": [[low, high] for low, high in self.price_range_history],
            "locationPreferences": list(self.location_preferences),
            "propertyTypePreferences": list(self.property_type_preferences),
            "timeSpentOnProperties": dict(self.time_spent_on_properties),
            "clickedFeatures": list(self.clicked_features)
        }

    def record(self, action: str, data: Dict[str, Any]) -> bool:
        """Apply a tracked action in place.

        Returns False, leaving the history untouched, when the action is unknown
        or the payload lacks the key the action records.
        """
        try:
            behavior_action = BehaviorAction(action)
        except ValueError:
            logger.warning(f"Ignoring unknown behavior action: {action}")
            return False

        required_key = REQUIRED_PAYLOAD_KEYS[behavior_action]
        if data.get(required_key) is None:
            logger.warning(f"Ignoring {action} without {required_key}")
            return False

        if behavior_action is BehaviorAction.VIEW_PROPERTY:
            self._append_unique(self.viewed_properties, data.get("propertyId"))
        elif behavior_action is BehaviorAction.SAVE_PROPERTY:
            self._append_unique(self.saved_properties, data.get("propertyId"))
        elif behavior_action is BehaviorAction.SEARCH:
            self.search_history.append(data.get("searchTerm"))
            price_range = data.get("priceRange")
            if price_range:
                low, high = price_range
                self.price_range_history.append((finite_or_zero(low), finite_or_zero(high)))
        elif behavior_action is BehaviorAction.TIME_SPENT:
            self.time_spent_on_properties[data.get("propertyId")] = finite_or_zero(data.get("timeSpent"))
        elif behavior_action is BehaviorAction.CLICK_FEATURE:
            self._append_unique(self.clicked_features, data.get("feature"))
        return True

    def set_preferences(self, location_preferences: List[str] = None,
                        property_type_preferences: List[str] = None):
        """Replace externally supplied location/type preferences"""
        if location_preferences is not None:
            self.location_preferences = list(location_preferences)
        if property_type_preferences is not None:
            self.property_type_preferences = list(property_type_preferences)

    def get_recently_viewed(self, count: int = 3) -> List[str]:
        if count <= 0:
            return []
        return self.viewed_properties[-count:]

    def count_data_points(self) -> int:
        return (
            len(self.viewed_properties)
            + len(self.search_history)
            + len(self.saved_properties)
            + len(self.price_range_history)
            + len(self.location_preferences)
            + len(self.property_type_preferences)
            + len(self.time_spent_on_properties)
            + len(self.clicked_features)
        )

    @staticmethod
    def _append_unique(values: List[str], value: Any):
        if value not in values:
            values.append(value)
