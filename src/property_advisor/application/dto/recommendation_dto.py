from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from ...domain.entities.user_behavior import BehaviorAction, UserBehavior
from ...domain.entities.recommendation import RecommendationAnalytics


class SmartRecommendationRequest(BaseModel):
    """Request model for intent-aware recommendations"""
    session_key: str = Field(default="userBehavior", min_length=1, max_length=128,
                             description="Behavior store key of the requesting client")
    intent: str = Field(default="", description="'investment', 'end-use' or empty")
    current_property_id: Optional[str] = Field(None, description="Property currently being viewed")
    budget_range: Optional[Tuple[float, float]] = Field(None, description="Budget bounds as [min, max]")
    limit: Optional[int] = Field(None, ge=1, description="Number of recommendations; server default when omitted")

    @field_validator('intent')
    @classmethod
    def validate_intent(cls, v):
        allowed_intents = ["investment", "end-use", ""]
        if v not in allowed_intents:
            raise ValueError(f'intent must be one of: {", ".join(repr(i) for i in allowed_intents)}')
        return v

    @field_validator('budget_range')
    @classmethod
    def validate_budget_range(cls, v):
        if v is not None and v[0] > v[1]:
            raise ValueError('budget_range minimum must not exceed maximum')
        return v


class RecommendedProperty(BaseModel):
    """Recommendation card for one property"""
    property_id: str
    name: str
    slug: str
    area: str
    zone: str
    property_type: str
    status: str
    price_display: str
    image: Optional[str] = None
    score: int
    reasons: List[str] = Field(default_factory=list, max_length=3)
    confidence: str
    rank: int = Field(..., ge=1, description="Position in recommendation list")


class RecommendationAnalyticsResponse(BaseModel):
    total_recommendations: int
    average_score: int
    confidence_distribution: Dict[str, int]
    intent_optimized: bool
    behavior_data_points: int

    @classmethod
    def from_analytics(cls, analytics: RecommendationAnalytics) -> "RecommendationAnalyticsResponse":
        return cls(
            total_recommendations=analytics.total_recommendations,
            average_score=analytics.average_score,
            confidence_distribution=analytics.confidence_distribution,
            intent_optimized=analytics.intent_optimized,
            behavior_data_points=analytics.behavior_data_points
        )


class SmartRecommendationResponse(BaseModel):
    """Response model for smart recommendations"""
    recommendations: List[RecommendedProperty]
    title: str
    description: str
    intent: str
    analytics: RecommendationAnalyticsResponse
    generated_at: datetime = Field(default_factory=datetime.now)
    response_time_ms: float


class TrackBehaviorRequest(BaseModel):
    """Request model for tracking one user action"""
    action: str = Field(..., description="Tracked action name")
    property_id: Optional[str] = Field(None, description="Property the action refers to")
    search_term: Optional[str] = Field(None, description="Free-text search query")
    price_range: Optional[Tuple[float, float]] = Field(None, description="Search price bounds")
    time_spent: Optional[float] = Field(None, ge=0, description="Dwell time on the property")
    feature: Optional[str] = Field(None, description="Clicked feature tag")

    @field_validator('action')
    @classmethod
    def validate_action(cls, v):
        allowed_actions = [action.value for action in BehaviorAction]
        if v not in allowed_actions:
            raise ValueError(f'action must be one of: {", ".join(allowed_actions)}')
        return v

    def to_payload(self) -> Dict[str, Any]:
        """Translate into the payload shape the behavior store records"""
        payload: Dict[str, Any] = {}
        if self.property_id is not None:
            payload["propertyId"] = self.property_id
        if self.search_term is not None:
            payload["searchTerm"] = self.search_term
        if self.price_range is not None:
            payload["priceRange"] = list(self.price_range)
        if self.time_spent is not None:
            payload["timeSpent"] = self.time_spent
        if self.feature is not None:
            payload["feature"] = self.feature
        return payload

    def missing_fields(self) -> List[str]:
        required = {
            BehaviorAction.VIEW_PROPERTY.value: ["property_id"],
            BehaviorAction.SAVE_PROPERTY.value: ["property_id"],
            BehaviorAction.SEARCH.value: ["search_term"],
            BehaviorAction.TIME_SPENT.value: ["property_id", "time_spent"],
            BehaviorAction.CLICK_FEATURE.value: ["feature"],
        }
        return [name for name in required[self.action] if getattr(self, name) is None]


class BehaviorPreferencesRequest(BaseModel):
    """Externally supplied location and property-type preferences"""
    location_preferences: Optional[List[str]] = None
    property_type_preferences: Optional[List[str]] = None


class BehaviorResponse(BaseModel):
    session_key: str
    viewed_properties: List[str]
    search_history: List[str]
    saved_properties: List[str]
    price_range_history: List[Tuple[float, float]]
    location_preferences: List[str]
    property_type_preferences: List[str]
    time_spent_on_properties: Dict[str, float]
    clicked_features: List[str]
    data_points: int

    @classmethod
    def from_behavior(cls, session_key: str, behavior: UserBehavior) -> "BehaviorResponse":
        return cls(
            session_key=session_key,
            viewed_properties=behavior.viewed_properties,
            search_history=behavior.search_history,
            saved_properties=behavior.saved_properties,
            price_range_history=behavior.price_range_history,
            location_preferences=behavior.location_preferences,
            property_type_preferences=behavior.property_type_preferences,
            time_spent_on_properties=behavior.time_spent_on_properties,
            clicked_features=behavior.clicked_features,
            data_points=behavior.count_data_points()
        )
