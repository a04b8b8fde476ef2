from .recommendation_dto import (
    SmartRecommendationRequest,
    SmartRecommendationResponse,
    RecommendedProperty,
    RecommendationAnalyticsResponse,
    TrackBehaviorRequest,
    BehaviorPreferencesRequest,
    BehaviorResponse
)

__all__ = [
    'SmartRecommendationRequest',
    'SmartRecommendationResponse',
    'RecommendedProperty',
    'RecommendationAnalyticsResponse',
    'TrackBehaviorRequest',
    'BehaviorPreferencesRequest',
    'BehaviorResponse'
]
