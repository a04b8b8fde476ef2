from .property import Property, PropertyConfiguration
from .user_behavior import UserBehavior, BehaviorAction
from .recommendation import (
    Intent,
    Confidence,
    UserPreferences,
    RecommendationScore,
    ScoredProperty,
    RecommendationAnalytics
)

__all__ = [
    'Property',
    'PropertyConfiguration',
    'UserBehavior',
    'BehaviorAction',
    'Intent',
    'Confidence',
    'UserPreferences',
    'RecommendationScore',
    'ScoredProperty',
    'RecommendationAnalytics'
]
