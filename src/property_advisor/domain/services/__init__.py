from .recommendation_scorer import RecommendationScorer
from .recommendation_service import RecommendationService, RecommendationConfig
from .behavior_tracker import BehaviorTracker, DEFAULT_BEHAVIOR_KEY

__all__ = [
    'RecommendationScorer',
    'RecommendationService',
    'RecommendationConfig',
    'BehaviorTracker',
    'DEFAULT_BEHAVIOR_KEY'
]
