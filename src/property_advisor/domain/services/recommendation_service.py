import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from ..entities.property import Property
from ..entities.user_behavior import UserBehavior
from ..entities.recommendation import (
    Intent, Confidence, UserPreferences, ScoredProperty, RecommendationAnalytics
)
from .recommendation_scorer import RecommendationScorer, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class RecommendationConfig:
    """Configuration for recommendation generation"""
    default_limit: int = 6
    max_limit: int = 50
    recent_view_window: int = 3
    diversity_slots: int = 3
    pool_multiplier: int = 2


class RecommendationService:
    """Candidate selection, scoring and diversity-aware ranking.

    Generation is a pure function of the catalog and a behavior snapshot,
    so it can be recomputed on every request without coordination.
    """

    def __init__(self, config: Optional[RecommendationConfig] = None):
        self.config = config or RecommendationConfig()

    def generate(self,
                 properties: Sequence[Property],
                 behavior: Optional[UserBehavior] = None,
                 intent: Optional[str] = "",
                 preferences: Optional[UserPreferences] = None,
                 current_property: Optional[Property] = None,
                 limit: Optional[int] = None) -> List[ScoredProperty]:
        """Return at most ``limit`` scored properties in display order"""
        limit = self.config.default_limit if limit is None else limit
        if not properties or limit <= 0:
            return []

        behavior = behavior or UserBehavior.empty()
        candidates = self._select_candidates(properties, behavior, current_property)
        if not candidates:
            logger.debug("No candidates left after exclusions")
            return []

        scorer = RecommendationScorer(intent, preferences, behavior)
        scored = [
            ScoredProperty(property=candidate, recommendation=scorer.score(candidate, properties))
            for candidate in candidates
        ]

        # sorted() is stable, so equal scores keep catalog order
        ranked = sorted(scored, key=lambda item: item.recommendation.score, reverse=True)
        pool = ranked[:limit * self.config.pool_multiplier]

        recommendations = self._apply_diversity(pool, limit)
        logger.debug(
            f"Generated {len(recommendations)} recommendations from {len(candidates)} candidates "
            f"(intent={Intent.parse(intent).value or 'none'})"
        )
        return recommendations

    def analytics(self, recommendations: Sequence[ScoredProperty], intent: Optional[str] = "",
                  behavior: Optional[UserBehavior] = None) -> RecommendationAnalytics:
        """Summarize a recommendation list for display and debugging"""
        behavior = behavior or UserBehavior.empty()
        total_score = sum(item.recommendation.score for item in recommendations)
        average_score = total_score / len(recommendations) if recommendations else 0

        distribution = {confidence.value: 0 for confidence in (Confidence.HIGH, Confidence.MEDIUM, Confidence.LOW)}
        for item in recommendations:
            distribution[item.recommendation.confidence.value] += 1

        return RecommendationAnalytics(
            total_recommendations=len(recommendations),
            average_score=round_half_up(average_score),
            confidence_distribution=distribution,
            intent_optimized=Intent.parse(intent) is not Intent.NONE,
            behavior_data_points=behavior.count_data_points()
        )

    def _select_candidates(self, properties: Sequence[Property], behavior: UserBehavior,
                           current_property: Optional[Property]) -> List[Property]:
        # Only the latest views are hidden so older ones can resurface
        recently_viewed = set(behavior.get_recently_viewed(self.config.recent_view_window))
        current_id = current_property.id if current_property else None
        return [
            prop for prop in properties
            if prop.id != current_id and prop.id not in recently_viewed
        ]

    def _apply_diversity(self, pool: List[ScoredProperty], limit: int) -> List[ScoredProperty]:
        remaining = list(pool)
        selected: List[ScoredProperty] = []
        used_types: Set[str] = set()
        used_zones: Set[str] = set()

        while remaining and len(selected) < limit:
            index = 0
            if len(selected) < self.config.diversity_slots:
                index = next(
                    (
                        position for position, item in enumerate(remaining)
                        if item.property.type not in used_types or item.property.zone not in used_zones
                    ),
                    0
                )
            item = remaining.pop(index)
            selected.append(item)
            used_types.add(item.property.type)
            used_zones.add(item.property.zone)

        return selected
