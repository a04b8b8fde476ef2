"""
Multi-factor scoring of a candidate property for a recommendation session.

Scores are additive points on top of the property's overall quality score.
They are unbounded and only meaningful relative to other candidates scored
against the same behavior snapshot.
"""

import math
import logging
from typing import List, Optional, Sequence

from ..entities.property import Property, finite_or_zero
from ..entities.user_behavior import UserBehavior
from ..entities.recommendation import (
    Intent, Confidence, UserPreferences, RecommendationScore
)

logger = logging.getLogger(__name__)

MAX_REASONS = 3
BUDGET_SCALE = 100

INVESTMENT_ZONES = {"east", "north"}
CHILD_FRIENDLY_TAGS = ("park", "children-play-area")
FAMILY_LAYOUT = "3 BHK"

REASON_HIGH_ROI = "High ROI potential"
REASON_RENTAL_INCOME = "Strong rental income"
REASON_INVESTMENT_LOCATION = "Investment-friendly location"
REASON_PRE_LAUNCH = "Pre-launch pricing advantage"
REASON_METRO = "Metro connectivity boosts value"
REASON_FAMILIES = "Perfect for families"
REASON_SCHOOLS = "Good schools nearby"
REASON_CHILDREN = "Great for children"
REASON_FAMILY_LAYOUT = "Spacious family layout"
REASON_PREFERRED_TYPE = "Matches your preferred property type"
REASON_PREFERRED_AREA = "In your preferred area"
REASON_BUDGET = "Within your budget"
REASON_FEATURES = "Has features you've shown interest in"
REASON_SIMILAR_VIEWED = "Similar to properties you've viewed"
REASON_TRENDING = "Trending property"
REASON_DEVELOPER = "Reputed developer"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RecommendationScorer:
    """Scores one property against an intent, preferences and behavior history"""

    def __init__(self, intent: Optional[str] = "", preferences: Optional[UserPreferences] = None,
                 behavior: Optional[UserBehavior] = None):
        self.intent = Intent.parse(intent)
        self.preferences = preferences or UserPreferences()
        self.behavior = behavior or UserBehavior.empty()

    def score(self, property: Property, all_properties: Sequence[Property] = ()) -> RecommendationScore:
        score = property.get_base_score()
        reasons: List[str] = []
        tags = property.tags or []

        if self.intent is Intent.INVESTMENT:
            score += self._investment_bonus(property, tags, reasons)
        elif self.intent is Intent.END_USE:
            score += self._end_use_bonus(property, tags, reasons)

        # Type and location preferences
        type_matches = sum(
            1 for preferred in self.behavior.property_type_preferences
            if preferred == property.type
        )
        if type_matches > 0:
            score += type_matches * 5
            reasons.append(REASON_PREFERRED_TYPE)

        area = (property.area or "").lower()
        location_matches = sum(
            1 for location in self.behavior.location_preferences
            if location.lower() in area or property.zone == location
        )
        if location_matches > 0:
            score += location_matches * 3
            reasons.append(REASON_PREFERRED_AREA)

        if self._fits_budget(property):
            score += 15
            reasons.append(REASON_BUDGET)

        clicked = [feature.lower() for feature in self.behavior.clicked_features]
        matching_features = [
            tag for tag in tags
            if any(feature in tag.lower() for feature in clicked)
        ]
        score += len(matching_features) * 2
        if matching_features:
            reasons.append(REASON_FEATURES)

        if self._resembles_viewed(property, all_properties):
            score += 8
            reasons.append(REASON_SIMILAR_VIEWED)

        if property.status == "active" and "trending" in tags:
            score += 5
            reasons.append(REASON_TRENDING)

        if "premium-developer" in tags:
            score += 7
            reasons.append(REASON_DEVELOPER)

        return RecommendationScore(
            property_id=property.id,
            score=round_half_up(score),
            reasons=reasons[:MAX_REASONS],
            confidence=self._confidence(len(reasons), score),
            matched_signals=len(reasons)
        )

    def _investment_bonus(self, property: Property, tags: List[str], reasons: List[str]) -> float:
        bonus = 0
        if "high-roi" in tags:
            bonus += 20
            reasons.append(REASON_HIGH_ROI)
        if "rental-income" in tags:
            bonus += 15
            reasons.append(REASON_RENTAL_INCOME)
        if property.zone in INVESTMENT_ZONES:
            bonus += 10
            reasons.append(REASON_INVESTMENT_LOCATION)
        if property.status == "pre-launch":
            bonus += 12
            reasons.append(REASON_PRE_LAUNCH)
        if "metro-connectivity" in tags:
            bonus += 8
            reasons.append(REASON_METRO)
        return bonus

    def _end_use_bonus(self, property: Property, tags: List[str], reasons: List[str]) -> float:
        bonus = 0
        if "family-friendly" in tags:
            bonus += 20
            reasons.append(REASON_FAMILIES)
        if "school-nearby" in tags:
            bonus += 15
            reasons.append(REASON_SCHOOLS)
        if any(tag in tags for tag in CHILD_FRIENDLY_TAGS):
            bonus += 12
            reasons.append(REASON_CHILDREN)
        if property.has_layout(FAMILY_LAYOUT):
            bonus += 10
            reasons.append(REASON_FAMILY_LAYOUT)
        return bonus

    def _fits_budget(self, property: Property) -> bool:
        budget_range = self.preferences.budget_range
        if not budget_range:
            return False

        # Bounds and prices are brought onto the crore scale the same way
        min_budget = finite_or_zero(budget_range[0]) / BUDGET_SCALE
        max_budget = finite_or_zero(budget_range[1]) / BUDGET_SCALE
        return any(
            min_budget <= finite_or_zero(config.price) / BUDGET_SCALE <= max_budget
            for config in property.configurations or []
        )

    def _resembles_viewed(self, property: Property, all_properties: Sequence[Property]) -> bool:
        viewed_ids = set(self.behavior.viewed_properties)
        if not viewed_ids:
            return False

        tags = set(property.tags or [])
        for viewed in all_properties:
            if viewed.id not in viewed_ids:
                continue
            if viewed.zone == property.zone or viewed.type == property.type:
                return True
            if tags.intersection(viewed.tags or []):
                return True
        return False

    @staticmethod
    def _confidence(signal_count: int, score: float) -> Confidence:
        if signal_count >= 4 and score >= 80:
            return Confidence.HIGH
        if signal_count >= 2 and score >= 60:
            return Confidence.MEDIUM
        return Confidence.LOW
