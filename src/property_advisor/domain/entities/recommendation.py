from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Tuple, Any

from .property import Property


class Intent(Enum):
    """Shopping motivation for a recommendation session"""
    INVESTMENT = "investment"
    END_USE = "end-use"
    NONE = ""

    @classmethod
    def parse(cls, value: Optional[str]) -> "Intent":
        if isinstance(value, Intent):
            return value
        try:
            return cls(value or "")
        except ValueError:
            return cls.NONE


class Confidence(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class UserPreferences:
    budget_range: Optional[Tuple[float, float]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserPreferences":
        if not data:
            return cls()
        budget_range = data.get("budgetRange", data.get("budget_range"))
        if budget_range and len(budget_range) == 2:
            return cls(budget_range=(budget_range[0], budget_range[1]))
        return cls()


@dataclass
class RecommendationScore:
    property_id: str
    score: int
    reasons: List[str]
    confidence: Confidence
    # Reasons that fired before the top-3 cut; confidence is based on this
    matched_signals: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertyId": self.property_id,
            "score": self.score,
            "reasons": list(self.reasons),
            "confidence": self.confidence.value
        }


@dataclass
class ScoredProperty:
    property: Property
    recommendation: RecommendationScore


@dataclass
class RecommendationAnalytics:
    total_recommendations: int
    average_score: int
    confidence_distribution: Dict[str, int] = field(default_factory=dict)
    intent_optimized: bool = False
    behavior_data_points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRecommendations": self.total_recommendations,
            "averageScore": self.average_score,
            "confidenceDistribution": dict(self.confidence_distribution),
            "intentOptimized": self.intent_optimized,
            "behaviorDataPoints": self.behavior_data_points
        }
