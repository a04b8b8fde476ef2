"""
Unit tests for RecommendationService.

Tests candidate exclusion, ranking, the diversity pass and analytics.
"""

import pytest

from property_advisor.domain.entities.recommendation import Confidence
from property_advisor.domain.entities.user_behavior import UserBehavior
from property_advisor.domain.services.recommendation_service import (
    RecommendationService, RecommendationConfig
)


def ids(recommendations):
    return [item.property.id for item in recommendations]


class TestRecommendationGeneration:
    """Test cases for RecommendationService.generate()."""

    def setup_method(self):
        self.service = RecommendationService()

    def test_generation_is_deterministic(self, property_factory):
        catalog = property_factory.create_random_catalog(25)
        behavior = UserBehavior(clicked_features=["metro"], location_preferences=["east"])

        first = self.service.generate(catalog, behavior, "investment", limit=6)
        second = self.service.generate(catalog, behavior, "investment", limit=6)

        assert ids(first) == ids(second)
        assert [item.recommendation for item in first] == [item.recommendation for item in second]

    def test_investment_ranking_with_diversity(self, sample_catalog):
        recommendations = self.service.generate(sample_catalog, intent="investment")

        assert ids(recommendations) == ["p-east-roi", "p-villa", "p-family", "p-plot", "p-plain"]
        top = recommendations[0].recommendation
        assert top.score == 100
        assert top.confidence == Confidence.HIGH

    def test_current_property_is_excluded(self, sample_catalog):
        current = sample_catalog[0]

        recommendations = self.service.generate(sample_catalog, intent="investment",
                                                 current_property=current)

        assert current.id not in ids(recommendations)
        assert len(recommendations) == len(sample_catalog) - 1

    def test_recently_viewed_are_excluded(self, sample_catalog, behavior_factory):
        behavior = behavior_factory.create(viewed=["p-east-roi", "p-family", "p-villa", "p-plot"])

        recommendations = self.service.generate(sample_catalog, behavior)

        # Only the last three views are hidden, the first one is eligible again
        assert sorted(ids(recommendations)) == ["p-east-roi", "p-plain"]

    def test_limit_bounds_result(self, property_factory):
        catalog = property_factory.create_random_catalog(30)

        assert len(self.service.generate(catalog, limit=4)) == 4
        assert len(self.service.generate(catalog)) == 6
        assert len(self.service.generate(catalog[:2], limit=6)) == 2

    def test_no_duplicates_in_result(self, property_factory):
        catalog = property_factory.create_random_catalog(40)

        result = ids(self.service.generate(catalog, limit=12))

        assert len(result) == len(set(result))

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, sample_catalog, limit):
        assert self.service.generate(sample_catalog, limit=limit) == []

    def test_empty_catalog(self):
        assert self.service.generate([]) == []

    def test_everything_excluded(self, property_factory, behavior_factory):
        catalog = property_factory.create_batch(2)
        behavior = behavior_factory.create(viewed=[catalog[0].id])

        result = self.service.generate(catalog, behavior, current_property=catalog[1])

        assert result == []

    def test_equal_scores_keep_catalog_order(self, property_factory):
        catalog = [
            property_factory.create(id=f"same-{index}", zone=zone, overall_score=20)
            for index, zone in enumerate(["north", "south", "east", "west"])
        ]

        assert ids(self.service.generate(catalog)) == ["same-0", "same-1", "same-2", "same-3"]

    def test_config_default_limit(self, property_factory):
        service = RecommendationService(RecommendationConfig(default_limit=3))

        assert len(service.generate(property_factory.create_random_catalog(10))) == 3


class TestDiversity:

    def setup_method(self):
        self.service = RecommendationService()

    def test_villa_is_promoted_into_second_slot(self, property_factory):
        apartments = [
            property_factory.create(id=f"apt-{score}", zone="south", overall_score=score)
            for score in (90, 85, 80, 75)
        ]
        villa = property_factory.create(id="villa", type="villa", zone="west", overall_score=50)

        recommendations = self.service.generate(apartments + [villa], limit=4)

        assert ids(recommendations) == ["apt-90", "villa", "apt-85", "apt-80"]

    def test_villa_ranked_fifth_moves_into_first_three(self, property_factory):
        scores = [95, 90, 85, 80, 75, 70, 65, 60, 55, 50]
        catalog = [
            property_factory.create(id=f"c-{index}", zone="south", overall_score=score)
            for index, score in enumerate(scores)
        ]
        catalog[4] = property_factory.create(id="villa", type="villa", zone="west", overall_score=75)

        result = ids(self.service.generate(catalog))

        assert "villa" in result[:3]
        assert len(result) == 6

    def test_new_zone_alone_counts_as_diverse(self, property_factory):
        catalog = [
            property_factory.create(id="a", zone="south", overall_score=90),
            property_factory.create(id="b", zone="south", overall_score=80),
            property_factory.create(id="c", zone="east", overall_score=70),
        ]

        assert ids(self.service.generate(catalog, limit=3)) == ["a", "c", "b"]

    def test_candidates_outside_pool_are_not_promoted(self, property_factory):
        apartments = [
            property_factory.create(id=f"apt-{score}", zone="south", overall_score=score)
            for score in (90, 85, 80, 75)
        ]
        villa = property_factory.create(id="villa", type="villa", zone="west", overall_score=10)

        # limit 2 gives a pool of the top 4, which holds only apartments
        recommendations = self.service.generate(apartments + [villa], limit=2)

        assert ids(recommendations) == ["apt-90", "apt-85"]

    def test_diversity_only_applies_to_first_slots(self, property_factory):
        catalog = [
            property_factory.create(id="a1", zone="south", overall_score=90),
            property_factory.create(id="a2", zone="south", overall_score=85),
            property_factory.create(id="a3", zone="south", overall_score=80),
            property_factory.create(id="a4", zone="south", overall_score=75),
            property_factory.create(id="v1", type="villa", zone="west", overall_score=60),
            property_factory.create(id="p1", type="plot", zone="north", overall_score=50),
            property_factory.create(id="v2", type="villa", zone="central", overall_score=40),
        ]

        recommendations = self.service.generate(catalog, limit=5)

        assert ids(recommendations) == ["a1", "v1", "p1", "a2", "a3"]


class TestRecommendationAnalytics:

    def setup_method(self):
        self.service = RecommendationService()

    def test_analytics_summary(self, sample_catalog, behavior_factory):
        behavior = behavior_factory.create(viewed=["elsewhere"], clicked_features=["park"])
        recommendations = self.service.generate(sample_catalog, behavior, "investment")

        analytics = self.service.analytics(recommendations, "investment", behavior)

        assert analytics.total_recommendations == len(recommendations)
        assert analytics.intent_optimized is True
        assert analytics.behavior_data_points == 2
        assert sum(analytics.confidence_distribution.values()) == len(recommendations)
        assert analytics.confidence_distribution["high"] == 1

    def test_average_score_is_rounded(self, sample_catalog):
        recommendations = self.service.generate(sample_catalog, intent="investment")

        analytics = self.service.analytics(recommendations, "investment")

        # (100 + 47 + 45 + 45 + 10) / 5
        assert analytics.average_score == 49

    def test_empty_analytics(self):
        analytics = self.service.analytics([], "")

        assert analytics.total_recommendations == 0
        assert analytics.average_score == 0
        assert analytics.confidence_distribution == {"high": 0, "medium": 0, "low": 0}
        assert analytics.intent_optimized is False
        assert analytics.behavior_data_points == 0

    def test_to_dict_uses_camel_case(self, sample_catalog):
        analytics = self.service.analytics(self.service.generate(sample_catalog), "end-use")

        data = analytics.to_dict()

        assert data["intentOptimized"] is True
        assert set(data) == {
            "totalRecommendations", "averageScore", "confidenceDistribution",
            "intentOptimized", "behaviorDataPoints"
        }
