"""
Global pytest configuration and fixtures for the recommendation test suite.

Provides entity factories, storage backends on temporary directories and a
FastAPI app wired to mocked repositories.
"""

import os
import pytest
from unittest.mock import Mock, AsyncMock

from fastapi import FastAPI

from property_advisor.domain.services.behavior_tracker import BehaviorTracker
from property_advisor.domain.services.recommendation_service import RecommendationService
from property_advisor.infrastructure.data.repositories.json_file_behavior_repository import JsonFileBehaviorRepository
from property_advisor.application.api.routers import behavior_router, health_router, recommendation_router
from tests.utils.data_factories import PropertyFactory, BehaviorFactory, FactoryConfig

os.environ["TESTING"] = "1"


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        if "test_application" in path:
            item.add_marker(pytest.mark.api)
        if "repositor" in path:
            item.add_marker(pytest.mark.db)


# =======================
# Entity Fixtures
# =======================

@pytest.fixture
def property_factory() -> PropertyFactory:
    return PropertyFactory(FactoryConfig(seed=42))


@pytest.fixture
def behavior_factory() -> BehaviorFactory:
    return BehaviorFactory()


@pytest.fixture
def sample_catalog(property_factory):
    """A small catalog mixing types, zones and signals."""
    return [
        property_factory.create(id="p-east-roi", zone="east", status="pre-launch",
                                tags=["high-roi", "metro-connectivity"], overall_score=50),
        property_factory.create(id="p-family", zone="south", status="active",
                                tags=["family-friendly", "school-nearby", "park"], overall_score=45),
        property_factory.create(id="p-villa", type="villa", zone="west", status="completed",
                                tags=["premium-developer"], overall_score=40),
        property_factory.create(id="p-plot", type="plot", zone="north", status="active",
                                tags=["trending"], overall_score=30),
        property_factory.create(id="p-plain", overall_score=10),
    ]


# =======================
# Storage Fixtures
# =======================

@pytest.fixture
def file_repository(tmp_path) -> JsonFileBehaviorRepository:
    return JsonFileBehaviorRepository(tmp_path / "behavior")


@pytest.fixture
def behavior_tracker(file_repository) -> BehaviorTracker:
    return BehaviorTracker(file_repository)


@pytest.fixture
def mock_property_repository(sample_catalog):
    repository = Mock()
    repository.get_all = AsyncMock(return_value=sample_catalog)
    repository.get_by_id = AsyncMock(return_value=None)
    repository.health_check = AsyncMock(return_value=True)
    return repository


@pytest.fixture
def mock_repository_factory(file_repository, mock_property_repository):
    """Repository factory double backed by a real file store and a mocked catalog."""
    factory = Mock()
    factory.get_behavior_repository.return_value = file_repository
    factory.get_property_repository.return_value = mock_property_repository
    factory.create_behavior_tracker.side_effect = (
        lambda key=None: BehaviorTracker(file_repository, key or "userBehavior")
    )
    factory.health_check = AsyncMock(return_value={
        "behavior_store": True, "catalog": True, "overall": True
    })
    return factory


@pytest.fixture
def test_app(mock_repository_factory) -> FastAPI:
    """FastAPI app with the production routers and mocked data layer."""
    app = FastAPI()
    app.state.repository_factory = mock_repository_factory
    app.state.recommendation_service = RecommendationService()
    app.include_router(health_router.router, prefix="/health")
    app.include_router(recommendation_router.router, prefix="/api/v1/recommendations")
    app.include_router(behavior_router.router, prefix="/api/v1/behavior")
    return app
