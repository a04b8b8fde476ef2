"""
Recommendation API router for intent-aware property recommendations.

Recommendations are recomputed on every call from the current catalog and
the caller's stored behavior history; nothing is cached.
"""

import time
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ....domain.entities.property import Property
from ....domain.entities.recommendation import ScoredProperty, UserPreferences
from ....domain.repositories.property_repository import CatalogUnavailableError
from ....domain.services.recommendation_service import RecommendationService
from ...dto.recommendation_dto import (
    SmartRecommendationRequest, SmartRecommendationResponse,
    RecommendedProperty, RecommendationAnalyticsResponse
)
from ...formatting import intent_heading, property_slug, price_display

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository_factory(request: Request):
    """Dependency to get repository factory from app state"""
    return request.app.state.repository_factory


def get_recommendation_service(request: Request) -> RecommendationService:
    """Dependency to get the recommendation service from app state"""
    return request.app.state.recommendation_service


@router.post("/smart", response_model=SmartRecommendationResponse)
async def get_smart_recommendations(
    recommendation_request: SmartRecommendationRequest,
    repository_factory = Depends(get_repository_factory),
    recommendation_service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Get intent-aware property recommendations for a client.

    Candidates are scored on:
    - Investment or end-use signals for the requested intent
    - Stored type/location preferences and clicked features
    - Budget fit and similarity to previously viewed properties
    - Trending and developer reputation tags

    The first results are diversified across property type and zone.
    """
    start_time = time.time()

    max_limit = recommendation_service.config.max_limit
    if recommendation_request.limit is not None and recommendation_request.limit > max_limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must not exceed {max_limit}"
        )

    try:
        logger.info(
            f"Processing smart recommendation request for {recommendation_request.session_key}, "
            f"intent={recommendation_request.intent or 'none'}, "
            f"limit={recommendation_request.limit or recommendation_service.config.default_limit}"
        )

        try:
            property_repo = repository_factory.get_property_repository()
            tracker = repository_factory.create_behavior_tracker(recommendation_request.session_key)
        except Exception as e:
            logger.error(f"Failed to get repositories: {e}")
            raise HTTPException(
                status_code=500,
                detail="Internal server error: Repository initialization failed"
            )

        behavior = await tracker.load()

        try:
            properties = await property_repo.get_all()
            logger.debug(f"Retrieved {len(properties)} catalog properties")
        except CatalogUnavailableError as e:
            logger.error(f"Property catalog unavailable: {e}")
            raise HTTPException(
                status_code=503,
                detail="Property catalog is currently unavailable"
            )

        current_property = await _resolve_current_property(
            recommendation_request.current_property_id, properties, property_repo
        )

        recommendations = recommendation_service.generate(
            properties,
            behavior=behavior,
            intent=recommendation_request.intent,
            preferences=UserPreferences(budget_range=recommendation_request.budget_range),
            current_property=current_property,
            limit=recommendation_request.limit
        )
        analytics = recommendation_service.analytics(
            recommendations, recommendation_request.intent, behavior
        )

        title, description = intent_heading(recommendation_request.intent)
        response_time_ms = (time.time() - start_time) * 1000

        logger.info(
            f"Generated {len(recommendations)} recommendations for "
            f"{recommendation_request.session_key} in {response_time_ms:.1f}ms"
        )
        return SmartRecommendationResponse(
            recommendations=_to_cards(recommendations),
            title=title,
            description=description,
            intent=recommendation_request.intent,
            analytics=RecommendationAnalyticsResponse.from_analytics(analytics),
            response_time_ms=response_time_ms
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to generate smart recommendations: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate recommendations: {str(e)}"
        )


async def _resolve_current_property(property_id: Optional[str], properties: List[Property],
                                    property_repo) -> Optional[Property]:
    if not property_id:
        return None

    for prop in properties:
        if prop.id == property_id:
            return prop

    try:
        current_property = await property_repo.get_by_id(property_id)
    except CatalogUnavailableError as e:
        logger.error(f"Failed to look up current property {property_id}: {e}")
        raise HTTPException(
            status_code=503,
            detail="Property catalog is currently unavailable"
        )

    if current_property is None:
        logger.warning(f"Current property {property_id} not found")
        raise HTTPException(
            status_code=404,
            detail=f"Property {property_id} not found"
        )
    return current_property


def _to_cards(recommendations: List[ScoredProperty]) -> List[RecommendedProperty]:
    cards = []
    for rank, item in enumerate(recommendations, start=1):
        prop = item.property
        cards.append(RecommendedProperty(
            property_id=prop.id,
            name=prop.name,
            slug=property_slug(prop),
            area=prop.area,
            zone=prop.zone,
            property_type=prop.type,
            status=prop.status,
            price_display=price_display(prop),
            image=prop.images[0] if prop.images else None,
            score=item.recommendation.score,
            reasons=item.recommendation.reasons,
            confidence=item.recommendation.confidence.value,
            rank=rank
        ))
    return cards
