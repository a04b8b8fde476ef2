"""
Behavior tracking API router.

Each request loads the history stored under the session key, applies the
change and writes the whole history back.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Request

from ...dto.recommendation_dto import (
    TrackBehaviorRequest, BehaviorPreferencesRequest, BehaviorResponse
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository_factory(request: Request):
    """Dependency to get repository factory from app state"""
    return request.app.state.repository_factory


@router.post("/{session_key}/track", response_model=BehaviorResponse)
async def track_behavior(
    track_request: TrackBehaviorRequest,
    session_key: str = Path(..., min_length=1, max_length=128, description="Behavior store key"),
    repository_factory = Depends(get_repository_factory)
):
    """Record a view, save, search, dwell-time or feature-click action"""
    missing = track_request.missing_fields()
    if missing:
        raise HTTPException(
            status_code=422,
            detail=f"Action {track_request.action} requires: {', '.join(missing)}"
        )

    try:
        tracker = repository_factory.create_behavior_tracker(session_key)
        behavior = await tracker.track(track_request.action, track_request.to_payload())
        logger.debug(f"Tracked {track_request.action} for {session_key}")
        return BehaviorResponse.from_behavior(session_key, behavior)
    except Exception as e:
        logger.error(f"Failed to track {track_request.action} for {session_key}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to record behavior"
        )


@router.get("/{session_key}", response_model=BehaviorResponse)
async def get_behavior(
    session_key: str = Path(..., min_length=1, max_length=128, description="Behavior store key"),
    repository_factory = Depends(get_repository_factory)
):
    try:
        tracker = repository_factory.create_behavior_tracker(session_key)
        behavior = await tracker.load()
        return BehaviorResponse.from_behavior(session_key, behavior)
    except Exception as e:
        logger.error(f"Failed to load behavior for {session_key}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to load behavior"
        )


@router.put("/{session_key}/preferences", response_model=BehaviorResponse)
async def update_preferences(
    preferences_request: BehaviorPreferencesRequest,
    session_key: str = Path(..., min_length=1, max_length=128, description="Behavior store key"),
    repository_factory = Depends(get_repository_factory)
):
    """Replace location and property-type preferences supplied by other pages"""
    try:
        tracker = repository_factory.create_behavior_tracker(session_key)
        behavior = await tracker.set_preferences(
            preferences_request.location_preferences,
            preferences_request.property_type_preferences
        )
        return BehaviorResponse.from_behavior(session_key, behavior)
    except Exception as e:
        logger.error(f"Failed to update preferences for {session_key}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to update preferences"
        )


@router.delete("/{session_key}")
async def clear_behavior(
    session_key: str = Path(..., min_length=1, max_length=128, description="Behavior store key"),
    repository_factory = Depends(get_repository_factory)
):
    try:
        tracker = repository_factory.create_behavior_tracker(session_key)
        deleted = await tracker.clear()
        return {"session_key": session_key, "deleted": deleted}
    except Exception as e:
        logger.error(f"Failed to clear behavior for {session_key}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to clear behavior"
        )
