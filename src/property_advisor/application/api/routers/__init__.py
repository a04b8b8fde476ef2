from . import behavior_router, health_router, recommendation_router

__all__ = ['behavior_router', 'health_router', 'recommendation_router']
