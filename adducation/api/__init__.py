"""
API layer for Adducation

Contains FastAPI routers for:
- Authentication and profile
- Gamification progress
- Quiz generation
- Interview practice
- Learning recommendations
- Settings and preferences
"""

from adducation.api.router import api_router

__all__ = ["api_router"]
