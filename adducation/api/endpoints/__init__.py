"""
API endpoint modules for Adducation
"""

from adducation.api.endpoints import auth, progress, quiz, interview, learning, preferences

__all__ = ["auth", "progress", "quiz", "interview", "learning", "preferences"]
