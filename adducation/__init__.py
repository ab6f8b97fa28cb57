"""
Adducation - Gamified learning and interview practice

Service layer for authentication, XP/streak/achievement tracking, and
AI-generated quizzes, interview questions, and learning recommendations.
"""

__version__ = "0.1.0"
__author__ = "Adducation Team"
