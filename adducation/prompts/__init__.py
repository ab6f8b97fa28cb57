"""
AI prompt templates for Adducation

Contains structured prompts for:
- Quiz generation
- Interview question generation and answer evaluation
- Learning recommendations
"""

from adducation.prompts.quiz import QuizPrompts
from adducation.prompts.interviewer import InterviewerPrompts
from adducation.prompts.learning import LearningPrompts

__all__ = [
    "QuizPrompts",
    "InterviewerPrompts",
    "LearningPrompts",
]
