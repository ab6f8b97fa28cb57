"""
Learning Content Prompt Templates
"""


class LearningPrompts:
    """Prompt templates for personalised learning recommendations."""

    SYSTEM_CONTEXT = (
        "You are an expert educator creating personalized learning content. "
        "Always respond with valid JSON."
    )

    def recommendations_prompt(
        self,
        topic: str,
        user_level: str,
        skills: list[str],
        goal: str,
    ) -> str:
        return f"""Create personalized learning recommendations for: {goal}

User Profile:
- Level: {user_level}
- Skills: {", ".join(skills)}
- Topic: {topic}

Provide 5-8 specific, actionable recommendations in JSON format:
{{
  "recommendations": [
    "Take an online course on [specific skill]",
    "Practice [specific skill] by building projects",
    "Join [specific community] for networking"
  ]
}}"""
