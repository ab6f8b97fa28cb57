"""
Quiz Prompt Templates

Asks the model for multiple-choice questions as strict JSON. The reply is
still run through the fallback parser because the format is not guaranteed.
"""


class QuizPrompts:
    """Prompt templates for quiz generation."""

    SYSTEM_CONTEXT = "You are an expert educator creating quiz questions for job seekers."

    def generate_questions_prompt(
        self,
        topic: str,
        difficulty: str,
        question_count: int,
    ) -> str:
        """Build the user prompt for a batch of quiz questions."""
        return f"""Generate {question_count} multiple-choice quiz questions about {topic} at {difficulty} level.

Return ONLY valid JSON in this exact format:
{{
  "questions": [
    {{
      "question": "Question text here",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": 0,
      "explanation": "Why this answer is correct"
    }}
  ]
}}

Rules:
- Exactly 4 options per question
- "correct_answer" is the 0-based index of the correct option
- Make questions relevant for job seekers and career development
"""
