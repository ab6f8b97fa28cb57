"""
AI Interviewer Prompt Templates

Contains structured prompts for:
- Practice question generation
- Answer evaluation
"""


class InterviewerPrompts:
    """
    Prompt templates for mock interview practice.

    Key principles:
    - Realistic, commonly asked questions
    - Constructive, rubric-style feedback
    - JSON output for evaluations
    """

    SYSTEM_CONTEXT = "You are an expert interviewer helping job seekers practice for interviews."

    EVALUATOR_CONTEXT = (
        "You are an expert interviewer providing constructive feedback. "
        "Always respond with valid JSON."
    )

    def generate_question_prompt(
        self,
        job_role: str,
        difficulty: str,
        skills: list[str],
    ) -> str:
        """Generate prompt for a single practice question."""
        skills_text = ", ".join(skills) if skills else "general competencies"
        return (
            f"Generate a {difficulty} level interview question for a {job_role} "
            f"position focusing on these skills: {skills_text}. "
            "Make it realistic and commonly asked."
        )

    def evaluate_response_prompt(
        self,
        question: str,
        response: str,
        job_role: str,
    ) -> str:
        """Generate prompt for scoring a candidate's answer."""
        return f"""Evaluate this interview response for a {job_role} position:

Question: {question}
Response: {response}

=== SCORING ===
- 9-10: Complete, specific, well-structured, with concrete examples
- 7-8: Solid answer with minor gaps
- 5-6: Partially answers the question, lacks depth
- 3-4: Vague or largely off-topic
- 1-2: No meaningful answer

Provide feedback in JSON format:
{{
  "score": [1-10],
  "strengths": ["strength1", "strength2"],
  "improvements": ["improvement1", "improvement2"],
  "overall_feedback": "detailed feedback"
}}"""
