"""
Response parsing for LLM completions.

Models are asked for strict JSON but often wrap it in prose, truncate it, or
ignore the format entirely. Quiz replies go through a chain of strategies,
each attempted only if the previous one produced no usable questions:

1. Parse the whole reply as JSON
2. Regex-extract a JSON object substring
3. Balanced-brace scan from the first "{"
4. Manual extraction from numbered "1. question / A) option" text
"""

import json
import logging
import re
from typing import Any, Callable

from pydantic import ValidationError

from adducation.models.quiz import QuizQuestion

logger = logging.getLogger(__name__)


_QUESTIONS_OBJECT_RE = re.compile(r'\{[\s\S]*?"questions"[\s\S]*?\}\s*\}', re.IGNORECASE)
_ANY_OBJECT_RE = re.compile(r"\{[\s\S]*?\}")
_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_QUESTION_SPLIT_RE = re.compile(r"(?:^|\n)\s*(?:Question\s*)?\d+[.)]\s", re.IGNORECASE)
_OPTION_RE = re.compile(r"^\s*\(?([A-D])[).:]\s*(.+)$", re.MULTILINE)
_CORRECT_RE = re.compile(r"correct\s*answer[^\n]*?\b(?-i:([A-D]))\b", re.IGNORECASE)
_EXPLANATION_RE = re.compile(r"explanation[^\n:]*:\s*([^\n]+)", re.IGNORECASE)


def extract_content(result: dict) -> str:
    """Extract text content from a chat completion, handling list/dict formats."""
    choices = result.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content", "")

    # Multi-part content
    if isinstance(content, list):
        text_parts = []
        for part in content:
            if isinstance(part, str):
                text_parts.append(part)
            elif isinstance(part, dict) and "text" in part:
                text_parts.append(part["text"])
        content = "".join(text_parts)

    if content is None:
        return ""
    return content if isinstance(content, str) else str(content)


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def extract_json_object(content: str) -> dict[str, Any] | None:
    """Parse the outermost brace-delimited span (first "{" to last "}")."""
    match = _GREEDY_OBJECT_RE.search(content)
    if not match:
        return None
    return _loads_object(match.group(0))


def balanced_json_span(content: str) -> str | None:
    """
    Return the substring from the first "{" to its matching "}".

    Braces are counted by nesting depth only; braces inside strings are not
    special-cased.
    """
    start = content.find("{")
    if start == -1:
        return None

    depth = 0
    for i in range(start, len(content)):
        char = content[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start:i + 1]
    return None


def _valid_questions(items: Any) -> list[QuizQuestion]:
    if not isinstance(items, list):
        return []

    questions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            questions.append(QuizQuestion.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed quiz question: {e.error_count()} error(s)")
    return questions


def _questions_from(data: dict[str, Any] | None) -> list[QuizQuestion]:
    if data is None:
        return []
    return _valid_questions(data.get("questions"))


# =========================================================================
# STRATEGIES
# =========================================================================

def parse_direct(content: str) -> list[QuizQuestion]:
    """Stage 1: the whole reply is JSON."""
    return _questions_from(_loads_object(content.strip()))


def parse_regex(content: str) -> list[QuizQuestion]:
    """Stage 2: first JSON-object-shaped substring."""
    match = _QUESTIONS_OBJECT_RE.search(content) or _ANY_OBJECT_RE.search(content)
    if not match:
        return []
    return _questions_from(_loads_object(match.group(0)))


def parse_balanced(content: str) -> list[QuizQuestion]:
    """Stage 3: first "{" to its balanced "}"."""
    span = balanced_json_span(content)
    if span is None:
        return []
    return _questions_from(_loads_object(span))


def parse_manual(content: str) -> list[QuizQuestion]:
    """
    Stage 4: rebuild questions from numbered plain text.

    Expects blocks like:

        1. What does HTTP stand for?
        A) HyperText Transfer Protocol
        B) High Transfer Text Process
        Correct answer: A
        Explanation: ...

    Blocks with fewer than two options are skipped.
    """
    questions = []
    blocks = [b for b in _QUESTION_SPLIT_RE.split(content) if b.strip()]

    for block in blocks:
        lines = block.strip().splitlines()
        question_text = lines[0].strip()
        if not question_text:
            continue

        body = "\n".join(lines[1:])
        options = [m.group(2).strip() for m in _OPTION_RE.finditer(body)]
        if len(options) < 2:
            continue

        correct_answer = 0
        correct_match = _CORRECT_RE.search(body)
        if correct_match:
            correct_answer = ord(correct_match.group(1)) - ord("A")
        if correct_answer >= len(options):
            correct_answer = 0

        explanation_match = _EXPLANATION_RE.search(body)
        explanation = explanation_match.group(1).strip() if explanation_match else ""

        questions.append(QuizQuestion(
            question=question_text,
            options=options,
            correct_answer=correct_answer,
            explanation=explanation or "No explanation provided",
        ))

    return questions


QUIZ_STRATEGIES: list[tuple[str, Callable[[str], list[QuizQuestion]]]] = [
    ("direct", parse_direct),
    ("regex", parse_regex),
    ("balanced", parse_balanced),
    ("manual", parse_manual),
]


def parse_quiz_questions(content: str) -> list[QuizQuestion]:
    """
    Run the quiz strategies in order and return the first non-empty result.

    Returns:
        Parsed questions, or an empty list when every strategy fails
    """
    for name, strategy in QUIZ_STRATEGIES:
        questions = strategy(content)
        if questions:
            logger.info(f"Parsed {len(questions)} quiz question(s) with '{name}' strategy")
            return questions
        logger.debug(f"Quiz strategy '{name}' produced no questions")

    logger.warning("Every quiz parsing strategy failed")
    return []
