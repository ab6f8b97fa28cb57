"""
LLM Gateway for Adducation

Handles all AI-powered operations against an OpenRouter-compatible API:
- Model catalog lookup
- Quiz generation
- Interview question generation
- Interview answer evaluation
- Learning recommendations

Replies are free text that should contain JSON. Parsing is tolerant: quiz
replies go through a fallback chain, evaluations and recommendations fall back
to neutral defaults. A missing API key short-circuits before any request.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from adducation.config.settings import Settings, get_settings
from adducation.core.response_parser import (
    extract_content,
    extract_json_object,
    parse_quiz_questions,
)
from adducation.models.interview import InterviewEvaluation, LearningRecommendations
from adducation.models.llm import ErrorKind, LLMResult, OpenRouterModel
from adducation.prompts.interviewer import InterviewerPrompts
from adducation.prompts.learning import LearningPrompts
from adducation.prompts.quiz import QuizPrompts
from adducation.storage.local_store import API_KEY_KEY, SELECTED_MODEL_KEY, LocalStore

logger = logging.getLogger(__name__)

API_KEY_MISSING = "API key not set"


def _prompt_price(pricing: dict[str, Any]) -> float | None:
    """Prompt price as a float; None when present but not numeric."""
    price = pricing.get("prompt")
    if price is None or price == "":
        return 0.0
    try:
        return float(price)
    except (TypeError, ValueError):
        logger.error(f"Error parsing prompt price: {price!r}")
        return None


def classify_model(raw: dict[str, Any]) -> OpenRouterModel:
    """Build a catalog entry, flagging free models."""
    model_id = str(raw.get("id", ""))
    pricing = raw.get("pricing") or {}
    price = _prompt_price(pricing) if isinstance(pricing, dict) else None
    is_free = "free" in model_id.lower() or price == 0

    return OpenRouterModel(
        id=model_id,
        name=raw.get("name") or model_id,
        description=raw.get("description"),
        context_length=raw.get("context_length"),
        pricing=pricing if isinstance(pricing, dict) else None,
        is_free=is_free,
    )


class LLMGateway:
    """
    Client for an OpenRouter-compatible chat completion API.

    API key lookup: local storage first, then settings. The selected model is
    persisted separately.
    """

    def __init__(
        self,
        store: LocalStore,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            store: Local durable storage for key and model selection
            settings: Settings override (defaults to environment)
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings or get_settings()
        self.store = store
        self.base_url = self.settings.openrouter_base_url.rstrip("/")

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.llm_timeout_seconds,
            transport=transport,
        )

        # Prompt templates
        self.quiz_prompts = QuizPrompts()
        self.interviewer_prompts = InterviewerPrompts()
        self.learning_prompts = LearningPrompts()

        self._api_key = self.store.get_item(API_KEY_KEY) or self.settings.openrouter_api_key
        self._selected_model = self.settings.default_model

        logger.info(f"LLM gateway initialized with base URL: {self.base_url}")

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def get_api_key(self) -> str | None:
        return self._api_key or None

    def set_api_key(self, api_key: str):
        self._api_key = api_key.strip()
        self.store.set_item(API_KEY_KEY, self._api_key)

    def get_selected_model(self) -> str:
        stored = self.store.get_item(SELECTED_MODEL_KEY)
        if stored:
            self._selected_model = stored
        return self._selected_model

    def set_selected_model(self, model_id: str):
        self._selected_model = model_id
        self.store.set_item(SELECTED_MODEL_KEY, model_id)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.http_referer,
            "X-Title": self.settings.app_title,
        }

    # =========================================================================
    # CORE CALL
    # =========================================================================

    async def _chat(
        self,
        system: str,
        prompt: str,
        model: str,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> str:
        """
        Send a system/user pair and return the first choice's text.

        Raises:
            httpx.HTTPError: on network failure or a non-2xx status
            ValueError: when the body is not JSON or has no usable first choice
        """
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        logger.info(f"Chat completion with model {model}")
        response = await self.client.post(
            "/chat/completions",
            json=payload,
            headers=self._headers(),
        )
        response.raise_for_status()

        result = response.json()
        choices = result.get("choices") if isinstance(result, dict) else None
        if not isinstance(choices, list) or not choices:
            raise ValueError("Response contained no choices")
        if not isinstance(choices[0], dict) or not isinstance(choices[0].get("message"), dict):
            raise ValueError("First choice has no message")
        return extract_content(result)

    async def _safe_chat(self, operation: str, **kwargs: Any) -> tuple[str | None, LLMResult | None]:
        """Run _chat, converting failures into an LLMResult."""
        try:
            return await self._chat(**kwargs), None
        except httpx.HTTPStatusError as e:
            logger.error(f"{operation}: API error {e.response.status_code}: {e.response.text}")
            return None, LLMResult.fail(
                ErrorKind.HTTP,
                f"API error: {e.response.status_code} {e.response.text}",
            )
        except httpx.HTTPError as e:
            logger.error(f"{operation}: request failed: {e}")
            return None, LLMResult.fail(ErrorKind.HTTP, f"Failed to {operation}")
        except ValueError as e:
            logger.error(f"{operation}: invalid response: {e}")
            return None, LLMResult.fail(ErrorKind.HTTP, "Invalid response from API")

    # =========================================================================
    # MODEL CATALOG
    # =========================================================================

    async def get_available_models(self) -> list[OpenRouterModel]:
        """
        Fetch the provider's model catalog.

        Returns:
            Models with `is_free` set, or an empty list on any failure
        """
        if not self._api_key:
            logger.error("API key not set when fetching models")
            return []

        try:
            response = await self.client.get("/models", headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Error fetching models: {e}")
            return []

        if not response.is_success:
            logger.error(f"Failed to fetch models: {response.status_code}")
            return []

        try:
            data = response.json()
        except ValueError:
            logger.error("Model catalog was not JSON")
            return []

        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            return []

        return [classify_model(m) for m in entries if isinstance(m, dict) and m.get("id")]

    def get_model(self, model_id: str | None = None) -> OpenRouterModel:
        """Describe a model id without contacting the provider."""
        model = model_id or self.get_selected_model()
        return OpenRouterModel(id=model, name=model.split("/")[-1] or model)

    # =========================================================================
    # QUIZ
    # =========================================================================

    async def generate_quiz_questions(
        self,
        topic: str,
        difficulty: str,
        question_count: int,
    ) -> LLMResult:
        """
        Generate multiple-choice questions.

        Returns:
            LLMResult whose data is a list of QuizQuestion
        """
        if not self._api_key:
            logger.error("API key not set when generating quiz questions")
            return LLMResult.fail(ErrorKind.CONFIGURATION, API_KEY_MISSING)

        logger.info(f"Generating {question_count} quiz questions about {topic} at {difficulty} level")

        content, failure = await self._safe_chat(
            "generate quiz questions",
            system=self.quiz_prompts.SYSTEM_CONTEXT,
            prompt=self.quiz_prompts.generate_questions_prompt(topic, difficulty, question_count),
            model=self.get_selected_model(),
            max_tokens=1000,
        )
        if failure:
            return failure

        logger.debug(f"Raw quiz content: {content}")
        questions = parse_quiz_questions(content)
        if not questions:
            return LLMResult.fail(
                ErrorKind.PARSE,
                "Failed to parse quiz questions from response",
            )
        return LLMResult.ok(questions)

    # =========================================================================
    # INTERVIEW PRACTICE
    # =========================================================================

    async def generate_interview_question(
        self,
        job_role: str,
        difficulty: str,
        skills: list[str],
        model_id: str | None = None,
    ) -> LLMResult:
        """Generate one practice question. Data is the raw question text."""
        if not self._api_key:
            return LLMResult.fail(ErrorKind.CONFIGURATION, API_KEY_MISSING)

        content, failure = await self._safe_chat(
            "generate question",
            system=self.interviewer_prompts.SYSTEM_CONTEXT,
            prompt=self.interviewer_prompts.generate_question_prompt(job_role, difficulty, skills),
            model=model_id or self.settings.interview_model,
            max_tokens=500,
        )
        if failure:
            return failure

        if not content.strip():
            return LLMResult.fail(ErrorKind.PARSE, "No response generated")
        return LLMResult.ok(content.strip())

    async def evaluate_interview_response(
        self,
        question: str,
        response: str,
        job_role: str,
        model_id: str | None = None,
    ) -> LLMResult:
        """
        Score a practice answer.

        Once the request succeeds this always returns an evaluation: an
        unparseable reply yields the neutral default with the raw text as
        feedback.
        """
        if not self._api_key:
            return LLMResult.fail(ErrorKind.CONFIGURATION, API_KEY_MISSING)

        model = self.get_model(model_id or self.settings.interview_model)

        content, failure = await self._safe_chat(
            "evaluate response",
            system=self.interviewer_prompts.EVALUATOR_CONTEXT,
            prompt=self.interviewer_prompts.evaluate_response_prompt(question, response, job_role),
            model=model.id,
            max_tokens=800,
        )
        if failure:
            return failure

        data = extract_json_object(content)
        if data is not None:
            try:
                return LLMResult.ok(InterviewEvaluation.model_validate(data))
            except ValidationError as e:
                logger.warning(f"Evaluation JSON did not match schema: {e.error_count()} error(s)")
        else:
            logger.warning("No JSON object in evaluation reply, using default evaluation")

        return LLMResult.ok(InterviewEvaluation.neutral(content))

    # =========================================================================
    # LEARNING CONTENT
    # =========================================================================

    async def generate_learning_content(
        self,
        topic: str,
        user_level: str,
        skills: list[str],
        goal: str,
    ) -> LLMResult:
        """Generate recommendations, falling back to a generic list."""
        logger.info(f"Generating learning content for goal: {goal}")

        if not self._api_key:
            logger.error("API key not set in generate_learning_content")
            return LLMResult.fail(ErrorKind.CONFIGURATION, API_KEY_MISSING)

        content, failure = await self._safe_chat(
            "generate content",
            system=self.learning_prompts.SYSTEM_CONTEXT,
            prompt=self.learning_prompts.recommendations_prompt(topic, user_level, skills, goal),
            model=self.get_selected_model(),
            max_tokens=1000,
        )
        if failure:
            return failure

        data = extract_json_object(content)
        if data is not None:
            try:
                recommendations = LearningRecommendations.model_validate(data)
                if recommendations.recommendations:
                    return LLMResult.ok(recommendations)
            except ValidationError as e:
                logger.error(f"Error parsing recommendations: {e.error_count()} error(s)")

        logger.warning("Falling back to generic learning recommendations")
        return LLMResult.ok(LearningRecommendations.generic())
