import json

import httpx
import pytest

from adducation.config.settings import Settings
from adducation.core.llm_gateway import classify_model
from adducation.models import (
    ErrorKind,
    GENERIC_RECOMMENDATIONS,
    InterviewEvaluation,
    LearningRecommendations,
    QuizQuestion,
)
from adducation.storage.local_store import API_KEY_KEY, SELECTED_MODEL_KEY

from tests.conftest import completion

QUIZ_JSON = {
    "questions": [
        {
            "question": "Which HTTP method is idempotent?",
            "options": ["POST", "PUT", "PATCH", "CONNECT"],
            "correct_answer": 1,
            "explanation": "Repeating a PUT leaves the same state.",
        }
    ]
}


@pytest.fixture
def keyless_settings() -> Settings:
    return Settings(
        _env_file=None,
        openrouter_base_url="http://llm.test/api/v1",
        openrouter_api_key="",
        storage_path="",
    )


# =========================================================================
# CONFIGURATION
# =========================================================================

async def test_missing_key_fails_before_any_request(make_gateway, keyless_settings):
    gateway, transport = make_gateway(lambda r: completion("{}"), keyless_settings)

    for result in (
        await gateway.generate_quiz_questions("HTTP", "beginner", 3),
        await gateway.generate_interview_question("Backend Engineer", "intermediate", ["python"]),
        await gateway.evaluate_interview_response("Q?", "A.", "Backend Engineer"),
        await gateway.generate_learning_content("HTTP", "beginner", [], "get hired"),
    ):
        assert not result.success
        assert result.error_kind == ErrorKind.CONFIGURATION
        assert result.error == "API key not set"

    assert await gateway.get_available_models() == []
    assert transport.requests == []


async def test_api_key_from_storage_wins(store, make_gateway, keyless_settings):
    store.set_item(API_KEY_KEY, "stored-key")
    gateway, transport = make_gateway(lambda r: completion(json.dumps(QUIZ_JSON)), keyless_settings)

    result = await gateway.generate_quiz_questions("HTTP", "beginner", 1)

    assert result.success
    assert transport.requests[0].headers["Authorization"] == "Bearer stored-key"


def test_set_api_key_is_trimmed_and_persisted(store, make_gateway, keyless_settings):
    gateway, _ = make_gateway(lambda r: completion(""), keyless_settings)

    gateway.set_api_key("  sk-or-123  ")

    assert gateway.get_api_key() == "sk-or-123"
    assert store.get_item(API_KEY_KEY) == "sk-or-123"


def test_selected_model_is_persisted(store, make_gateway, settings):
    gateway, _ = make_gateway(lambda r: completion(""))

    assert gateway.get_selected_model() == settings.default_model

    gateway.set_selected_model("meta-llama/llama-3-8b-instruct:free")

    assert store.get_item(SELECTED_MODEL_KEY) == "meta-llama/llama-3-8b-instruct:free"
    assert gateway.get_selected_model() == "meta-llama/llama-3-8b-instruct:free"


def test_get_model_uses_last_path_segment(make_gateway):
    gateway, _ = make_gateway(lambda r: completion(""))

    model = gateway.get_model("anthropic/claude-3-haiku-20240307")

    assert model.id == "anthropic/claude-3-haiku-20240307"
    assert model.name == "claude-3-haiku-20240307"


# =========================================================================
# QUIZ
# =========================================================================

async def test_quiz_generation_sends_chat_request(make_gateway, settings):
    gateway, transport = make_gateway(lambda r: completion(json.dumps(QUIZ_JSON)))

    result = await gateway.generate_quiz_questions("HTTP", "intermediate", 1)

    assert result.success
    assert result.data == [QuizQuestion(**QUIZ_JSON["questions"][0])]

    request = transport.requests[0]
    assert request.url.path == "/api/v1/chat/completions"
    assert request.headers["X-Title"] == settings.app_title
    assert request.headers["HTTP-Referer"] == settings.http_referer

    body = json.loads(request.content)
    assert body["model"] == settings.default_model
    assert body["max_tokens"] == 1000
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert "HTTP" in body["messages"][1]["content"]


async def test_quiz_generation_recovers_json_in_prose(make_gateway):
    reply = "Here you go!\n" + json.dumps(QUIZ_JSON, indent=2) + "\nEnjoy."
    gateway, _ = make_gateway(lambda r: completion(reply))

    result = await gateway.generate_quiz_questions("HTTP", "beginner", 1)

    assert result.success
    assert len(result.data) == 1


async def test_unparseable_quiz_reply_is_a_parse_error(make_gateway):
    gateway, _ = make_gateway(lambda r: completion("I would rather talk about the weather."))

    result = await gateway.generate_quiz_questions("HTTP", "beginner", 3)

    assert not result.success
    assert result.error_kind == ErrorKind.PARSE


async def test_provider_error_status_is_an_http_error(make_gateway):
    gateway, _ = make_gateway(lambda r: httpx.Response(500, text="upstream exploded"))

    result = await gateway.generate_quiz_questions("HTTP", "beginner", 3)

    assert not result.success
    assert result.error_kind == ErrorKind.HTTP
    assert "500" in result.error


async def test_network_failure_is_an_http_error(make_gateway):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    gateway, _ = make_gateway(handler)

    result = await gateway.generate_interview_question("Data Analyst", "beginner", ["sql"])

    assert not result.success
    assert result.error_kind == ErrorKind.HTTP


async def test_reply_without_choices_is_an_http_error(make_gateway):
    gateway, _ = make_gateway(lambda r: httpx.Response(200, json={"choices": []}))

    result = await gateway.generate_quiz_questions("HTTP", "beginner", 3)

    assert not result.success
    assert result.error_kind == ErrorKind.HTTP
    assert result.error == "Invalid response from API"


@pytest.mark.parametrize(
    "body",
    [
        {"choices": [{"message": None}]},
        {"choices": ["oops"]},
        {"choices": {"0": {}}},
        ["not", "an", "object"],
    ],
)
async def test_malformed_completion_body_is_an_http_error(make_gateway, body):
    gateway, _ = make_gateway(lambda r: httpx.Response(200, json=body))

    for result in (
        await gateway.generate_quiz_questions("HTTP", "beginner", 3),
        await gateway.evaluate_interview_response("Q?", "A.", "Backend Engineer"),
        await gateway.generate_learning_content("APIs", "beginner", [], "backend role"),
    ):
        assert not result.success
        assert result.error_kind == ErrorKind.HTTP
        assert result.error == "Invalid response from API"


def test_client_timeout_comes_from_settings(make_gateway):
    custom = Settings(_env_file=None, openrouter_api_key="k", llm_timeout_seconds=12.5)
    gateway, _ = make_gateway(lambda r: completion(""), custom)

    assert gateway.client.timeout.read == 12.5


# =========================================================================
# INTERVIEW
# =========================================================================

async def test_interview_question_uses_interview_model(make_gateway, settings):
    gateway, transport = make_gateway(lambda r: completion("  Explain database indexing.  "))

    result = await gateway.generate_interview_question("Backend Engineer", "advanced", ["postgres"])

    assert result.success
    assert result.data == "Explain database indexing."
    body = json.loads(transport.requests[0].content)
    assert body["model"] == settings.interview_model
    assert body["max_tokens"] == 500


async def test_evaluation_parses_embedded_json(make_gateway):
    reply = (
        "Evaluation follows.\n"
        '{"score": 8, "strengths": ["Clear structure"], '
        '"improvements": ["Mention trade-offs"], "overall_feedback": "Solid answer."}'
    )
    gateway, _ = make_gateway(lambda r: completion(reply))

    result = await gateway.evaluate_interview_response("Q?", "A.", "Backend Engineer")

    assert result.success
    evaluation = result.data
    assert isinstance(evaluation, InterviewEvaluation)
    assert evaluation.score == 8
    assert evaluation.strengths == ["Clear structure"]
    assert evaluation.overall_feedback == "Solid answer."


async def test_evaluation_falls_back_to_neutral_default(make_gateway):
    gateway, _ = make_gateway(lambda r: completion("Pretty good answer overall, well done."))

    result = await gateway.evaluate_interview_response("Q?", "A.", "Backend Engineer")

    assert result.success
    assert result.data.score == 7
    assert result.data.strengths == ["Response provided"]
    assert result.data.improvements == ["Could be more detailed"]
    assert result.data.overall_feedback == "Pretty good answer overall, well done."


async def test_evaluation_with_invalid_schema_falls_back(make_gateway):
    gateway, _ = make_gateway(lambda r: completion('{"score": "excellent"}'))

    result = await gateway.evaluate_interview_response("Q?", "A.", "Backend Engineer")

    assert result.success
    assert result.data.score == 7


# =========================================================================
# LEARNING CONTENT
# =========================================================================

async def test_learning_content_flattens_structured_items(make_gateway):
    reply = json.dumps({
        "recommendations": [
            {"title": "Build a REST API", "description": "Use FastAPI"},
            "Read the HTTP RFCs",
        ]
    })
    gateway, _ = make_gateway(lambda r: completion(reply))

    result = await gateway.generate_learning_content("APIs", "beginner", ["python"], "backend role")

    assert result.success
    assert result.data.recommendations == ["Build a REST API", "Read the HTTP RFCs"]


async def test_learning_content_falls_back_to_generic(make_gateway):
    gateway, _ = make_gateway(lambda r: completion("Keep learning!"))

    result = await gateway.generate_learning_content("APIs", "beginner", [], "backend role")

    assert result.success
    assert result.data == LearningRecommendations.generic()
    assert result.data.recommendations == GENERIC_RECOMMENDATIONS


# =========================================================================
# MODEL CATALOG
# =========================================================================

async def test_model_catalog_flags_free_models(make_gateway):
    catalog = {
        "data": [
            {"id": "mistralai/mistral-7b-instruct:free", "pricing": {"prompt": "0.0001"}},
            {"id": "openai/gpt-4o", "name": "GPT-4o", "pricing": {"prompt": "0.000005"}},
            {"id": "local/zero-cost", "pricing": {"prompt": "0"}},
        ]
    }
    gateway, transport = make_gateway(lambda r: httpx.Response(200, json=catalog))

    models = await gateway.get_available_models()

    assert transport.calls == [("GET", "/api/v1/models")]
    assert [m.is_free for m in models] == [True, False, True]
    assert models[1].name == "GPT-4o"


async def test_model_catalog_failure_returns_empty_list(make_gateway):
    gateway, _ = make_gateway(lambda r: httpx.Response(503))

    assert await gateway.get_available_models() == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"id": "x/y"}, True),
        ({"id": "x/y", "pricing": {"prompt": ""}}, True),
        ({"id": "x/y", "pricing": {"prompt": "n/a"}}, False),
        ({"id": "x/Y-FREE", "pricing": {"prompt": "1"}}, True),
    ],
)
def test_classify_model_pricing_edge_cases(raw, expected):
    assert classify_model(raw).is_free is expected
