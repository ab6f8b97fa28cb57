"""
Settings API endpoints

Provides:
- OpenRouter API key and model selection
- Model catalog
- Theme and debug-panel preferences
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from adducation.api.dependencies import get_llm_gateway, get_preferences
from adducation.core.llm_gateway import LLMGateway
from adducation.core.preferences import Preferences, Theme
from adducation.models.llm import OpenRouterModel

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ApiKeyRequest(BaseModel):
    api_key: str = Field(..., min_length=1)


class ApiKeyStatus(BaseModel):
    """Whether a key is configured, without revealing it."""
    configured: bool
    masked: str | None = None


class ModelSelection(BaseModel):
    model_id: str = Field(..., min_length=1)


class PreferencesResponse(BaseModel):
    theme: Theme
    show_debug: bool


def _mask(key: str | None) -> str | None:
    if not key:
        return None
    return f"{key[:4]}…{key[-4:]}" if len(key) > 8 else "…"


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/api-key", response_model=ApiKeyStatus)
async def get_api_key(llm: LLMGateway = Depends(get_llm_gateway)) -> ApiKeyStatus:
    key = llm.get_api_key()
    return ApiKeyStatus(configured=bool(key), masked=_mask(key))


@router.put("/api-key", response_model=ApiKeyStatus)
async def set_api_key(
    request: ApiKeyRequest,
    llm: LLMGateway = Depends(get_llm_gateway),
) -> ApiKeyStatus:
    llm.set_api_key(request.api_key)
    return ApiKeyStatus(configured=True, masked=_mask(llm.get_api_key()))


@router.get("/models", response_model=list[OpenRouterModel])
async def list_models(llm: LLMGateway = Depends(get_llm_gateway)) -> list[OpenRouterModel]:
    """Provider catalog; empty when no key is set or the call fails."""
    return await llm.get_available_models()


@router.get("/model", response_model=OpenRouterModel)
async def get_model(llm: LLMGateway = Depends(get_llm_gateway)) -> OpenRouterModel:
    return llm.get_model()


@router.put("/model", response_model=OpenRouterModel)
async def select_model(
    request: ModelSelection,
    llm: LLMGateway = Depends(get_llm_gateway),
) -> OpenRouterModel:
    llm.set_selected_model(request.model_id)
    return llm.get_model()


@router.get("/preferences", response_model=PreferencesResponse)
async def get_prefs(prefs: Preferences = Depends(get_preferences)) -> PreferencesResponse:
    return PreferencesResponse(theme=prefs.theme, show_debug=prefs.show_debug)


@router.post("/preferences/theme/toggle", response_model=PreferencesResponse)
async def toggle_theme(prefs: Preferences = Depends(get_preferences)) -> PreferencesResponse:
    prefs.toggle_theme()
    return PreferencesResponse(theme=prefs.theme, show_debug=prefs.show_debug)


@router.post("/preferences/debug/toggle", response_model=PreferencesResponse)
async def toggle_debug(prefs: Preferences = Depends(get_preferences)) -> PreferencesResponse:
    prefs.toggle_debug()
    return PreferencesResponse(theme=prefs.theme, show_debug=prefs.show_debug)
