"""
Mapping from LLM gateway failures to HTTP errors.
"""

from fastapi import HTTPException

from adducation.models.llm import ErrorKind, LLMResult

_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: 400,
    ErrorKind.HTTP: 502,
    ErrorKind.PARSE: 422,
}


def unwrap(result: LLMResult):
    """Return the result's data or raise the matching HTTPException."""
    if result.success:
        return result.data
    status = _STATUS_BY_KIND.get(result.error_kind, 500)
    raise HTTPException(status_code=status, detail=result.error)
