from time import perf_counter
from typing import Sequence
import httpx
from loguru import logger
from .errors import EmptyExtractionError, ExtractionServiceError
from .prompt import build_instruction
from .table_types import ImageInput
from ..core.config import settings


def generate_content_url() -> str:
    return f"{settings.llm_base_url.rstrip('/')}/models/{settings.llm_model}:generateContent"


def build_payload(images: Sequence[ImageInput], context_date: str) -> dict:
    """One user turn: every image in selection order, then the instruction text"""
    parts = [
        {"inline_data": {"mime_type": img.mime_type, "data": img.base64_payload()}}
        for img in images
    ]
    parts.append({"text": build_instruction(context_date)})

    return {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "thinkingConfig": {"thinkingBudget": settings.llm_thinking_budget}
        },
    }


def response_text(body: dict) -> str:
    """Concatenate the answer text of the first candidate, skipping thought parts"""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if not p.get("thought"))


def _upstream_error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
        if error.get("message"):
            return error["message"]
    except ValueError:
        pass
    return f"Upstream returned HTTP {response.status_code}"


async def extract_table(images: Sequence[ImageInput], context_date: str) -> str:
    """
    Send all images plus the fixed instruction text to the model in one call.

    Returns the raw markdown text. No retry and no client-side timeout unless
    LLM_TIMEOUT_SECONDS is set.

    Raises:
        ExtractionServiceError: credential missing, transport failure or HTTP error
        EmptyExtractionError: the call succeeded but produced no text
    """
    if not images:
        raise ValueError("extract_table requires at least one image")

    if not settings.llm_api_key:
        logger.error("LLM_API_KEY not configured - cannot call extraction service")
        raise ExtractionServiceError("LLM_API_KEY is not configured")

    started_at = perf_counter()
    logger.info(
        "Extraction call start",
        model=settings.llm_model,
        images=len(images),
        image_bytes=sum(img.size for img in images),
        context_date=context_date,
    )

    payload = build_payload(images, context_date)
    headers = {"x-goog-api-key": settings.llm_api_key}

    try:
        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
            r = await client.post(generate_content_url(), json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Extraction service transport error: {e!r}")
        raise ExtractionServiceError(str(e) or e.__class__.__name__) from e

    if r.status_code >= 400:
        message = _upstream_error_message(r)
        logger.error(f"Extraction service error {r.status_code}: {message}")
        raise ExtractionServiceError(message, status_code=r.status_code)

    try:
        body = r.json()
    except ValueError:
        body = {}
    text = response_text(body)

    duration_ms = round((perf_counter() - started_at) * 1000, 1)
    if not text.strip():
        logger.warning("Extraction service returned no text", duration_ms=duration_ms)
        raise EmptyExtractionError()

    logger.info("Extraction call finished", chars=len(text), duration_ms=duration_ms)
    return text
