"""Photo analysis: send an amenity photo to a multimodal chat-completions API and parse structured JSON."""

import base64
import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from railcare.schemas.ai import IssueReportSuggestion, PhotoAnalysisResult

if TYPE_CHECKING:
    from railcare.core.config import Settings

logger = logging.getLogger(__name__)

ANALYSIS_MAX_TOKENS = 500
REPORT_MAX_TOKENS = 300


class PhotoAnalysisError(Exception):
    """Raised when the analysis API cannot complete (unreachable, timeout, bad status, or invalid JSON)."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        upstream: bool = False,
    ) -> None:
        self.message = message
        self.cause = cause
        # True when the API was reached but answered badly (maps to 502, else 503)
        self.upstream = upstream
        super().__init__(message)


def _analysis_prompt(amenity_type: str) -> str:
    return f"""Analyze this railway station {amenity_type} amenity photo and provide:
1. Issue type (water leak, broken seat, lighting issue, clean/working, etc.)
2. Severity level (low, medium, high)
3. Detailed description of what you see
4. Confidence level (0-100)
5. Maintenance suggestions

Respond with ONLY a single valid JSON object of this shape:
{{
  "issue_type": "string",
  "severity": "low|medium|high",
  "description": "string",
  "confidence": 0,
  "suggestions": ["string"]
}}"""


def _report_prompt(analysis: PhotoAnalysisResult, amenity_type: str) -> str:
    return f"""Based on this railway station amenity analysis, generate a professional issue report:

Amenity Type: {amenity_type}
Issue Type: {analysis.issue_type}
Severity: {analysis.severity}
Description: {analysis.description}
Confidence: {analysis.confidence}%

Respond with ONLY a single valid JSON object of this shape:
{{
  "title": "A clear, professional title",
  "description": "A detailed description for the issue report",
  "priority": "low|medium|high",
  "category": "Category for classification"
}}"""


def strip_code_fence(content: str) -> str:
    """Remove a surrounding markdown code fence (``` or ```json) if present."""
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = text.split("\n")
    lines = lines[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines)


def parse_json_object(content: str) -> dict[str, Any]:
    """Parse model output into a dict; lower-cases severity/priority labels."""
    try:
        parsed = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise PhotoAnalysisError(
            "Invalid JSON from model. The model must respond with only valid JSON.",
            cause=e,
            upstream=True,
        ) from e
    if not isinstance(parsed, dict):
        raise PhotoAnalysisError("Model output is not a JSON object.", upstream=True)
    for key in ("severity", "priority"):
        if isinstance(parsed.get(key), str):
            parsed[key] = parsed[key].strip().lower()
    return parsed


async def _chat_completion(
    content: str | list[dict[str, Any]],
    max_tokens: int,
    settings: "Settings",
) -> str:
    """POST one user message to /chat/completions and return the first choice's text."""
    if not settings.openai_configured:
        raise PhotoAnalysisError(
            "AI service not configured. Please add OPENAI_API_KEY to environment variables."
        )

    url = f"{settings.OPENAI_BASE_URL}/chat/completions"
    headers = {"Authorization": f"Bearer {settings.OPENAI_API_KEY.get_secret_value()}"}
    payload = {
        "model": settings.OPENAI_MODEL,
        "messages": [{"role": "user", "content": content}],
        "max_tokens": max_tokens,
    }
    timeout = httpx.Timeout(settings.OPENAI_REQUEST_TIMEOUT_SEC)
    start = time.perf_counter()
    log_extra: dict[str, float | int | str] = {
        "model": settings.OPENAI_MODEL,
        "max_tokens": max_tokens,
    }

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(url, json=payload, headers=headers)
    except httpx.ConnectError as e:
        log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
        logger.info("Photo analysis request failed", extra=log_extra)
        raise PhotoAnalysisError(
            "AI service is unreachable. Check OPENAI_BASE_URL and network access.",
            cause=e,
        ) from e
    except httpx.TimeoutException as e:
        log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
        logger.info("Photo analysis request failed", extra=log_extra)
        raise PhotoAnalysisError(
            "AI service request timed out. Try increasing OPENAI_REQUEST_TIMEOUT_SEC.",
            cause=e,
        ) from e
    except httpx.HTTPError as e:
        log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
        logger.info("Photo analysis request failed", extra=log_extra)
        raise PhotoAnalysisError("AI service request failed.", cause=e) from e

    log_extra.update(
        latency_seconds=time.perf_counter() - start,
        status_code=response.status_code,
    )
    logger.info("Photo analysis request completed", extra=log_extra)

    if response.status_code != 200:
        raise PhotoAnalysisError(
            f"AI service returned status {response.status_code}.",
            upstream=True,
        )

    try:
        body = response.json()
        return body["choices"][0]["message"]["content"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
        raise PhotoAnalysisError(
            "AI service response is missing choices[0].message.content.",
            cause=e,
            upstream=True,
        ) from e


async def analyze_photo(
    image: bytes,
    amenity_type: str,
    settings: "Settings",
) -> PhotoAnalysisResult:
    """
    Ask the model to describe the condition of the amenity in the photo.

    Raises PhotoAnalysisError on connection failure, timeout, bad status or invalid JSON.
    """
    image_b64 = base64.b64encode(image).decode("ascii")
    content = [
        {"type": "text", "text": _analysis_prompt(amenity_type)},
        {
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{image_b64}", "detail": "high"},
        },
    ]
    raw = await _chat_completion(content, ANALYSIS_MAX_TOKENS, settings)
    try:
        return PhotoAnalysisResult.model_validate(parse_json_object(raw))
    except ValidationError as e:
        raise PhotoAnalysisError(
            "Model output does not match expected schema (issue_type, severity, description, confidence, suggestions).",
            cause=e,
            upstream=True,
        ) from e


async def generate_issue_report(
    analysis: PhotoAnalysisResult,
    amenity_type: str,
    settings: "Settings",
) -> IssueReportSuggestion:
    """Turn an analysis into a draft issue report (title, description, priority, category)."""
    raw = await _chat_completion(
        _report_prompt(analysis, amenity_type), REPORT_MAX_TOKENS, settings
    )
    parsed = parse_json_object(raw)
    parsed.setdefault("description", analysis.description)
    parsed.setdefault("priority", analysis.severity)
    try:
        return IssueReportSuggestion.model_validate(parsed)
    except ValidationError as e:
        raise PhotoAnalysisError(
            "Model output does not match expected schema (title, description, priority, category).",
            cause=e,
            upstream=True,
        ) from e
