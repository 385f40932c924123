"""Photo analysis client: response parsing and error mapping (no network)."""

import asyncio
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from pydantic import SecretStr

from railcare.core.config import Settings
from railcare.schemas.ai import PhotoAnalysisResult
from railcare.services.photo_analysis import (
    PhotoAnalysisError,
    analyze_photo,
    generate_issue_report,
    parse_json_object,
    strip_code_fence,
)

ANALYSIS = {
    "issue_type": "water leak",
    "severity": "HIGH",
    "description": "Water pooling under the booth",
    "confidence": 85,
    "suggestions": ["Replace the valve"],
}


def _settings() -> Settings:
    return Settings(OPENAI_API_KEY=SecretStr("sk-test"), OPENAI_BASE_URL="https://ai.example.com/v1")


def _mock_client(mock_client_class: MagicMock, post: AsyncMock) -> None:
    mock_instance = MagicMock()
    mock_instance.post = post
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)


def _response(status_code: int, content: str | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = {"choices": [{"message": {"content": content}}]}
    return resp


class TestParsing(unittest.TestCase):
    def test_strip_code_fence(self) -> None:
        self.assertEqual(strip_code_fence('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fence('  {"a": 1} '), '{"a": 1}')

    def test_parse_lower_cases_labels(self) -> None:
        parsed = parse_json_object('```\n{"severity": " High ", "priority": "LOW"}\n```')
        self.assertEqual(parsed, {"severity": "high", "priority": "low"})

    def test_invalid_json_is_upstream_error(self) -> None:
        with self.assertRaises(PhotoAnalysisError) as ctx:
            parse_json_object("The seat looks broken.")
        self.assertTrue(ctx.exception.upstream)

    def test_non_object_is_rejected(self) -> None:
        with self.assertRaises(PhotoAnalysisError):
            parse_json_object("[1, 2]")


class TestAnalyzePhoto(unittest.TestCase):
    @patch("railcare.services.photo_analysis.httpx.AsyncClient")
    def test_parses_fenced_model_output(self, mock_client_class: MagicMock) -> None:
        content = "```json\n" + json.dumps(ANALYSIS) + "\n```"
        post = AsyncMock(return_value=_response(200, content))
        _mock_client(mock_client_class, post)

        result = asyncio.run(analyze_photo(b"\xff\xd8jpeg", "water_booth", _settings()))

        self.assertEqual(result.severity, "high")
        self.assertEqual(result.confidence, 85)
        url = post.await_args.args[0]
        self.assertEqual(url, "https://ai.example.com/v1/chat/completions")
        payload = post.await_args.kwargs["json"]
        self.assertEqual(payload["max_tokens"], 500)
        image_part = payload["messages"][0]["content"][1]
        self.assertTrue(image_part["image_url"]["url"].startswith("data:image/jpeg;base64,"))
        headers = post.await_args.kwargs["headers"]
        self.assertEqual(headers["Authorization"], "Bearer sk-test")

    @patch("railcare.services.photo_analysis.httpx.AsyncClient")
    def test_bad_status_is_upstream_error(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(return_value=_response(500)))
        with self.assertRaises(PhotoAnalysisError) as ctx:
            asyncio.run(analyze_photo(b"img", "toilet", _settings()))
        self.assertTrue(ctx.exception.upstream)

    @patch("railcare.services.photo_analysis.httpx.AsyncClient")
    def test_connect_error_is_unavailable(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(side_effect=httpx.ConnectError("refused")))
        with self.assertRaises(PhotoAnalysisError) as ctx:
            asyncio.run(analyze_photo(b"img", "toilet", _settings()))
        self.assertFalse(ctx.exception.upstream)
        self.assertIsInstance(ctx.exception.cause, httpx.ConnectError)

    def test_not_configured(self) -> None:
        with self.assertRaises(PhotoAnalysisError) as ctx:
            asyncio.run(analyze_photo(b"img", "toilet", Settings(OPENAI_API_KEY=None)))
        self.assertFalse(ctx.exception.upstream)


class TestGenerateIssueReport(unittest.TestCase):
    @patch("railcare.services.photo_analysis.httpx.AsyncClient")
    def test_missing_fields_fall_back_to_analysis(self, mock_client_class: MagicMock) -> None:
        content = json.dumps({"title": "Leaking water booth", "category": "Plumbing"})
        _mock_client(mock_client_class, AsyncMock(return_value=_response(200, content)))
        analysis = PhotoAnalysisResult.model_validate({**ANALYSIS, "severity": "medium"})

        report = asyncio.run(generate_issue_report(analysis, "water_booth", _settings()))

        self.assertEqual(report.title, "Leaking water booth")
        self.assertEqual(report.priority, "medium")
        self.assertEqual(report.description, "Water pooling under the booth")
