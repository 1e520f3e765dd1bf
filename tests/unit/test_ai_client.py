"""Unit tests for the AI backend client (HTTP layer faked)."""

from datetime import timedelta

import pytest
import requests

from snas.contexts.content.ai_client import (
    AIBackendClient,
    AIOk,
    AIResponse,
    AIServiceError,
    AITimedOut,
    request_ai_content,
)
from snas.contexts.intake.achievement_data_structure import Achievement
from snas.utils.config import AISettings


class FakeResponse:
    def __init__(self, status_code=200, body=None, json_error=False):
        self.status_code = status_code
        self._body = body
        self._json_error = json_error
        self.elapsed = timedelta(milliseconds=120)

    def json(self):
        if self._json_error:
            raise ValueError("Expecting value")
        return self._body


class FakeSession:
    """Records posted requests and replays a canned response or exception."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def ai_settings():
    return AISettings(base_url="https://ai.example.test/v1/", api_key="test-key", timeout_ms=1500)


@pytest.fixture
def achievement():
    return Achievement(name="Certified System Administrator (CSA)", type="certification", issuer="ServiceNow")


@pytest.mark.unit
def test_successful_call_parses_response(ai_settings, achievement):
    """Test that a 200 JSON body becomes AIOk."""
    body = {"linkedin_post": "Proud to share...", "summary": "CSA holder", "confidence": 0.91}
    session = FakeSession(FakeResponse(body=body))

    result = AIBackendClient(ai_settings, session=session).analyze_achievement(achievement)

    assert isinstance(result, AIOk)
    assert result.response.linkedin_post == "Proud to share..."
    assert result.response.confidence == pytest.approx(0.91)
    assert result.response_time_ms == 120


@pytest.mark.unit
def test_request_shape(ai_settings, achievement):
    """Test endpoint, headers, timeout and payload sent to the backend."""
    session = FakeSession(FakeResponse(body={}))

    AIBackendClient(ai_settings, session=session).analyze_achievement(
        achievement, {"target_audience": "veteran_community"}
    )

    url, kwargs = session.calls[0]
    assert url == "https://ai.example.test/v1/analyze-achievement"
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"
    assert kwargs["headers"]["X-SNAS-Client"] == ai_settings.client_header
    assert kwargs["timeout"] == pytest.approx(1.5)
    assert kwargs["json"]["badge"]["name"] == achievement.name
    assert kwargs["json"]["context"]["target_audience"] == "veteran_community"
    assert kwargs["json"]["context"]["veteran_narrative"] is True


@pytest.mark.unit
def test_timeout_returns_timed_out(ai_settings, achievement):
    """Test that a requests timeout is reported, not raised."""
    session = FakeSession(error=requests.Timeout("too slow"))

    result = AIBackendClient(ai_settings, session=session).analyze_achievement(achievement)

    assert result == AITimedOut(1500)


@pytest.mark.unit
def test_connection_error_returns_service_error(ai_settings, achievement):
    """Test transport failures."""
    session = FakeSession(error=requests.ConnectionError("refused"))

    result = AIBackendClient(ai_settings, session=session).analyze_achievement(achievement)

    assert isinstance(result, AIServiceError)
    assert "refused" in result.reason


@pytest.mark.unit
@pytest.mark.parametrize(
    "response, reason",
    [
        (FakeResponse(status_code=500, body={}), "API returned status 500"),
        (FakeResponse(json_error=True), "Malformed JSON response"),
        (FakeResponse(body=["not", "an", "object"]), "Response body is not a JSON object"),
        (FakeResponse(body={}), "Malformed response: no linkedin_post or summary"),
        (FakeResponse(body={"linkedin_post": "  ", "confidence": 0.9}), "Malformed response: no linkedin_post or summary"),
        (FakeResponse(body={"linkedin_post": 123}), "Malformed response: non-string linkedin_post"),
        (FakeResponse(body={"linkedin_post": "ok", "summary": ["a"]}), "Malformed response: non-string summary"),
    ],
)
def test_bad_responses_return_service_error(ai_settings, achievement, response, reason):
    """Test non-200 status, unparseable bodies and bodies without usable content."""
    result = AIBackendClient(ai_settings, session=FakeSession(response)).analyze_achievement(achievement)

    assert isinstance(result, AIServiceError)
    assert result.reason == reason


@pytest.mark.unit
def test_unconfigured_client_makes_no_request(achievement):
    """Test that a blank key short-circuits before any HTTP call."""
    session = FakeSession(FakeResponse(body={}))

    result = AIBackendClient(AISettings(api_key=" "), session=session).analyze_achievement(achievement)

    assert isinstance(result, AIServiceError)
    assert session.calls == []


@pytest.mark.unit
def test_module_level_requests_used_without_session(monkeypatch, ai_settings, achievement):
    """Test the default transport path through requests.post."""
    calls = []

    def fake_post(url, **kwargs):
        calls.append(url)
        return FakeResponse(body={"summary": "ok"})

    monkeypatch.setattr(requests, "post", fake_post)

    result = AIBackendClient(ai_settings).analyze_achievement(achievement)

    assert isinstance(result, AIOk)
    assert calls == ["https://ai.example.test/v1/analyze-achievement"]


@pytest.mark.unit
def test_ai_response_ignores_non_numeric_confidence():
    """Test parsing of partial bodies."""
    response = AIResponse.from_json({"linkedin_post": "", "confidence": "high"})

    assert response.linkedin_post is None
    assert response.confidence is None


@pytest.mark.unit
def test_ai_response_drops_non_string_content():
    """Test that wrong-typed content fields never reach callers."""
    response = AIResponse.from_json({"linkedin_post": 123, "summary": {"text": "x"}})

    assert response.linkedin_post is None
    assert response.summary is None
    assert response.has_content is False


@pytest.mark.unit
@pytest.mark.parametrize("confidence, expected", [(None, 0.85), (0.4, 0.4), (1.7, 1.0), (-2, 0.0)])
def test_confidence_default_and_clamp(confidence, expected):
    """Test the assumed confidence and its [0, 1] bounds."""
    assert AIResponse(summary="s", confidence=confidence).confidence_or_default == expected


class StubClient:
    def __init__(self, result):
        self.result = result

    def analyze_achievement(self, achievement, context=None):
        return self.result


@pytest.mark.unit
@pytest.mark.parametrize(
    "result",
    [
        AITimedOut(1500),
        AIServiceError("API returned status 502", 502),
        AIOk(AIResponse.from_json({})),
        AIOk(AIResponse.from_json({"linkedin_post": 123})),
    ],
)
def test_request_ai_content_rejects_unusable_results(achievement, result):
    """Test that failures and empty bodies all come back as None."""
    assert request_ai_content(StubClient(result), achievement) is None


@pytest.mark.unit
def test_request_ai_content_passes_usable_result(achievement):
    """Test that a response with content is returned unchanged."""
    ok = AIOk(AIResponse(summary="CSA holder"), 42)

    assert request_ai_content(StubClient(ok), achievement) is ok
