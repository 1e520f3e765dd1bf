"""
AI backend client.

AIBackendClient.analyze_achievement() never raises for transport or response
problems. It returns one of three results and callers match on the type:

- AIOk: HTTP 200 with a JSON object body carrying usable content
- AITimedOut: no response within the configured timeout
- AIServiceError: connection failure, non-200 status or malformed body

A body is malformed when it carries neither a string linkedin_post nor a
string summary, or when either field is present with a non-string value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import requests

from snas.contexts.content.logger import log_ai_fallback
from snas.contexts.intake.achievement_data_structure import Achievement
from snas.utils.config import AISettings

ANALYZE_ENDPOINT = "analyze-achievement"
CONTENT_FIELDS = ("linkedin_post", "summary")

# Confidence assumed when the AI response omits one
DEFAULT_AI_CONFIDENCE = 0.85

# Values sent with every request alongside the caller's context
MILITARY_HERITAGE = {
    "colors": {"NAVY": "#1B365D", "GOLD": "#FFD700"},
    "values": ["discipline", "excellence", "service"],
}


@dataclass
class AIResponse:
    """Parsed /analyze-achievement response. Missing fields are None."""

    linkedin_post: Optional[str] = None
    summary: Optional[str] = None
    confidence: Optional[float] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, body: Dict[str, Any]) -> "AIResponse":
        """Non-string or blank content fields parse as None."""
        confidence = body.get("confidence")
        if not isinstance(confidence, (int, float)) or isinstance(confidence, bool):
            confidence = None
        return cls(
            linkedin_post=_text_field(body, "linkedin_post"),
            summary=_text_field(body, "summary"),
            confidence=float(confidence) if confidence is not None else None,
            raw=body,
        )

    @property
    def has_content(self) -> bool:
        return any(isinstance(text, str) and text.strip() for text in (self.linkedin_post, self.summary))

    @property
    def confidence_or_default(self) -> float:
        confidence = self.confidence if self.confidence is not None else DEFAULT_AI_CONFIDENCE
        return min(1.0, max(0.0, confidence))


def _text_field(body: Dict[str, Any], name: str) -> Optional[str]:
    value = body.get(name)
    if isinstance(value, str) and value.strip():
        return value
    return None


def malformed_body_reason(body: Dict[str, Any]) -> Optional[str]:
    """Why a 200 body cannot be used as AI content, or None when it can."""
    wrong_type = [
        name for name in CONTENT_FIELDS if body.get(name) is not None and not isinstance(body[name], str)
    ]
    if wrong_type:
        return f"non-string {', '.join(wrong_type)}"
    if not any(_text_field(body, name) for name in CONTENT_FIELDS):
        return "no linkedin_post or summary"
    return None


@dataclass
class AIOk:
    response: AIResponse
    response_time_ms: int = 0


@dataclass
class AITimedOut:
    timeout_ms: int


@dataclass
class AIServiceError:
    reason: str
    status_code: Optional[int] = None


AICallResult = Union[AIOk, AITimedOut, AIServiceError]


class AIBackendClient:
    """
    Client for the external achievement-analysis service.

    Args:
        settings: AISettings (base URL, API key, timeout, client header)
        session: Optional requests.Session (module-level requests is used otherwise)
    """

    def __init__(self, settings: AISettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.api_key and self.settings.api_key.strip())

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{ANALYZE_ENDPOINT}"

    def build_payload(self, achievement: Achievement, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = dict(context or {})
        context.setdefault("target_audience", "it_recruiters")
        context.setdefault("veteran_narrative", True)
        context.setdefault("service_to_success_mission", True)
        context.setdefault("military_heritage", MILITARY_HERITAGE)

        return {
            "badge": achievement.payload(),
            "context": context,
            "requirements": {
                "generate_linkedin_post": True,
                "generate_summary": True,
                "include_confidence_scores": True,
                "veteran_career_focus": True,
            },
        }

    def analyze_achievement(
        self, achievement: Achievement, context: Optional[Dict[str, Any]] = None
    ) -> AICallResult:
        """
        POST the achievement to {base_url}/analyze-achievement.

        Args:
            achievement: Achievement to analyze
            context: Extra context fields (target_audience, content_type, ...)

        Returns:
            AIOk, AITimedOut or AIServiceError
        """
        if not self.is_configured:
            return AIServiceError("AI backend is not configured")

        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "X-SNAS-Client": self.settings.client_header,
        }
        post = self.session.post if self.session is not None else requests.post

        try:
            response = post(
                self.endpoint,
                json=self.build_payload(achievement, context),
                headers=headers,
                timeout=self.settings.timeout_ms / 1000,
            )
        except requests.Timeout:
            return AITimedOut(self.settings.timeout_ms)
        except requests.RequestException as e:
            return AIServiceError(f"Request failed: {e}")

        if response.status_code != 200:
            return AIServiceError(f"API returned status {response.status_code}", response.status_code)

        try:
            body = response.json()
        except ValueError:
            return AIServiceError("Malformed JSON response", response.status_code)

        if not isinstance(body, dict):
            return AIServiceError("Response body is not a JSON object", response.status_code)

        problem = malformed_body_reason(body)
        if problem is not None:
            return AIServiceError(f"Malformed response: {problem}", response.status_code)

        elapsed = getattr(response, "elapsed", None)
        response_time_ms = int(elapsed.total_seconds() * 1000) if elapsed is not None else 0
        return AIOk(AIResponse.from_json(body), response_time_ms)


def request_ai_content(
    client: AIBackendClient, achievement: Achievement, context: Optional[Dict[str, Any]] = None
) -> Optional[AIOk]:
    """
    Call the AI backend and keep only usable results.

    Timeouts, service errors and responses without any content are logged as a
    fallback notice and returned as None, so callers only branch on success.
    """
    result = client.analyze_achievement(achievement, context)

    if isinstance(result, AITimedOut):
        reason = f"timed out after {result.timeout_ms} ms"
    elif isinstance(result, AIServiceError):
        reason = result.reason
    elif not result.response.has_content:
        reason = "Malformed response: no linkedin_post or summary"
    else:
        return result

    log_ai_fallback(achievement.name, reason)
    return None
