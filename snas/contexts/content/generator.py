"""
Content suggestion generation.

ContentGenerator produces LinkedIn posts, badge descriptions and professional
summaries for an achievement. Results are cached per (achievement, content
type, audience); the AI backend is tried first when it is configured, and any
AI failure falls back to the deterministic templates without surfacing an
error to the caller.

Every call is timed into the injected PerformanceMetrics. Exceeding the SLA is
flagged in the response and counted, but never fails the call.
"""

import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

from snas.contexts.content.ai_client import AIBackendClient, AIResponse, request_ai_content
from snas.contexts.content.fallback import MAX_VARIANTS, ContentSuggestion, FallbackContentGenerator
from snas.contexts.content.logger import (
    _log_debug,
    log_ai_fallback,
    log_cache_failure,
    log_generation_result,
)
from snas.contexts.intake.achievement_data_structure import Achievement
from snas.contexts.targeting.audience import Audience, ContentType, TargetingContext
from snas.utils.achievement_store import AchievementStore
from snas.utils.cache import CacheStore, InMemoryCache
from snas.utils.config import SNASSettings, load_settings
from snas.utils.errors import ErrorKind, SNASError
from snas.utils.metrics import PerformanceMetrics, Stopwatch

API_SOURCE_AI = "ai_backend"
API_SOURCE_FALLBACK = "enhanced_fallback"


def content_cache_key(achievement_id: str, content_type: str, audience_key: str = "default") -> str:
    return f"snas_content_{achievement_id}_{content_type}_{audience_key}"


def coerce_achievement(data) -> Achievement:
    """
    Raises:
        SNASError(INVALID_INPUT): If data is neither an Achievement nor a mapping with a name
    """
    if isinstance(data, Achievement):
        achievement = data
    elif isinstance(data, Mapping):
        achievement = Achievement.from_dict(data)
    else:
        raise SNASError(
            ErrorKind.INVALID_INPUT,
            f"Achievement must be a mapping, got {type(data).__name__}",
        )

    if not achievement.name.strip():
        raise SNASError(ErrorKind.INVALID_INPUT, "Achievement name is required")
    return achievement


class ContentGenerator:
    """
    Cached, instrumented content generation.

    Args:
        settings: SNASSettings (default: load_settings())
        cache: CacheStore for generated suggestions (default: InMemoryCache)
        metrics: PerformanceMetrics accumulator owned by the caller
        ai_client: AIBackendClient (default: built from settings.ai)
        fallback: FallbackContentGenerator (default: packaged templates)
        store: AchievementStore used by generate_for_id()
        timer: Monotonic seconds source used for timing
    """

    def __init__(
        self,
        settings: Optional[SNASSettings] = None,
        cache: Optional[CacheStore] = None,
        metrics: Optional[PerformanceMetrics] = None,
        ai_client: Optional[AIBackendClient] = None,
        fallback: Optional[FallbackContentGenerator] = None,
        store: Optional[AchievementStore] = None,
        timer=time.perf_counter,
    ):
        self.settings = settings or load_settings()
        self.cache = cache if cache is not None else InMemoryCache()
        self.metrics = metrics if metrics is not None else PerformanceMetrics(sla_ms=self.settings.performance.sla_ms)
        self.ai_client = ai_client or AIBackendClient(self.settings.ai)
        self.fallback = fallback or FallbackContentGenerator()
        self.store = store
        self._timer = timer

    @property
    def ai_available(self) -> bool:
        return self.settings.ai_enabled and self.ai_client.is_configured

    def _cache_get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            return self.cache.get(key)
        except (SNASError, ValueError) as e:
            log_cache_failure("read", key, e)
            return None

    def _cache_set(self, key: str, payload: Dict[str, Any]) -> None:
        try:
            self.cache.set(key, payload, self.settings.cache.ttl_seconds)
        except (SNASError, TypeError, ValueError) as e:
            log_cache_failure("write", key, e)

    def _ai_text(self, achievement: Achievement, content_type: ContentType, response: AIResponse) -> Optional[str]:
        """Requested text from the AI response; LinkedIn posts get the category hashtags."""
        content = response.linkedin_post if content_type is ContentType.LINKEDIN_POST else response.summary
        if not isinstance(content, str) or not content.strip():
            return None
        if content_type is ContentType.LINKEDIN_POST:
            hashtags = self.fallback.profiles.hashtags_for(achievement.name, achievement.category)
            if not content.rstrip().endswith(hashtags):
                content = f"{content.rstrip()}\n\n{hashtags}"
        return content

    def _ai_suggestions(
        self, achievement: Achievement, content_type: ContentType, context: TargetingContext
    ) -> Optional[List[ContentSuggestion]]:
        """AI-backed suggestion, or None when the backend did not deliver."""
        result = request_ai_content(
            self.ai_client,
            achievement,
            {
                "target_audience": (context.target_audience or Audience.IT_RECRUITERS).value,
                "content_type": content_type.value,
            },
        )
        if result is None:
            return None

        content = self._ai_text(achievement, content_type, result.response)
        if content is None:
            field_name = "linkedin_post" if content_type is ContentType.LINKEDIN_POST else "summary"
            log_ai_fallback(achievement.name, f"response has no {field_name}")
            return None

        return [
            ContentSuggestion(
                content=content,
                confidence=result.response.confidence_or_default,
                veteran_aligned=True,
                style="ai_generated",
                ai_generated=True,
            )
        ]

    def _generate(
        self, achievement: Achievement, content_type: ContentType, context: TargetingContext
    ) -> Tuple[List[ContentSuggestion], str]:
        if self.ai_available:
            suggestions = self._ai_suggestions(achievement, content_type, context)
            if suggestions is not None:
                return suggestions, API_SOURCE_AI
        return self.fallback.generate(achievement, content_type), API_SOURCE_FALLBACK

    def generate_content_suggestions(
        self,
        achievement,
        content_type,
        context=None,
        max_variants: int = MAX_VARIANTS,
    ) -> Dict[str, Any]:
        """
        Generate (or fetch cached) content suggestions for one achievement.

        Args:
            achievement: Achievement or raw mapping
            content_type: linkedin_post, badge_description or professional_summary
            context: TargetingContext or raw context mapping
            max_variants: Number of suggestions returned (1 to 3)

        Returns:
            {success, processing_time_ms, content_type, suggestions, confidence_scores,
             performance_metadata: {sla_compliant, cache_hit, api_source}}
            or the structured error response
        """
        with Stopwatch(self._timer) as watch:
            try:
                content_type = ContentType.parse(content_type)
                context = TargetingContext.from_dict(context)
                achievement = coerce_achievement(achievement)
                if not 1 <= max_variants <= MAX_VARIANTS:
                    raise SNASError(
                        ErrorKind.INVALID_INPUT,
                        f"max_variants must be between 1 and {MAX_VARIANTS}",
                    )
            except SNASError as e:
                return e.to_response()

            key = content_cache_key(
                achievement.id or achievement.name, content_type.value, context.audience_key
            )
            cached = self._cache_get(key)
            cache_hit = cached is not None

            if cache_hit:
                self.metrics.record_cache_hit()
                suggestions = [ContentSuggestion.from_dict(item) for item in cached["suggestions"]]
                api_source = cached.get("api_source", API_SOURCE_FALLBACK)
                _log_debug(f"Cache hit: {key}")
            else:
                self.metrics.record_cache_miss()
                suggestions, api_source = self._generate(achievement, content_type, context)
                self._cache_set(
                    key,
                    {"suggestions": [s.to_dict() for s in suggestions], "api_source": api_source},
                )

        processing_time_ms = watch.elapsed_ms
        sla_compliant = self.metrics.record_call(processing_time_ms)
        suggestions = suggestions[:max_variants]
        log_generation_result(content_type.value, len(suggestions), processing_time_ms, cache_hit, sla_compliant)

        return {
            "success": True,
            "processing_time_ms": processing_time_ms,
            "content_type": content_type.value,
            "suggestions": [s.to_dict() for s in suggestions],
            "confidence_scores": [
                {"content_id": f"suggestion_{index}", "confidence": s.confidence, "style": s.style}
                for index, s in enumerate(suggestions)
            ],
            "performance_metadata": {
                "sla_compliant": sla_compliant,
                "cache_hit": cache_hit,
                "api_source": api_source,
            },
        }

    def generate_for_id(
        self,
        achievement_id: str,
        content_type,
        context=None,
        max_variants: int = MAX_VARIANTS,
    ) -> Dict[str, Any]:
        """
        Look up a stored achievement and generate content for it.

        Returns:
            generate_content_suggestions() response, or a RECORD_NOT_FOUND (404) /
            INVALID_INPUT (400) / STORAGE_FAILURE (500) error response
        """
        try:
            ContentType.parse(content_type)
            if self.store is None:
                raise SNASError(ErrorKind.STORAGE_FAILURE, "No achievement store configured")
            achievement = self.store.get(achievement_id)
        except SNASError as e:
            return e.to_response()

        if achievement is None:
            return SNASError(
                ErrorKind.RECORD_NOT_FOUND, f"Achievement not found: {achievement_id}"
            ).to_response()

        return self.generate_content_suggestions(achievement, content_type, context, max_variants)
