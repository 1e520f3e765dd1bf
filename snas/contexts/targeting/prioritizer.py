"""
Badge prioritization boundary.

AchievementPrioritizer.prioritize_badges() validates input, scores and ranks
achievements with the live formula, attaches AI or fallback content to each
one, and returns a JSON-ready response. Input problems come back as a
structured 400 response rather than an exception.
"""

import time
from datetime import date
from typing import Any, Dict, Optional

from snas.contexts.content.ai_client import AIBackendClient, request_ai_content
from snas.contexts.content.fallback import fallback_enhancement
from snas.contexts.targeting.audience import Audience, TargetingContext
from snas.contexts.targeting.logger import _log_warning, log_prioritization_result
from snas.contexts.targeting.scoring import ScoredAchievement, calculate_badge_scores
from snas.utils.cache import CacheStore, InMemoryCache
from snas.utils.config import SNASSettings, load_settings
from snas.utils.errors import SNASError
from snas.utils.metrics import PerformanceMetrics, Stopwatch
from snas.utils.timestamp import Clock, today as current_date

PRIORITIZATION_ALGORITHM = "context_aware_veteran_focused_v1"


class AchievementPrioritizer:
    """
    Audience-aware achievement ranking.

    Args:
        settings: SNASSettings (default: load_settings())
        metrics: PerformanceMetrics accumulator owned by the caller
        ai_client: AIBackendClient (default: built from settings.ai)
        cache: CacheStore for AI enhancement results (default: InMemoryCache)
        clock: Callable returning today's date (injected for deterministic recency)
        timer: Monotonic seconds source used for timing
    """

    def __init__(
        self,
        settings: Optional[SNASSettings] = None,
        metrics: Optional[PerformanceMetrics] = None,
        ai_client: Optional[AIBackendClient] = None,
        cache: Optional[CacheStore] = None,
        clock: Clock = current_date,
        timer=time.perf_counter,
    ):
        self.settings = settings or load_settings()
        self.metrics = metrics if metrics is not None else PerformanceMetrics(sla_ms=self.settings.performance.sla_ms)
        self.ai_client = ai_client or AIBackendClient(self.settings.ai)
        self.cache = cache if cache is not None else InMemoryCache()
        self.clock = clock
        self._timer = timer

    @property
    def ai_available(self) -> bool:
        return self.settings.ai_enabled and self.ai_client.is_configured

    def _ai_content(self, scored: ScoredAchievement, context: TargetingContext) -> Optional[Dict[str, Any]]:
        key = f"snas_ai_{scored.achievement_id}_{context.audience_key}"
        try:
            cached = self.cache.get(key)
        except SNASError as e:
            _log_warning(f"Cache read failed for {key}: {e.message}")
            cached = None

        if cached is not None:
            self.metrics.record_cache_hit()
            return dict(cached, cache_hit=True)
        self.metrics.record_cache_miss()

        result = request_ai_content(
            self.ai_client,
            scored.achievement,
            {"target_audience": (context.target_audience or Audience.IT_RECRUITERS).value},
        )
        if result is None:
            return None

        fallback = fallback_enhancement(scored.achievement)
        content = {
            "linkedin_post": result.response.linkedin_post or fallback["linkedin_post"],
            "professional_summary": result.response.summary or fallback["professional_summary"],
            "confidence_score": result.response.confidence_or_default,
            "response_time_ms": result.response_time_ms,
            "api_source": "ai_backend",
        }
        try:
            self.cache.set(key, content, self.settings.cache.ttl_seconds)
        except SNASError as e:
            _log_warning(f"Cache write failed for {key}: {e.message}")
        return dict(content, cache_hit=False)

    def enhance(self, scored: ScoredAchievement, context: TargetingContext) -> ScoredAchievement:
        """Attach AI content when available, fallback content otherwise."""
        if self.ai_available:
            content = self._ai_content(scored, context)
            if content is not None:
                scored.ai_generated_content = content
                return scored
        scored.fallback_content = fallback_enhancement(scored.achievement)
        return scored

    def prioritize_badges(self, user_profile, achievements, context=None, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Rank achievements for display.

        Args:
            user_profile: Profile of the person being showcased (required)
            achievements: List of Achievement objects or raw mappings
            context: TargetingContext or raw context mapping
            today: Reference date for recency (defaults to the injected clock)

        Returns:
            {success, processing_time_ms, badges, context, metadata} or the
            structured error response
        """
        with Stopwatch(self._timer) as watch:
            try:
                context = TargetingContext.from_dict(context)
                result = calculate_badge_scores(
                    achievements,
                    user_profile,
                    context,
                    today=today or self.clock(),
                    weights=self.settings.scoring,
                    audience_boosts=self.settings.audience_boosts,
                )
            except SNASError as e:
                _log_warning(f"Badge prioritization rejected: {e.message}")
                return e.to_response()

            badges = [self.enhance(scored, context) for scored in result.scored]

        processing_time_ms = watch.elapsed_ms
        sla_compliant = self.metrics.record_call(processing_time_ms)
        log_prioritization_result(len(badges), processing_time_ms, sla_compliant)
        for warning in result.warnings:
            _log_warning(warning)

        return {
            "success": True,
            "processing_time_ms": processing_time_ms,
            "badges": [badge.to_dict(include_reasoning=context.include_reasoning) for badge in badges],
            "context": context.to_dict(),
            "metadata": {
                "total_badges": len(achievements),
                "prioritization_algorithm": PRIORITIZATION_ALGORITHM,
                "sla_compliant": sla_compliant,
                "warnings": result.warnings,
            },
        }
