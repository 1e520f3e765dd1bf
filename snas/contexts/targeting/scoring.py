"""
Achievement scoring.

Two independent formulas live here and are intentionally kept apart:

- live_score(): the unclamped, audience-aware score used when prioritizing
  achievements for display. Base 50, rules applied in a fixed order, each
  applied rule recorded as a reasoning string.
- import_score(): the clamped [10, 100] score stored on records at import time.
  It has no audience rule and adds platform/veteran keyword boosts instead.

The same CSA certification earned 30 days ago scores 160 live (for IT
recruiters) but 100 at import. Both values are correct for their path.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from snas.contexts.intake.achievement_data_structure import Achievement, AchievementType
from snas.contexts.targeting.audience import Audience, TargetingContext
from snas.utils.config import AudienceBoostSettings, ImportSettings, ScoringSettings
from snas.utils.errors import ErrorKind, SNASError
from snas.utils.timestamp import days_since, today as current_date

# Reasoning labels, in rule application order
CSA_RULE = "CSA certification priority boost"
RECENCY_RULE = "Recent achievement boost"
CERTIFICATION_RULE = "Certification type boost"
AUDIENCE_RULE = "Audience targeting boost"
PLATFORM_RULE = "ServiceNow platform relevance"


def _reason(rule: str, points: int) -> str:
    return f"{rule} (+{points})"


def _contains(text, needle: str) -> bool:
    return bool(text) and needle.lower() in str(text).lower()


def display_weight(priority_score: int) -> str:
    """Categorical display bucket: high (>=100), medium (>=75), low."""
    if priority_score >= 100:
        return "high"
    if priority_score >= 75:
        return "medium"
    return "low"


def predict_engagement(priority_score: int) -> float:
    """Engagement estimate 0.6 + (score - 50) / 100, clamped to [0.1, 0.95]."""
    return round(min(0.95, max(0.1, 0.6 + (priority_score - 50) / 100)), 4)


def audience_boost(
    achievement: Achievement,
    audience: Optional[Audience],
    boosts: Optional[AudienceBoostSettings] = None,
) -> int:
    """
    Points an audience adds to an achievement. At most one rule per audience.

    it_recruiters matches "CSA"/"CIS" in the name case-sensitively; the other
    rules are case-insensitive. General (or no) audience adds nothing.
    """
    boosts = boosts or AudienceBoostSettings()

    if audience is Audience.IT_RECRUITERS:
        name = achievement.name or ""
        if "CSA" in name or "CIS" in name:
            return boosts.it_recruiters
    elif audience is Audience.VETERAN_COMMUNITY:
        if _contains(achievement.description, "leadership"):
            return boosts.veteran_community
    elif audience is Audience.SERVICENOW_PROFESSIONALS:
        if _contains(achievement.issuer, "servicenow"):
            return boosts.servicenow_professionals
    return 0


def live_score(
    achievement: Achievement,
    context: Optional[TargetingContext] = None,
    today: Optional[date] = None,
    weights: Optional[ScoringSettings] = None,
    audience_boosts: Optional[AudienceBoostSettings] = None,
) -> Tuple[int, List[str]]:
    """
    Unclamped live priority score.

    Args:
        achievement: Record to score (missing optional fields simply earn no boost)
        context: Targeting context (audience rule runs only when an audience is set)
        today: Reference date for recency (defaults to the current date)
        weights: Boost constants
        audience_boosts: Per-audience boost constants

    Returns:
        (score, reasoning) with reasoning in rule application order
    """
    weights = weights or ScoringSettings()
    today = today or current_date()

    score = weights.base_score
    reasoning = []

    if _contains(achievement.name, "csa"):
        score += weights.csa_boost
        reasoning.append(_reason(CSA_RULE, weights.csa_boost))

    if days_since(achievement.date_earned, today) <= weights.recency_window_days:
        score += weights.recency_boost
        reasoning.append(_reason(RECENCY_RULE, weights.recency_boost))

    if achievement.is_certification:
        score += weights.certification_boost
        reasoning.append(_reason(CERTIFICATION_RULE, weights.certification_boost))

    if context is not None and context.target_audience is not None:
        boost = audience_boost(achievement, context.target_audience, audience_boosts)
        score += boost
        if boost > 0:
            reasoning.append(_reason(AUDIENCE_RULE, boost))

    if _contains(achievement.issuer, weights.platform_name):
        score += weights.platform_boost
        reasoning.append(_reason(PLATFORM_RULE, weights.platform_boost))

    return score, reasoning


def import_score(
    record: Union[Achievement, Mapping[str, Any]],
    today: Optional[date] = None,
    weights: Optional[ImportSettings] = None,
    scoring: Optional[ScoringSettings] = None,
) -> int:
    """
    Clamped import-time priority score in [min_score, max_score].

    CSA +25, platform keyword in name or issuer +15, certification +30,
    earned within the recency window +20, veteran keyword in name or
    description +15.
    """
    weights = weights or ImportSettings()
    scoring = scoring or ScoringSettings()
    today = today or current_date()

    if not isinstance(record, Achievement):
        record = Achievement.from_dict(record)

    name = (record.name or "").lower()
    issuer = (record.issuer or "").lower()
    description = (record.description or "").lower()

    score = scoring.base_score

    if "csa" in name:
        score += scoring.csa_boost

    if any(keyword in name or keyword in issuer for keyword in weights.platform_keywords):
        score += weights.platform_keyword_boost

    if AchievementType.parse(record.type) is AchievementType.CERTIFICATION:
        score += scoring.certification_boost

    if record.date_earned and days_since(record.date_earned, today) <= scoring.recency_window_days:
        score += scoring.recency_boost

    if any(keyword in name or keyword in description for keyword in weights.veteran_keywords):
        score += weights.veteran_keyword_boost

    return min(weights.max_score, max(weights.min_score, score))


@dataclass
class ScoredAchievement:
    """An achievement with its live score and derived display hints."""

    achievement_id: str
    achievement: Achievement
    priority_score: int
    reasoning: List[str] = field(default_factory=list)
    display_weight: str = "low"
    engagement_prediction: float = 0.1
    fallback_content: Optional[Dict[str, Any]] = None
    ai_generated_content: Optional[Dict[str, Any]] = None

    def to_dict(self, include_reasoning: bool = True) -> Dict[str, Any]:
        result = {
            "badge_id": self.achievement_id,
            "badge_data": self.achievement.to_dict(),
            "priority_score": self.priority_score,
            "display_weight": self.display_weight,
            "engagement_prediction": self.engagement_prediction,
        }
        if include_reasoning:
            result["reasoning"] = list(self.reasoning)
        if self.fallback_content is not None:
            result["fallback_content"] = dict(self.fallback_content)
        if self.ai_generated_content is not None:
            result["ai_generated_content"] = dict(self.ai_generated_content)
        return result


@dataclass
class ScoringResult:
    scored: List[ScoredAchievement]
    warnings: List[str] = field(default_factory=list)


def score_achievement(
    achievement: Achievement,
    context: Optional[TargetingContext] = None,
    today: Optional[date] = None,
    weights: Optional[ScoringSettings] = None,
    audience_boosts: Optional[AudienceBoostSettings] = None,
) -> ScoredAchievement:
    score, reasoning = live_score(achievement, context, today, weights, audience_boosts)
    return ScoredAchievement(
        achievement_id=achievement.id or achievement.name,
        achievement=achievement,
        priority_score=score,
        reasoning=reasoning,
        display_weight=display_weight(score),
        engagement_prediction=predict_engagement(score),
    )


def calculate_badge_scores(
    achievements,
    user_profile,
    context=None,
    *,
    today: Optional[date] = None,
    weights: Optional[ScoringSettings] = None,
    audience_boosts: Optional[AudienceBoostSettings] = None,
) -> ScoringResult:
    """
    Score and rank a list of achievements.

    Records that are neither Achievement instances nor mappings are skipped and
    reported in ScoringResult.warnings. Ranking is a stable descending sort, so
    equal scores keep their input order.

    Args:
        achievements: List of Achievement objects or raw mappings
        user_profile: Profile of the person being showcased (must be present)
        context: TargetingContext or raw context mapping
        today: Reference date for recency

    Returns:
        ScoringResult with scored achievements, highest score first

    Raises:
        SNASError(INVALID_INPUT): If achievements is not a list, user_profile is
            missing, or the context is malformed
    """
    if user_profile is None:
        raise SNASError(ErrorKind.INVALID_INPUT, "Invalid input parameters: user profile is required")
    if not isinstance(achievements, list):
        raise SNASError(
            ErrorKind.INVALID_INPUT,
            f"Invalid input parameters: achievements must be a list, got {type(achievements).__name__}",
        )

    context = TargetingContext.from_dict(context)
    today = today or current_date()
    warnings = list(context.warnings)

    scored = []
    for index, record in enumerate(achievements):
        try:
            achievement = record if isinstance(record, Achievement) else Achievement.from_dict(record)
        except TypeError as e:
            warnings.append(f"Skipped achievement at index {index}: {e}")
            continue
        scored.append(score_achievement(achievement, context, today, weights, audience_boosts))

    scored.sort(key=lambda item: item.priority_score, reverse=True)
    return ScoringResult(scored=scored, warnings=warnings)
