"""
Portfolio statistics and data status.

Reporting helpers over the achievement store: counts by type, issuer and
category, recency, veteran alignment, data quality grading and the top
achievements by stored priority score.
"""

from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional

from snas.contexts.intake.achievement_data_structure import Achievement, AchievementType
from snas.utils.achievement_store import AchievementStore
from snas.utils.timestamp import days_since, today as current_date

STATISTICS_RECENT_DAYS = 90
STATUS_RECENT_DAYS = 180
HIGH_PRIORITY_SCORE = 80

VETERAN_ALIGNMENT_KEYWORDS = ("leadership", "service", "excellence", "discipline", "mission", "team")

# (upper bound exclusive, grade, message); counts at or above the last bound grade HIGH
QUALITY_GRADES = [
    (1, "CRITICAL", "No achievement data found. Data population required."),
    (10, "LOW", "Limited achievement data. Consider importing additional records."),
    (25, "MEDIUM", "Adequate achievement data. Consider validating data completeness."),
]
HIGH_QUALITY_MESSAGE = "Comprehensive achievement data populated and ready."


def is_veteran_aligned(achievement: Achievement) -> bool:
    parts = (achievement.name, achievement.description, achievement.category)
    text = " ".join(part or "" for part in parts).lower()
    return any(keyword in text for keyword in VETERAN_ALIGNMENT_KEYWORDS)


def _is_recent(achievement: Achievement, window_days: int, today: date) -> bool:
    return bool(achievement.date_earned) and days_since(achievement.date_earned, today) <= window_days


def generate_badge_statistics(store: AchievementStore, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Statistics over active achievements.

    Returns:
        Dict with total_badges, certifications, achievements, badges,
        servicenow_badges, recent_badges, veteran_aligned, categories, issuers
    """
    today = today or current_date()
    active = store.query(active=True)

    types = Counter(a.achievement_type for a in active)
    return {
        "total_badges": len(active),
        "certifications": types[AchievementType.CERTIFICATION],
        "achievements": types[AchievementType.ACHIEVEMENT],
        "badges": types[AchievementType.BADGE],
        "servicenow_badges": sum(1 for a in active if "servicenow" in (a.issuer or "").lower()),
        "recent_badges": sum(1 for a in active if _is_recent(a, STATISTICS_RECENT_DAYS, today)),
        "veteran_aligned": sum(1 for a in active if is_veteran_aligned(a)),
        "categories": dict(Counter(a.category or "Uncategorized" for a in active)),
        "issuers": dict(Counter(a.issuer or "unknown" for a in active)),
    }


def assess_data_quality(total_count: int) -> Dict[str, str]:
    for upper_bound, grade, message in QUALITY_GRADES:
        if total_count < upper_bound:
            return {"score": grade, "message": message}
    return {"score": "HIGH", "message": HIGH_QUALITY_MESSAGE}


def recommended_actions(total_count: int) -> List[Dict[str, str]]:
    actions = []
    if total_count == 0:
        actions.append(
            {
                "action": "populate_default_data",
                "description": "Import default SNAS achievement dataset",
                "priority": "CRITICAL",
            }
        )
    elif total_count < 25:
        actions.append(
            {
                "action": "validate_data",
                "description": "Validate and update existing achievement data",
                "priority": "HIGH",
            }
        )

    actions.append(
        {
            "action": "check_priority_scores",
            "description": "Ensure all achievements have proper priority scoring",
            "priority": "MEDIUM",
        }
    )
    return actions


def analyze_data_status(store: AchievementStore, today: Optional[date] = None) -> Dict[str, Any]:
    """Status of all stored achievements (active or not) with a quality grade."""
    today = today or current_date()
    records = store.query()
    total = len(records)

    return {
        "total_achievements": total,
        "data_populated": total > 0,
        "type_breakdown": dict(Counter(a.type or "unknown" for a in records)),
        "issuer_breakdown": dict(Counter(a.issuer or "unknown" for a in records)),
        "recent_achievements": sum(1 for a in records if _is_recent(a, STATUS_RECENT_DAYS, today)),
        "high_priority_achievements": sum(
            1 for a in records if (a.priority_score or 0) >= HIGH_PRIORITY_SCORE
        ),
        "data_quality": assess_data_quality(total),
        "recommended_actions": recommended_actions(total),
    }


def get_top_achievements(store: AchievementStore, limit: int = 10) -> List[Achievement]:
    """Active achievements with the highest stored priority score."""
    return store.query(order_by="priority_score", descending=True, limit=limit, active=True)


def summarize_achievements(achievements: List[Achievement]) -> Dict[str, int]:
    types = Counter(a.achievement_type for a in achievements)
    return {
        "total_achievements": len(achievements),
        "certifications": types[AchievementType.CERTIFICATION],
        "badges": types[AchievementType.BADGE],
        "achievements": types[AchievementType.ACHIEVEMENT],
        "servicenow_focus": sum(1 for a in achievements if "servicenow" in (a.issuer or "").lower()),
        "veteran_heritage": sum(
            1 for a in achievements if "military" in (a.name or "").lower() or "navy" in (a.issuer or "").lower()
        ),
    }
