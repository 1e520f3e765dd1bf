"""
Deterministic fallback content.

Used whenever the AI backend is not configured or its call does not succeed.
Every variant mentions the achievement name verbatim; LinkedIn posts end with
the category hashtags.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional

from snas.contexts.content.registries import CategoryProfileRegistry, ContentTemplateRegistry
from snas.contexts.intake.achievement_data_structure import Achievement
from snas.contexts.targeting.audience import ContentType

PLATFORM_NAME = "ServiceNow"
DESCRIPTION_SUMMARY_LENGTH = 100
MAX_VARIANTS = 3

# Prioritizer enhancement when no AI content is available
ENHANCEMENT_CONFIDENCE = 0.75
ENHANCEMENT_HASHTAGS = "#ServiceNow #VeteranInTech #ProfessionalDevelopment"


@dataclass
class ContentSuggestion:
    content: str
    confidence: float
    veteran_aligned: bool = True
    style: str = ""
    ai_generated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContentSuggestion":
        return cls(
            content=data["content"],
            confidence=data["confidence"],
            veteran_aligned=data.get("veteran_aligned", True),
            style=data.get("style", ""),
            ai_generated=data.get("ai_generated", False),
        )


def summarize_description(description: str, limit: int = DESCRIPTION_SUMMARY_LENGTH) -> str:
    description = (description or "").strip()
    if len(description) > limit:
        return description[:limit] + "..."
    return description


class FallbackContentGenerator:
    """
    Renders fallback suggestions from the content templates.

    Args:
        templates: ContentTemplateRegistry (default: packaged templates)
        profiles: CategoryProfileRegistry (default: packaged category_profiles.yaml)
    """

    def __init__(
        self,
        templates: Optional[ContentTemplateRegistry] = None,
        profiles: Optional[CategoryProfileRegistry] = None,
    ):
        self.templates = templates or ContentTemplateRegistry()
        self.profiles = profiles or CategoryProfileRegistry()

    def template_variables(self, achievement: Achievement) -> Dict[str, Any]:
        achievement_type = achievement.achievement_type
        return {
            "name": achievement.name,
            "issuer": achievement.issuer,
            "category": achievement.category,
            "type_label": achievement_type.value if achievement_type else "achievement",
            "description_summary": summarize_description(achievement.description),
            "platform": PLATFORM_NAME,
            "profile": self.profiles.get_profile(achievement.category),
            "hashtags": self.profiles.hashtags_for(achievement.name, achievement.category),
        }

    def generate(
        self,
        achievement: Achievement,
        content_type,
        max_variants: int = MAX_VARIANTS,
    ) -> List[ContentSuggestion]:
        """
        Render up to max_variants suggestions (1 to 3) in configured style order.

        Raises:
            SNASError(INVALID_INPUT): If content_type is not a known content type
            ValueError: If max_variants is outside 1..3
        """
        content_type = ContentType.parse(content_type)
        if not 1 <= max_variants <= MAX_VARIANTS:
            raise ValueError(f"max_variants must be between 1 and {MAX_VARIANTS}, got {max_variants}")

        variables = self.template_variables(achievement)
        styles = self.profiles.get_styles(content_type.value)[:max_variants]

        return [
            ContentSuggestion(
                content=self.templates.render(content_type.value, spec.style, **variables),
                confidence=spec.confidence,
                veteran_aligned=True,
                style=spec.style,
                ai_generated=False,
            )
            for spec in styles
        ]

    def first(self, achievement: Achievement, content_type) -> ContentSuggestion:
        """The primary (first-style) suggestion, used to fill gaps in AI responses."""
        return self.generate(achievement, content_type, max_variants=1)[0]


def fallback_enhancement(achievement: Achievement) -> Dict[str, Any]:
    """Lightweight content attached to prioritized achievements when AI is unavailable."""
    return {
        "linkedin_post": f"Proud to showcase my {achievement.name} achievement! {ENHANCEMENT_HASHTAGS}",
        "professional_summary": f"Demonstrated expertise in {achievement.category or 'ServiceNow platform'}",
        "confidence_score": ENHANCEMENT_CONFIDENCE,
    }
