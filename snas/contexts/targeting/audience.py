"""
Audience targeting options.

TargetingContext replaces free-form context dicts: it knows exactly three
options (target_audience, include_reasoning, content_type) and rejects any
other key instead of silently ignoring it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from snas.utils.errors import ErrorKind, SNASError


class Audience(str, Enum):
    IT_RECRUITERS = "it_recruiters"
    VETERAN_COMMUNITY = "veteran_community"
    SERVICENOW_PROFESSIONALS = "servicenow_professionals"
    # No audience rule exists for general readers; it scores +0
    GENERAL = "general"

    @classmethod
    def parse(cls, value) -> Optional["Audience"]:
        """Case-insensitive lookup. Returns None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class ContentType(str, Enum):
    LINKEDIN_POST = "linkedin_post"
    BADGE_DESCRIPTION = "badge_description"
    PROFESSIONAL_SUMMARY = "professional_summary"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value) -> "ContentType":
        """
        Raises:
            SNASError(INVALID_INPUT): If value is not a known content type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise SNASError(
                ErrorKind.INVALID_INPUT,
                f"Invalid content type {value!r}. Must be one of: {', '.join(cls.values())}",
            )


@dataclass
class TargetingContext:
    """
    Caller-supplied targeting hints.

    Attributes:
        target_audience: Audience to boost for (None means no audience rule runs)
        include_reasoning: Keep per-rule reasoning strings in scored output
        content_type: Preferred content type for enhancement
        warnings: Notes produced while interpreting raw input (e.g., unknown audience)
    """

    target_audience: Optional[Audience] = None
    include_reasoning: bool = True
    content_type: Optional[ContentType] = None
    warnings: List[str] = field(default_factory=list, compare=False)

    KNOWN_KEYS = ("target_audience", "include_reasoning", "content_type")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TargetingContext":
        """
        Build a context from a raw mapping.

        Unknown audience values become Audience.GENERAL (scores +0) with a warning.

        Raises:
            SNASError(INVALID_INPUT): On unrecognized keys, a non-mapping value
                or an invalid content_type
        """
        if data is None:
            return cls()
        if isinstance(data, TargetingContext):
            return data
        if not isinstance(data, Mapping):
            raise SNASError(
                ErrorKind.INVALID_INPUT,
                f"Context must be a mapping, got {type(data).__name__}",
            )

        unknown = sorted(set(data) - set(cls.KNOWN_KEYS))
        if unknown:
            raise SNASError(
                ErrorKind.INVALID_INPUT,
                f"Unrecognized context keys: {', '.join(unknown)}",
                details=[f"Allowed keys: {', '.join(cls.KNOWN_KEYS)}"],
            )

        warnings = []
        audience = None
        raw_audience = data.get("target_audience")
        if raw_audience not in (None, ""):
            audience = Audience.parse(raw_audience)
            if audience is None:
                warnings.append(f"Unrecognized target audience {raw_audience!r}; no audience boost applied")
                audience = Audience.GENERAL

        raw_content_type = data.get("content_type")
        content_type = ContentType.parse(raw_content_type) if raw_content_type not in (None, "") else None

        include_reasoning = data.get("include_reasoning", True)
        if not isinstance(include_reasoning, bool):
            raise SNASError(ErrorKind.INVALID_INPUT, "include_reasoning must be a boolean")

        return cls(
            target_audience=audience,
            include_reasoning=include_reasoning,
            content_type=content_type,
            warnings=warnings,
        )

    @property
    def audience_key(self) -> str:
        """Audience component of cache keys."""
        return self.target_audience.value if self.target_audience else "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_audience": self.target_audience.value if self.target_audience else None,
            "include_reasoning": self.include_reasoning,
            "content_type": self.content_type.value if self.content_type else None,
        }
