"""
Achievement data structure for the Intake context.

Provides the Achievement record shared by every context, the closed set of
achievement types, and the text/issuer normalizers applied on import and cleanup.
"""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

# Issuer spellings collapse to a canonical name when the lower-cased issuer contains the key
ISSUER_ALIASES = {
    "servicenow": "ServiceNow",
}

FIELDNAMES = [
    "id",
    "name",
    "type",
    "issuer",
    "description",
    "category",
    "date_earned",
    "priority_score",
    "active",
]


class AchievementType(str, Enum):
    CERTIFICATION = "certification"
    BADGE = "badge"
    ACHIEVEMENT = "achievement"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value) -> Optional["AchievementType"]:
        """Case-insensitive lookup. Returns None for unknown or empty values."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def normalize_text(text) -> str:
    """Trim and collapse internal whitespace."""
    if text is None:
        return ""
    return re.sub(r"\s+", " ", str(text).strip())


def normalize_issuer(issuer) -> str:
    """
    Trim the issuer and collapse known aliases to their canonical spelling.

    Examples:
        normalize_issuer("  servicenow university ")  # "ServiceNow"
        normalize_issuer(" CompTIA ")                 # "CompTIA"
    """
    normalized = normalize_text(issuer)
    lowered = normalized.lower()
    for alias, canonical in ISSUER_ALIASES.items():
        if alias in lowered:
            return canonical
    return normalized


def _parse_bool(value, default: bool = True) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "y")


def _parse_score(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class Achievement:
    """
    A single certification, badge or recognition.

    Only name is required to construct one; every other field may be absent,
    in which case scoring treats it as "no boost applies".

    Factory methods:
        from_dict(mapping) - Build from a raw record (CSV row, JSON body, store row)
    """

    name: str
    type: str = ""
    issuer: str = ""
    description: str = ""
    category: str = ""
    date_earned: Optional[str] = None
    priority_score: Optional[int] = None
    active: Optional[bool] = True
    id: Optional[str] = None

    @property
    def achievement_type(self) -> Optional[AchievementType]:
        return AchievementType.parse(self.type)

    @property
    def is_certification(self) -> bool:
        return self.achievement_type is AchievementType.CERTIFICATION

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for duplicate detection and upserts."""
        return (self.name, self.issuer)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Achievement":
        """
        Build an Achievement from a raw mapping.

        Accepts "sys_id" as an alias for "id". Values are stringified but not
        normalized (see loader.transform_record for import normalization).

        Raises:
            TypeError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Achievement data must be a mapping, got {type(data).__name__}")

        def text(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        record_id = data.get("id") or data.get("sys_id")
        date_earned = data.get("date_earned")

        return cls(
            id=str(record_id) if record_id not in (None, "") else None,
            name=text("name"),
            type=text("type"),
            issuer=text("issuer"),
            description=text("description"),
            category=text("category"),
            date_earned=str(date_earned) if date_earned not in (None, "") else None,
            priority_score=_parse_score(data.get("priority_score")),
            active=_parse_bool(data.get("active"), default=None) if "active" in data else True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def payload(self) -> Dict[str, str]:
        """Fields sent to the AI backend."""
        return {
            "name": self.name,
            "type": self.type,
            "issuer": self.issuer,
            "description": self.description,
            "category": self.category,
        }
