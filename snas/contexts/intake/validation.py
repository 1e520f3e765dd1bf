"""
Per-record validation for achievement imports.

A record passes when every required field is present and non-blank, the type
is one of the AchievementType values (case-insensitive) and date_earned is a
YYYY-MM-DD string.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from snas.contexts.intake.achievement_data_structure import AchievementType
from snas.utils.timestamp import ISO_DATE_PATTERN

REQUIRED_FIELDS = ("name", "type", "issuer", "description", "category", "date_earned")

# Fields the single-record upsert path insists on
UPSERT_REQUIRED_FIELDS = ("name", "type", "issuer")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_blank(value) -> bool:
    return value is None or str(value).strip() == ""


def validate_achievement_record(record, required_fields=REQUIRED_FIELDS) -> ValidationResult:
    """
    Validate a raw achievement record.

    Args:
        record: Mapping of field name to raw value (CSV row, YAML entry, JSON body)
        required_fields: Fields that must be present and non-blank

    Returns:
        ValidationResult listing every problem found (not just the first)
    """
    if not isinstance(record, Mapping):
        return ValidationResult(False, [f"Record must be a mapping, got {type(record).__name__}"])

    errors = [
        f"Missing required field: {field_name}"
        for field_name in required_fields
        if _is_blank(record.get(field_name))
    ]

    record_type = record.get("type")
    if not _is_blank(record_type) and AchievementType.parse(record_type) is None:
        errors.append(f"Invalid type. Must be one of: {', '.join(AchievementType.values())}")

    date_earned = record.get("date_earned")
    if not _is_blank(date_earned) and not ISO_DATE_PATTERN.match(str(date_earned).strip()):
        errors.append("Invalid date format. Expected YYYY-MM-DD")

    return ValidationResult(not errors, errors)
