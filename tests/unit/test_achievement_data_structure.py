"""Unit tests for the Achievement record and normalizers."""

import pytest

from snas.contexts.intake.achievement_data_structure import (
    Achievement,
    AchievementType,
    normalize_issuer,
    normalize_text,
)


@pytest.mark.unit
def test_from_dict_minimal():
    """Test that only name is needed and defaults fill the rest."""
    achievement = Achievement.from_dict({"name": "CSA"})

    assert achievement.name == "CSA"
    assert achievement.issuer == ""
    assert achievement.date_earned is None
    assert achievement.active is True
    assert achievement.id is None


@pytest.mark.unit
def test_from_dict_accepts_sys_id_and_coerces_fields():
    """Test sys_id alias, score parsing and active parsing."""
    achievement = Achievement.from_dict(
        {"sys_id": "abc123", "name": "CSA", "priority_score": "85", "active": "false"}
    )

    assert achievement.id == "abc123"
    assert achievement.priority_score == 85
    assert achievement.active is False


@pytest.mark.unit
def test_from_dict_bad_score_becomes_none():
    """Test that unparseable scores are dropped."""
    assert Achievement.from_dict({"name": "CSA", "priority_score": "high"}).priority_score is None


@pytest.mark.unit
def test_from_dict_rejects_non_mapping():
    """Test TypeError for non-mapping input."""
    with pytest.raises(TypeError):
        Achievement.from_dict(["CSA"])


@pytest.mark.unit
@pytest.mark.parametrize("value, expected", [("Certification", True), ("badge", False), ("", False)])
def test_is_certification(value, expected):
    """Test case-insensitive certification detection."""
    assert Achievement(name="x", type=value).is_certification is expected


@pytest.mark.unit
def test_achievement_type_parse():
    """Test type lookup including unknown values."""
    assert AchievementType.parse(" BADGE ") is AchievementType.BADGE
    assert AchievementType.parse("diploma") is None
    assert AchievementType.parse(None) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "issuer, expected",
    [
        ("  servicenow university ", "ServiceNow"),
        ("SERVICENOW", "ServiceNow"),
        (" CompTIA ", "CompTIA"),
        (None, ""),
    ],
)
def test_normalize_issuer(issuer, expected):
    """Test issuer alias collapsing and trimming."""
    assert normalize_issuer(issuer) == expected


@pytest.mark.unit
def test_normalize_text_collapses_whitespace():
    """Test whitespace normalization."""
    assert normalize_text("  Certified   System\tAdministrator \n") == "Certified System Administrator"


@pytest.mark.unit
def test_payload_excludes_storage_fields():
    """Test the fields sent to the AI backend."""
    payload = Achievement(name="CSA", priority_score=90, id="x").payload()

    assert set(payload) == {"name", "type", "issuer", "description", "category"}
