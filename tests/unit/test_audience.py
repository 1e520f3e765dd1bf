"""Unit tests for audience parsing and TargetingContext."""

import pytest

from snas.contexts.targeting.audience import Audience, ContentType, TargetingContext
from snas.utils.errors import ErrorKind, SNASError


@pytest.mark.unit
def test_from_dict_none_gives_defaults():
    """Test that no context means no audience and reasoning on."""
    context = TargetingContext.from_dict(None)

    assert context.target_audience is None
    assert context.include_reasoning is True
    assert context.audience_key == "default"


@pytest.mark.unit
def test_from_dict_parses_known_values():
    """Test parsing of every supported key."""
    context = TargetingContext.from_dict(
        {"target_audience": "IT_Recruiters", "include_reasoning": False, "content_type": "linkedin_post"}
    )

    assert context.target_audience is Audience.IT_RECRUITERS
    assert context.include_reasoning is False
    assert context.content_type is ContentType.LINKEDIN_POST
    assert context.audience_key == "it_recruiters"


@pytest.mark.unit
def test_unknown_audience_maps_to_general_with_warning():
    """Test that an unknown audience is not an error."""
    context = TargetingContext.from_dict({"target_audience": "astronauts"})

    assert context.target_audience is Audience.GENERAL
    assert len(context.warnings) == 1
    assert "astronauts" in context.warnings[0]


@pytest.mark.unit
def test_unknown_key_rejected():
    """Test that unrecognized context keys raise INVALID_INPUT."""
    with pytest.raises(SNASError) as exc_info:
        TargetingContext.from_dict({"target_audience": "general", "tone": "casual"})

    assert exc_info.value.kind is ErrorKind.INVALID_INPUT
    assert "tone" in exc_info.value.message


@pytest.mark.unit
@pytest.mark.parametrize("data", [["target_audience"], "general", 7])
def test_non_mapping_context_rejected(data):
    """Test INVALID_INPUT for non-mapping context values."""
    with pytest.raises(SNASError):
        TargetingContext.from_dict(data)


@pytest.mark.unit
def test_include_reasoning_must_be_boolean():
    """Test that truthy strings are not accepted as booleans."""
    with pytest.raises(SNASError):
        TargetingContext.from_dict({"include_reasoning": "yes"})


@pytest.mark.unit
def test_context_instance_passes_through():
    """Test that an existing context is returned unchanged."""
    context = TargetingContext(target_audience=Audience.VETERAN_COMMUNITY)

    assert TargetingContext.from_dict(context) is context


@pytest.mark.unit
def test_content_type_parse_rejects_unknown():
    """Test that unknown content types list the valid ones."""
    with pytest.raises(SNASError) as exc_info:
        ContentType.parse("tweet")

    assert "linkedin_post" in exc_info.value.message


@pytest.mark.unit
def test_to_dict_uses_plain_values():
    """Test the serialized context shape."""
    context = TargetingContext(target_audience=Audience.GENERAL, content_type=ContentType.BADGE_DESCRIPTION)

    assert context.to_dict() == {
        "target_audience": "general",
        "include_reasoning": True,
        "content_type": "badge_description",
    }
