"""Integration tests for cached content generation."""

import pytest

from snas.contexts.content.ai_client import AIOk, AIResponse, AIServiceError, AITimedOut
from snas.contexts.content.generator import (
    API_SOURCE_AI,
    API_SOURCE_FALLBACK,
    ContentGenerator,
    content_cache_key,
)
from snas.contexts.intake.achievement_data_structure import Achievement
from snas.utils.cache import InMemoryCache
from snas.utils.config import load_settings
from snas.utils.metrics import PerformanceMetrics


class FakeAIClient:
    """Stand-in for AIBackendClient returning a fixed result."""

    def __init__(self, result, is_configured=True):
        self.result = result
        self.is_configured = is_configured
        self.calls = []

    def analyze_achievement(self, achievement, context=None):
        self.calls.append((achievement.name, context))
        return self.result


@pytest.fixture
def ai_settings():
    return load_settings(overrides={"ai": {"api_key": "test-key"}}, use_env=False)


@pytest.fixture
def csa():
    return {
        "id": "csa-1",
        "name": "Certified System Administrator (CSA)",
        "type": "certification",
        "issuer": "ServiceNow",
        "description": "Core platform administration.",
        "category": "ServiceNow",
    }


@pytest.mark.integration
def test_fallback_generation_response_shape(settings, csa):
    """Test a fallback response without AI credentials."""
    generator = ContentGenerator(settings=settings)

    response = generator.generate_content_suggestions(csa, "linkedin_post")

    assert response["success"] is True
    assert response["content_type"] == "linkedin_post"
    assert len(response["suggestions"]) == 3
    assert [c["content_id"] for c in response["confidence_scores"]] == [
        "suggestion_0",
        "suggestion_1",
        "suggestion_2",
    ]
    assert response["performance_metadata"] == {
        "sla_compliant": True,
        "cache_hit": False,
        "api_source": API_SOURCE_FALLBACK,
    }
    assert all(csa["name"] in s["content"] for s in response["suggestions"])


@pytest.mark.integration
def test_second_call_hits_cache(settings, csa):
    """Test that a repeated request is served from the cache."""
    metrics = PerformanceMetrics()
    generator = ContentGenerator(settings=settings, metrics=metrics)

    first = generator.generate_content_suggestions(csa, "badge_description", max_variants=1)
    second = generator.generate_content_suggestions(csa, "badge_description", max_variants=2)

    assert first["performance_metadata"]["cache_hit"] is False
    assert second["performance_metadata"]["cache_hit"] is True
    assert len(first["suggestions"]) == 1
    assert len(second["suggestions"]) == 2
    assert second["suggestions"][0] == first["suggestions"][0]
    assert (metrics.cache_hits, metrics.cache_misses, metrics.api_call_count) == (1, 1, 2)


@pytest.mark.integration
def test_cache_key_includes_audience(settings, csa):
    """Test that audiences are cached separately."""
    cache = InMemoryCache()
    generator = ContentGenerator(settings=settings, cache=cache)

    generator.generate_content_suggestions(csa, "linkedin_post")
    response = generator.generate_content_suggestions(
        csa, "linkedin_post", {"target_audience": "veteran_community"}
    )

    assert response["performance_metadata"]["cache_hit"] is False
    assert cache.get(content_cache_key("csa-1", "linkedin_post")) is not None
    assert cache.get(content_cache_key("csa-1", "linkedin_post", "veteran_community")) is not None


@pytest.mark.integration
def test_cache_entry_expires(settings, csa, fake_clock):
    """Test that content is regenerated after the cache TTL."""
    generator = ContentGenerator(settings=settings, cache=InMemoryCache(clock=fake_clock))
    generator.generate_content_suggestions(csa, "linkedin_post")

    fake_clock.advance(settings.cache.ttl_seconds)
    response = generator.generate_content_suggestions(csa, "linkedin_post")

    assert response["performance_metadata"]["cache_hit"] is False


@pytest.mark.integration
def test_sla_violation_is_flagged_not_failed(settings, csa, step_timer):
    """Test a slow call: still successful, flagged and counted."""
    metrics = PerformanceMetrics(sla_ms=settings.performance.sla_ms)
    generator = ContentGenerator(settings=settings, metrics=metrics, timer=step_timer(3.0))

    response = generator.generate_content_suggestions(csa, "professional_summary")

    assert response["success"] is True
    assert response["processing_time_ms"] == 3000
    assert response["performance_metadata"]["sla_compliant"] is False
    assert metrics.sla_violations == 1


@pytest.mark.integration
def test_ai_content_used_when_configured(ai_settings, csa):
    """Test the AI path and its api_source."""
    client = FakeAIClient(AIOk(AIResponse(summary="CSA summary", confidence=0.93)))
    generator = ContentGenerator(settings=ai_settings, ai_client=client)

    response = generator.generate_content_suggestions(
        csa, "professional_summary", {"target_audience": "servicenow_professionals"}
    )

    assert response["performance_metadata"]["api_source"] == API_SOURCE_AI
    assert response["suggestions"] == [
        {
            "content": "CSA summary",
            "confidence": 0.93,
            "veteran_aligned": True,
            "style": "ai_generated",
            "ai_generated": True,
        }
    ]
    assert client.calls[0][1]["target_audience"] == "servicenow_professionals"


@pytest.mark.integration
def test_ai_linkedin_post_gets_category_hashtags(ai_settings):
    """Test that AI posts end with the same hashtags as template posts."""
    award = {"name": "Navy Leadership Award", "issuer": "U.S. Navy", "category": "Military"}
    client = FakeAIClient(AIOk(AIResponse(linkedin_post="Earned Navy Leadership Award")))
    generator = ContentGenerator(settings=ai_settings, ai_client=client)
    hashtags = generator.fallback.profiles.hashtags_for(award["name"], award["category"])

    content = generator.generate_content_suggestions(award, "linkedin_post")["suggestions"][0]["content"]

    assert content.startswith("Earned Navy Leadership Award")
    assert content.endswith(hashtags)
    assert "#VeteranLeadership" in hashtags


@pytest.mark.integration
def test_ai_linkedin_post_hashtags_not_repeated(ai_settings, csa):
    """Test that a post already ending with the hashtags is left as is."""
    hashtags = ContentGenerator(settings=ai_settings).fallback.profiles.hashtags_for(csa["name"], csa["category"])
    post = f"Proud of my CSA! {hashtags}"
    generator = ContentGenerator(settings=ai_settings, ai_client=FakeAIClient(AIOk(AIResponse(linkedin_post=post))))

    response = generator.generate_content_suggestions(csa, "linkedin_post")

    assert response["suggestions"][0]["content"] == post


@pytest.mark.integration
@pytest.mark.parametrize(
    "body, content_type",
    [
        ({}, "linkedin_post"),
        ({"linkedin_post": 123}, "linkedin_post"),
        ({"summary": ["not", "text"]}, "professional_summary"),
        ({"linkedin_post": "only a post"}, "professional_summary"),
    ],
)
def test_unusable_ai_response_uses_full_fallback(ai_settings, csa, body, content_type):
    """Test that an AI body without the requested text is served from templates."""
    client = FakeAIClient(AIOk(AIResponse.from_json(body)))
    generator = ContentGenerator(settings=ai_settings, ai_client=client)

    response = generator.generate_content_suggestions(csa, content_type)

    assert response["performance_metadata"]["api_source"] == API_SOURCE_FALLBACK
    assert len(response["suggestions"]) == 3
    assert all(s["ai_generated"] is False for s in response["suggestions"])
    assert all(isinstance(s["content"], str) and csa["name"] in s["content"] for s in response["suggestions"])


@pytest.mark.integration
@pytest.mark.parametrize("result", [AITimedOut(1500), AIServiceError("API returned status 503", 503)])
def test_ai_failure_falls_back_silently(ai_settings, csa, result):
    """Test that AI timeouts and errors produce fallback content, not errors."""
    generator = ContentGenerator(settings=ai_settings, ai_client=FakeAIClient(result))

    response = generator.generate_content_suggestions(csa, "linkedin_post")

    assert response["success"] is True
    assert response["performance_metadata"]["api_source"] == API_SOURCE_FALLBACK
    assert len(response["suggestions"]) == 3


@pytest.mark.integration
def test_ai_not_called_without_credentials(settings, csa):
    """Test that a blank key keeps generation on the fallback path."""
    client = FakeAIClient(AIOk(AIResponse(linkedin_post="unused")))

    ContentGenerator(settings=settings, ai_client=client).generate_content_suggestions(csa, "linkedin_post")

    assert client.calls == []


@pytest.mark.integration
@pytest.mark.parametrize(
    "achievement, content_type, max_variants",
    [
        ({"name": ""}, "linkedin_post", 3),
        ("CSA", "linkedin_post", 3),
        ({"name": "CSA"}, "tweet", 3),
        ({"name": "CSA"}, "linkedin_post", 5),
    ],
)
def test_invalid_requests_return_400(settings, achievement, content_type, max_variants):
    """Test structured INVALID_INPUT responses."""
    response = ContentGenerator(settings=settings).generate_content_suggestions(
        achievement, content_type, max_variants=max_variants
    )

    assert response["success"] is False
    assert response["status_code"] == 400


@pytest.mark.integration
def test_generate_for_id(settings, store):
    """Test generation for a stored achievement."""
    achievement_id = store.insert(Achievement(name="ITIL 4 Foundation", issuer="ITIL", category="Certification"))
    generator = ContentGenerator(settings=settings, store=store)

    response = generator.generate_for_id(achievement_id, "badge_description", max_variants=2)

    assert response["success"] is True
    assert len(response["suggestions"]) == 2


@pytest.mark.integration
def test_generate_for_unknown_id_returns_404(settings, store):
    """Test RECORD_NOT_FOUND for a missing achievement."""
    response = ContentGenerator(settings=settings, store=store).generate_for_id("missing", "linkedin_post")

    assert response["status_code"] == 404
    assert response["error_kind"] == "RECORD_NOT_FOUND"


@pytest.mark.integration
def test_generate_for_id_without_store(settings):
    """Test STORAGE_FAILURE when no store is configured."""
    response = ContentGenerator(settings=settings).generate_for_id("any", "linkedin_post")

    assert response["status_code"] == 500
