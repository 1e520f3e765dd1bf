"""Unit tests for settings loading."""

import pytest

from snas.utils.config import SNASSettings, load_settings


@pytest.mark.unit
def test_defaults(settings):
    """Test built-in default values."""
    assert isinstance(settings, SNASSettings)
    assert settings.scoring.base_score == 50
    assert settings.audience_boosts.servicenow_professionals == 25
    assert settings.cache.ttl_seconds == 300
    assert settings.performance.sla_ms == 2000
    assert settings.ai_enabled is False


@pytest.mark.unit
def test_yaml_file_overrides_defaults(tmp_path):
    """Test that a settings file is merged over the defaults."""
    config_path = tmp_path / "snas.yaml"
    config_path.write_text("scoring:\n  csa_boost: 40\ncache:\n  ttl_seconds: 60\n")

    settings = load_settings(config_path=config_path, use_env=False)

    assert settings.scoring.csa_boost == 40
    assert settings.cache.ttl_seconds == 60
    assert settings.scoring.base_score == 50


@pytest.mark.unit
def test_missing_config_file_raises(tmp_path):
    """Test that an explicit but missing file is an error."""
    with pytest.raises(FileNotFoundError):
        load_settings(config_path=tmp_path / "nope.yaml", use_env=False)


@pytest.mark.unit
def test_environment_overrides(monkeypatch):
    """Test SNAS_* environment variables, with type conversion."""
    monkeypatch.setenv("SNAS_AI_API_KEY", "secret")
    monkeypatch.setenv("SNAS_SLA_MS", "500")
    monkeypatch.delenv("SNAS_CONFIG_PATH", raising=False)

    settings = load_settings()

    assert settings.ai.api_key == "secret"
    assert settings.performance.sla_ms == 500
    assert settings.ai_enabled is True


@pytest.mark.unit
def test_explicit_overrides_win(monkeypatch):
    """Test that overrides are applied after the environment."""
    monkeypatch.setenv("SNAS_AI_TIMEOUT_MS", "900")

    settings = load_settings(overrides={"ai": {"timeout_ms": 100}})

    assert settings.ai.timeout_ms == 100


@pytest.mark.unit
def test_blank_api_key_disables_ai():
    """Test that a whitespace credential does not enable the AI backend."""
    settings = load_settings(overrides={"ai": {"api_key": "   "}}, use_env=False)

    assert settings.ai_enabled is False
