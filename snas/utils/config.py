"""
SNAS settings.

Settings are an OmegaConf structured config built in three layers (later wins):
1. Dataclass defaults below
2. Optional YAML file (argument, or SNAS_CONFIG_PATH from environment)
3. Environment variables listed in ENV_OVERRIDES (loaded from .env by python-dotenv)

Examples:
    >>> settings = load_settings()
    >>> settings.scoring.csa_boost
    25

    >>> settings = load_settings(overrides={"ai": {"api_key": "test-key"}})
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

# Environment variable -> dotted settings key
ENV_OVERRIDES = {
    "SNAS_AI_BASE_URL": "ai.base_url",
    "SNAS_AI_API_KEY": "ai.api_key",
    "SNAS_AI_TIMEOUT_MS": "ai.timeout_ms",
    "SNAS_CACHE_TTL_SECONDS": "cache.ttl_seconds",
    "SNAS_CACHE_PATH": "cache.path",
    "SNAS_DB_PATH": "store.path",
    "SNAS_SLA_MS": "performance.sla_ms",
    "SNAS_IMPORT_BATCH_SIZE": "importing.batch_size",
}


@dataclass
class AISettings:
    base_url: str = "https://api.manus.ai/v1"
    api_key: str = ""
    timeout_ms: int = 1500
    client_header: str = "SNAS-Python-v0.1"


@dataclass
class ScoringSettings:
    """Live (unclamped) scoring constants."""

    base_score: int = 50
    csa_boost: int = 25
    recency_boost: int = 20
    recency_window_days: int = 90
    certification_boost: int = 30
    platform_boost: int = 15
    platform_name: str = "servicenow"


@dataclass
class AudienceBoostSettings:
    it_recruiters: int = 20
    veteran_community: int = 15
    servicenow_professionals: int = 25


@dataclass
class ImportSettings:
    """Import-time (clamped) scoring constants and batching."""

    batch_size: int = 50
    default_batch_size: int = 10
    min_score: int = 10
    max_score: int = 100
    platform_keyword_boost: int = 15
    veteran_keyword_boost: int = 15
    platform_keywords: List[str] = field(
        default_factory=lambda: ["servicenow", "csa", "cis", "itsm", "platform"]
    )
    veteran_keywords: List[str] = field(
        default_factory=lambda: ["military", "navy", "veteran", "leadership", "service", "mentorship"]
    )


@dataclass
class CacheSettings:
    ttl_seconds: int = 300
    path: Optional[str] = None


@dataclass
class StoreSettings:
    path: Optional[str] = None


@dataclass
class PerformanceSettings:
    sla_ms: int = 2000


@dataclass
class SNASSettings:
    ai: AISettings = field(default_factory=AISettings)
    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    audience_boosts: AudienceBoostSettings = field(default_factory=AudienceBoostSettings)
    importing: ImportSettings = field(default_factory=ImportSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    performance: PerformanceSettings = field(default_factory=PerformanceSettings)

    @property
    def ai_enabled(self) -> bool:
        """The AI backend is used only when a non-empty credential is configured."""
        return bool(self.ai.api_key and self.ai.api_key.strip())


def load_settings(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True,
) -> SNASSettings:
    """
    Build SNASSettings from defaults, YAML file, environment and explicit overrides.

    Args:
        config_path: Optional YAML settings file (defaults to SNAS_CONFIG_PATH env variable)
        overrides: Nested dict merged last (e.g., {"ai": {"api_key": "..."}})
        use_env: Apply ENV_OVERRIDES (disable for fully deterministic settings in tests)

    Returns:
        SNASSettings instance

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config = OmegaConf.structured(SNASSettings)

    if config_path is None and use_env and os.getenv("SNAS_CONFIG_PATH"):
        config_path = Path(os.getenv("SNAS_CONFIG_PATH"))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    if use_env:
        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value is not None:
                OmegaConf.update(config, key, value)

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.create(overrides))

    return OmegaConf.to_object(config)
