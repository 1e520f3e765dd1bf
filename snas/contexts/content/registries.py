"""
Content Registries

Centralized registries for loading and caching fallback content templates and
category profiles.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from omegaconf import OmegaConf

CONTENT_DIR = Path(__file__).parent
TEMPLATES_PATH = CONTENT_DIR / "templates"
PROFILES_PATH = CONTENT_DIR / "category_profiles.yaml"


class ContentTemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for fallback content.

    Templates are stored in snas/contexts/content/templates/{content_type}/{style}.txt.jinja
    """

    def __init__(self, templates_base_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_base_path: Base path for content type directories. Defaults to
                                 the templates/ directory shipped with this package
        """
        if templates_base_path is None:
            templates_base_path = TEMPLATES_PATH

        self.templates_base_path = templates_base_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(templates_base_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    @staticmethod
    def _template_name(content_type: str, style: str) -> str:
        return f"{content_type}/{style}.txt.jinja"

    def get_template(self, content_type: str, style: str) -> Template:
        """
        Get a template, loading and caching it if necessary.

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        template_name = self._template_name(content_type, style)
        if template_name in self._cache:
            return self._cache[template_name]

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for {content_type}/{style} at {self.templates_base_path / template_name}"
            ) from e

        self._cache[template_name] = template
        return template

    def render(self, content_type: str, style: str, **variables) -> str:
        return self.get_template(content_type, style).render(**variables).strip()

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, content_type: str, style: str) -> bool:
        return self._template_name(content_type, style) in self._cache


@dataclass
class CategoryProfile:
    name: str
    opening: str
    middle: str
    hashtags: str


@dataclass
class StyleSpec:
    style: str
    confidence: float


class CategoryProfileRegistry:
    """
    Registry for category profiles and per-content-type styles.

    Loaded once from category_profiles.yaml. Unknown categories resolve to the
    configured default category.
    """

    def __init__(self, profiles_path: Path = None):
        if profiles_path is None:
            profiles_path = PROFILES_PATH

        if not profiles_path.exists():
            raise FileNotFoundError(f"Category profiles not found: {profiles_path}")

        self.profiles_path = profiles_path
        config: Dict[str, Any] = OmegaConf.to_container(OmegaConf.load(profiles_path), resolve=True)

        self.default_category: str = config["default_category"]
        self.csa_hashtags: str = config.get("csa_hashtags", "")
        self._profiles = {
            name: CategoryProfile(name=name, **fields) for name, fields in config["categories"].items()
        }
        self._styles = {
            content_type: [StyleSpec(**spec) for spec in specs]
            for content_type, specs in config["styles"].items()
        }

        if self.default_category not in self._profiles:
            raise ValueError(f"Default category '{self.default_category}' has no profile in {profiles_path}")

    @property
    def categories(self) -> List[str]:
        return list(self._profiles)

    def get_profile(self, category: str) -> CategoryProfile:
        """Exact category match, else the default category's profile."""
        return self._profiles.get(category) or self._profiles[self.default_category]

    def get_styles(self, content_type: str) -> List[StyleSpec]:
        """
        Raises:
            KeyError: If no styles are configured for content_type
        """
        if content_type not in self._styles:
            raise KeyError(f"No styles configured for content type '{content_type}'")
        return list(self._styles[content_type])

    def hashtags_for(self, name: str, category: str) -> str:
        """Category hashtags, plus the CSA hashtags when the name mentions CSA."""
        hashtags = self.get_profile(category).hashtags
        if self.csa_hashtags and "csa" in (name or "").lower():
            hashtags = f"{hashtags} {self.csa_hashtags}"
        return hashtags
