"""
Engine Configuration
====================

Externally supplied constants for the intent engine.

Every threshold, TTL and artifact path the engine depends on lives in
``EngineConfig``. Values come from YAML (``config/engine.yaml`` by default)
and fall back to the built-in defaults below.

Usage:
    from axi_engine.config import EngineConfig, load_config

    config = load_config()                      # search default locations
    config = EngineConfig.from_yaml("my.yaml")  # explicit file
    config = EngineConfig(execute_threshold=0.9)
"""

import os
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_DESTRUCTIVE_INTENTS = [
    "delete_file",
    "delete_folder",
    "shutdown_system",
    "restart_system",
    "git_push",
    "git_commit",
]

# Website mappings for "open amazon" style commands
DEFAULT_SITE_MAP = {
    "google": "https://google.com",
    "youtube": "https://youtube.com",
    "facebook": "https://facebook.com",
    "instagram": "https://instagram.com",
    "twitter": "https://twitter.com",
    "linkedin": "https://linkedin.com",
    "amazon": "https://amazon.in",
    "flipkart": "https://flipkart.com",
    "netflix": "https://netflix.com",
    "github": "https://github.com",
    "stackoverflow": "https://stackoverflow.com",
}

CONFIG_ENV_VAR = "AXI_CONFIG"


@dataclass
class EngineConfig:
    """
    Configuration for the intent engine.

    Thresholds must satisfy
    ``0 <= clarify <= confirm <= execute <= destructive <= 1``.
    """

    # === Decision thresholds ===
    execute_threshold: float = 0.80
    """Confidence at or above which an ordinary intent executes."""

    confirm_threshold: float = 0.55
    """Confidence at or above which the user is asked to confirm."""

    clarify_threshold: float = 0.35
    """Confidence at or above which a clarification is offered."""

    destructive_threshold: float = 0.95
    """Execute floor for intents listed in ``destructive_intents``."""

    destructive_intents: List[str] = field(
        default_factory=lambda: list(DEFAULT_DESTRUCTIVE_INTENTS)
    )

    # === Layer settings ===
    semantic_threshold: float = 0.75
    """Minimum cosine similarity for a semantic match."""

    semantic_close_margin: float = 0.10
    """Semantic wins over the classifier when within this margin."""

    followup_confidence: float = 0.85
    """Confidence attached to follow-up detections."""

    # === Context / session lifetimes (seconds) ===
    max_history: int = 5
    context_ttl_seconds: float = 300.0
    confirmation_timeout_seconds: float = 30.0
    session_idle_ttl_seconds: float = 300.0
    cleanup_interval_seconds: float = 60.0

    # === Offline artifacts ===
    vectors_path: Optional[str] = None
    """TF-IDF intent vectors (JSON). Missing file disables the semantic layer."""

    classifier_path: Optional[str] = None
    """Serialized feed-forward scorer (JSON). Missing file disables it."""

    classifier_backend: str = "feedforward"
    """Either ``feedforward`` or ``keyword``."""

    intents_dir: Optional[str] = None
    """Directory of ``*.yaml`` intent example files."""

    build_vectors_if_missing: bool = True
    """Build vectors in memory from ``intents_dir`` when no artifact exists."""

    # === Skills ===
    site_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SITE_MAP))
    skills: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    """Per-plugin settings, keyed by plugin name."""

    plugin_modules: List[str] = field(default_factory=list)
    """Extra plugin modules to import, in addition to the built-ins."""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check threshold ordering and lifetimes."""
        ordered = [
            0.0,
            self.clarify_threshold,
            self.confirm_threshold,
            self.execute_threshold,
            self.destructive_threshold,
            1.0,
        ]
        if any(a > b for a, b in zip(ordered, ordered[1:])):
            raise ValueError(
                "Thresholds must satisfy 0 <= clarify <= confirm <= execute "
                f"<= destructive <= 1, got {ordered[1:-1]}"
            )
        if not 0.0 <= self.semantic_threshold <= 1.0:
            raise ValueError(f"semantic_threshold out of range: {self.semantic_threshold}")
        if self.max_history < 1:
            raise ValueError("max_history must be at least 1")
        for name in (
            "context_ttl_seconds",
            "confirmation_timeout_seconds",
            "session_idle_ttl_seconds",
            "cleanup_interval_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.classifier_backend not in ("feedforward", "keyword"):
            raise ValueError(f"Unknown classifier backend: {self.classifier_backend}")

    def is_destructive(self, intent: str) -> bool:
        return intent in self.destructive_intents

    def skill_settings(self, plugin_name: str) -> Dict[str, Any]:
        """Get settings for a plugin (empty dict if none)."""
        return self.skills.get(plugin_name, {})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "EngineConfig":
        """
        Build a config from a plain mapping.

        Unknown keys are ignored with a warning. Relative artifact paths are
        resolved against ``base_dir`` when given.
        """
        known = set(cls.__dataclass_fields__)
        config_data = {}
        for key, value in data.items():
            if key in known:
                config_data[key] = value
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        if base_dir is not None:
            for key in ("vectors_path", "classifier_path", "intents_dir"):
                value = config_data.get(key)
                if value and not Path(value).is_absolute():
                    config_data[key] = str(base_dir / value)

        return cls(**config_data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineConfig":
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the document is not a mapping or values are invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config format: expected dict, got {type(data)}")

        # Paths inside config/engine.yaml are relative to the project root
        base_dir = path.resolve().parent
        if base_dir.name == "config":
            base_dir = base_dir.parent

        logger.debug(f"Loaded engine config from {path}")
        return cls.from_dict(data, base_dir=base_dir)


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve()
    indicators = ["pyproject.toml", "config"]

    for parent in current.parents:
        if any((parent / indicator).exists() for indicator in indicators):
            return parent

    return Path.cwd()


def load_config(path: Optional[str | Path] = None) -> EngineConfig:
    """
    Load engine configuration.

    Resolution order: explicit ``path``, ``$AXI_CONFIG``,
    ``config/engine.yaml`` in the current directory, then in the project
    root. Falls back to defaults when nothing is found.
    """
    if path is not None:
        return EngineConfig.from_yaml(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return EngineConfig.from_yaml(env_path)

    possible_paths = [
        Path.cwd() / "config" / "engine.yaml",
        _find_project_root() / "config" / "engine.yaml",
    ]
    for config_path in possible_paths:
        if config_path.exists():
            return EngineConfig.from_yaml(config_path)

    logger.debug("No engine config found, using defaults")
    return EngineConfig()
