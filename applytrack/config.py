"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_SESSION_SECRET = "dev-secret-change-me-in-production"


@dataclass(frozen=True)
class ScoringWeights:
    """Points awarded by each match component. Should sum to 100."""

    skills: float = 50
    role: float = 20
    location: float = 15
    remote: float = 15

    @property
    def total(self) -> float:
        return self.skills + self.role + self.location + self.remote


@dataclass
class MatchingConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    default_min_match_score: int = 50
    recommendation_pool_size: int = 200
    default_recommendation_limit: int = 10


@dataclass
class RateLimitConfig:
    max_requests: int = 30
    window_seconds: float = 60.0


@dataclass
class ServerConfig:
    database_url: str = "sqlite:///data/applytrack.db"
    session_secret: str = DEFAULT_SESSION_SECRET
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_dir: str = "logs"
    log_level: str = "INFO"


def normalize_database_url(url: str) -> str:
    # Heroku/Railway hand out postgres:// but SQLAlchemy 2.x requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def _load_weights(raw: dict) -> ScoringWeights:
    defaults = ScoringWeights()
    return ScoringWeights(
        skills=float(raw.get("skills", defaults.skills)),
        role=float(raw.get("role", defaults.role)),
        location=float(raw.get("location", defaults.location)),
        remote=float(raw.get("remote", defaults.remote)),
    )


def config_from_dict(raw: dict) -> AppConfig:
    """Build an AppConfig from a parsed YAML mapping, applying env overrides."""
    config = AppConfig()

    # Matching
    matching_raw = raw.get("matching", {}) or {}
    config.matching = MatchingConfig(
        weights=_load_weights(matching_raw.get("weights", {}) or {}),
        default_min_match_score=int(matching_raw.get("default_min_match_score", 50)),
        recommendation_pool_size=int(matching_raw.get("recommendation_pool_size", 200)),
        default_recommendation_limit=int(matching_raw.get("default_recommendation_limit", 10)),
    )

    # Rate limiting
    limit_raw = raw.get("rate_limit", {}) or {}
    config.rate_limit = RateLimitConfig(
        max_requests=int(limit_raw.get("max_requests", 30)),
        window_seconds=float(limit_raw.get("window_seconds", 60.0)),
    )

    # Server (env vars take precedence)
    server_raw = raw.get("server", {}) or {}
    config.server = ServerConfig(
        database_url=normalize_database_url(
            os.environ.get("DATABASE_URL", server_raw.get("database_url", "sqlite:///data/applytrack.db"))
        ),
        session_secret=os.environ.get("SESSION_SECRET", server_raw.get("session_secret", DEFAULT_SESSION_SECRET)),
        host=server_raw.get("host", "127.0.0.1"),
        port=int(server_raw.get("port", 8000)),
    )

    config.log_dir = raw.get("log_dir", "logs")
    config.log_level = str(raw.get("log_level", "INFO")).upper()

    return config


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml and adjust your settings."
        )

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return config_from_dict(raw)


def load_default_config(config_path: Optional[str] = None) -> AppConfig:
    """Load from an explicit path, $APPLYTRACK_CONFIG, or fall back to defaults."""
    path = config_path or os.environ.get("APPLYTRACK_CONFIG")
    if path:
        return load_config(path)
    return config_from_dict({})


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []
    weights = config.matching.weights

    for name in ("skills", "role", "location", "remote"):
        if getattr(weights, name) < 0:
            warnings.append(f"Scoring weight '{name}' is negative - it will be treated as 0")

    if abs(weights.total - 100) > 1e-9:
        warnings.append(
            f"Scoring weights sum to {weights.total:g}, not 100 - scores are clamped to 0-100"
        )

    if not 0 <= config.matching.default_min_match_score <= 100:
        warnings.append("default_min_match_score should be between 0 and 100")

    if config.matching.recommendation_pool_size < 1:
        warnings.append("recommendation_pool_size must be at least 1")

    if config.rate_limit.max_requests < 1:
        warnings.append("rate_limit.max_requests must be at least 1 - every limited request will be rejected")

    if config.server.session_secret == DEFAULT_SESSION_SECRET:
        warnings.append("Using the default session secret - set SESSION_SECRET in production")

    return warnings
