"""
DreamLog Configuration System
=============================
Centralized, validated configuration with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

import yaml

from dreamlog.core.exceptions import ConfigurationError


SUPPORTED_PROVIDERS = ("google_gemini", "openai", "anthropic", "ollama", "mock")


@dataclass(frozen=True)
class EnrichmentConfig:
    """Provider settings shared by dream enrichment and pattern analysis."""
    provider: str = "google_gemini"
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None  # Falls back to the provider's env var
    base_url: Optional[str] = None
    max_tokens: int = 2048
    temperature: float = 0.7
    max_tags: int = 5
    max_people: int = 20


@dataclass(frozen=True)
class ImporterConfig:
    extensions: tuple = (".html", ".htm")
    encoding: str = "utf-8"


@dataclass(frozen=True)
class UnlockConfig:
    """Activity thresholds for the rolling analysis windows."""
    week_min_days: int = 4
    month_min_days: int = 15
    year_min_months: int = 6


@dataclass(frozen=True)
class PathsConfig:
    data_dir: str = "./data"
    dreams_file: str = "./data/dreams.json"
    hidden_tags_file: str = "./data/hidden_tags.json"


@dataclass(frozen=True)
class ObservabilityConfig:
    log_level: str = "INFO"


@dataclass(frozen=True)
class DreamLogConfig:
    """Root configuration for DreamLog."""

    version: str = "1.0"
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    importer: ImporterConfig = field(default_factory=ImporterConfig)
    unlock: UnlockConfig = field(default_factory=UnlockConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


def _env_override(key: str, default):
    """Check for DREAMLOG_<KEY> environment variable override."""
    env_key = f"DREAMLOG_{key.upper()}"
    val = os.environ.get(env_key)
    if val is None:
        return default
    # Type coercion based on the default's type
    if isinstance(default, bool):
        return val.lower() in ("true", "1", "yes")
    try:
        if isinstance(default, int):
            return int(val)
        if isinstance(default, float):
            return float(val)
    except ValueError:
        raise ConfigurationError(
            config_key=env_key,
            reason=f"Expected a {type(default).__name__}, got {val!r}",
        )
    return val


def _parse_extensions(value) -> tuple:
    """Accept a list or comma-separated string; normalize to lower-case '.ext'."""
    if isinstance(value, str):
        value = value.split(",")
    exts = []
    for ext in value or ():
        ext = str(ext).strip().lower()
        if not ext:
            continue
        exts.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(exts)


def _require_positive(key: str, value: int) -> int:
    if not isinstance(value, int) or value <= 0:
        raise ConfigurationError(
            config_key=key,
            reason=f"Must be a positive integer, got {value!r}",
        )
    return value


def load_config(path: Optional[Path] = None) -> DreamLogConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Priority: ENV > YAML > defaults.

    Args:
        path: Path to config.yaml. If None, searches ./config.yaml.

    Returns:
        Validated DreamLogConfig instance.

    Raises:
        ConfigurationError: If a provider is unknown or a threshold is not positive.
    """
    if path is None:
        candidate = Path("config.yaml")
        if candidate.exists():
            path = candidate

    raw = {}
    if path is not None and path.exists():
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
            raw = loaded.get("dreamlog") or {}

    # Build enrichment config
    enr_raw = raw.get("enrichment") or {}
    provider = _env_override("ENRICHMENT_PROVIDER", enr_raw.get("provider", "google_gemini"))
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            config_key="enrichment.provider",
            reason=f"Unknown provider '{provider}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}",
        )
    enrichment = EnrichmentConfig(
        provider=provider,
        model=_env_override("ENRICHMENT_MODEL", enr_raw.get("model", "gemini-2.5-flash")),
        api_key=_env_override("ENRICHMENT_API_KEY", enr_raw.get("api_key")),
        base_url=_env_override("ENRICHMENT_BASE_URL", enr_raw.get("base_url")),
        max_tokens=_env_override("ENRICHMENT_MAX_TOKENS", enr_raw.get("max_tokens", 2048)),
        temperature=_env_override("ENRICHMENT_TEMPERATURE", enr_raw.get("temperature", 0.7)),
        max_tags=_require_positive(
            "enrichment.max_tags",
            _env_override("ENRICHMENT_MAX_TAGS", enr_raw.get("max_tags", 5)),
        ),
        max_people=_require_positive(
            "enrichment.max_people",
            _env_override("ENRICHMENT_MAX_PEOPLE", enr_raw.get("max_people", 20)),
        ),
    )

    # Build importer config
    imp_raw = raw.get("importer") or {}
    extensions = _parse_extensions(
        _env_override("IMPORTER_EXTENSIONS", imp_raw.get("extensions", [".html", ".htm"]))
    )
    if not extensions:
        raise ConfigurationError(
            config_key="importer.extensions",
            reason="At least one document extension is required",
        )
    importer = ImporterConfig(
        extensions=extensions,
        encoding=_env_override("IMPORTER_ENCODING", imp_raw.get("encoding", "utf-8")),
    )

    # Build unlock config
    unl_raw = raw.get("unlock") or {}
    unlock = UnlockConfig(
        week_min_days=_require_positive(
            "unlock.week_min_days",
            _env_override("UNLOCK_WEEK_MIN_DAYS", unl_raw.get("week_min_days", 4)),
        ),
        month_min_days=_require_positive(
            "unlock.month_min_days",
            _env_override("UNLOCK_MONTH_MIN_DAYS", unl_raw.get("month_min_days", 15)),
        ),
        year_min_months=_require_positive(
            "unlock.year_min_months",
            _env_override("UNLOCK_YEAR_MIN_MONTHS", unl_raw.get("year_min_months", 6)),
        ),
    )

    # Build paths config
    paths_raw = raw.get("paths") or {}
    data_dir = _env_override("DATA_DIR", paths_raw.get("data_dir", "./data"))
    paths = PathsConfig(
        data_dir=data_dir,
        dreams_file=_env_override(
            "DREAMS_FILE", paths_raw.get("dreams_file", str(Path(data_dir) / "dreams.json"))
        ),
        hidden_tags_file=_env_override(
            "HIDDEN_TAGS_FILE", paths_raw.get("hidden_tags_file", str(Path(data_dir) / "hidden_tags.json"))
        ),
    )

    # Build observability config
    obs_raw = raw.get("observability") or {}
    observability = ObservabilityConfig(
        log_level=_env_override("LOG_LEVEL", obs_raw.get("log_level", "INFO")),
    )

    return DreamLogConfig(
        version=raw.get("version", "1.0"),
        enrichment=enrichment,
        importer=importer,
        unlock=unlock,
        paths=paths,
        observability=observability,
    )


# Module-level singleton (lazy-loaded)
_CONFIG: Optional[DreamLogConfig] = None


def get_config() -> DreamLogConfig:
    """Get or initialize the global config singleton."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config():
    """Reset the global config singleton (useful for testing)."""
    global _CONFIG
    _CONFIG = None
