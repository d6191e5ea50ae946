"""Configuration management for subfetch."""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from subfetch.core.plugins import Plugin
from subfetch.utils.language import UNDETERMINED, normalize_tag


class AcquisitionConfig(BaseModel):
    """Run-mode options consumed by the acquisition orchestrator."""

    dry: bool = Field(default=False, description="Suppress network and filesystem side effects")
    impaired: bool = Field(default=False, description="Include hearing-impaired subtitles")
    strict: bool = Field(default=False, description="Abort the run on the first failure")
    delay: float = Field(default=0.0, ge=0, description="Seconds to wait between languages")
    score: int = Field(default=0, ge=0, le=100, description="Minimum match score (percent)")

    @property
    def threshold(self) -> float:
        """Minimum acceptable score as a fraction in [0, 1]."""
        return self.score / 100.0


class ScanConfig(BaseModel):
    """Media discovery configuration."""

    extensions: List[str] = Field(
        default=[".mkv", ".mp4", ".avi", ".m4v"], description="Video file extensions"
    )
    recursive: bool = Field(default=True, description="Scan subdirectories")
    modified_within_hours: Optional[float] = Field(
        default=None, gt=0, description="Only consider files modified recently"
    )


class TMDBConfig(BaseModel):
    """TMDB API configuration."""

    enabled: bool = Field(default=False, description="Enable TMDB metadata scraping")
    api_key: Optional[str] = Field(
        default=None, validate_default=True, description="TMDB API key"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str], info) -> Optional[str]:
        """Validate API key is provided when TMDB is enabled."""
        enabled = info.data.get("enabled", False)
        if enabled and not v:
            raise ValueError("TMDB API key required when TMDB is enabled")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    languages: List[str] = Field(default=["en"], description="Wanted subtitle languages")
    acquisition: AcquisitionConfig = Field(
        default_factory=AcquisitionConfig, description="Run-mode options"
    )
    plugins: List[Plugin] = Field(
        default_factory=list, description="Post-processing plugins, run in order"
    )
    plugin_timeout: float = Field(default=60.0, gt=0, description="Plugin timeout in seconds")
    provider: Optional[str] = Field(
        default=None, description="Subtitle provider import path (module:Class)"
    )
    provider_options: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments for the provider"
    )
    scan: ScanConfig = Field(default_factory=ScanConfig, description="Discovery options")
    tmdb: TMDBConfig = Field(default_factory=TMDBConfig, description="TMDB configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: List[str]) -> List[str]:
        """Normalize language tags and reject unrecognizable ones."""
        tags = []
        for code in v:
            tag = normalize_tag(code)
            if tag == UNDETERMINED:
                raise ValueError(f"Invalid language tag: {code!r}")
            if tag not in tags:
                tags.append(tag)
        return tags

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively replace ${VAR_NAME} with os.environ['VAR_NAME'].

        Args:
            obj: Configuration object (dict, list, str, etc.)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config()

    return Config.from_yaml(path)
