"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_BLOCKING_STATUSES = ["confirmed", "in_progress", "pending_approval"]


class BookingSettings(BaseModel):
    """Rules applied when offering slots to customers."""
    slot_stride_minutes: int = 30
    blocking_statuses: List[str] = Field(default_factory=lambda: list(DEFAULT_BLOCKING_STATUSES))
    window_days: int = 30
    max_participants: int = 10

    @field_validator("slot_stride_minutes", "window_days", "max_participants")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure counts and intervals are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @field_validator("blocking_statuses")
    @classmethod
    def normalize_statuses(cls, value: List[str]) -> List[str]:
        """Lower-case statuses and drop duplicates, preserving order."""
        seen: set[str] = set()
        normalized: List[str] = []
        for status in value:
            key = status.strip().lower()
            if key and key not in seen:
                normalized.append(key)
                seen.add(key)
        return normalized


class AppConfig(BaseModel):
    """Application configuration."""
    api_base_url: str = "http://localhost:5000"
    api_token: str = ""
    timezone: str = "Australia/Brisbane"
    request_timeout_seconds: float = 10.0
    booking: BookingSettings = Field(default_factory=BookingSettings)

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be greater than zero")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
