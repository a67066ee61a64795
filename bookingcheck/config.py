"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator


class BookingDefaults(BaseModel):
    """Booking rule settings."""
    # Tenants that never configured business hours are closed unless this is set.
    open_when_unconfigured: bool = False
    min_window_minutes: int = 30

    @field_validator("min_window_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure the minimum window length is positive."""
        if value <= 0:
            raise ValueError("min_window_minutes must be greater than zero")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    tenant_id: str
    data_file: Path = Path("data.json")
    timezone: str = "America/Sao_Paulo"
    booking: BookingDefaults = Field(default_factory=BookingDefaults)

    @field_validator("tenant_id")
    @classmethod
    def validate_tenant_id(cls, value: str) -> str:
        """Ensure a tenant is selected."""
        if not value.strip():
            raise ValueError("tenant_id must not be empty")
        return value.strip()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def today(self) -> str:
        """Today's date in the tenant's timezone (YYYY-MM-DD)."""
        return pendulum.today(self.timezone).to_date_string()

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``data_file`` paths are resolved against the config file's
        directory.

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

        config = cls(**data)
        if not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of bookingcheck/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
