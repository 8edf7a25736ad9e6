"""Configuration management for Cart Recon."""

from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

# Load .env file at import time
load_dotenv()


class LaunchConfig(BaseModel):
    """Browser launch options."""

    headless: bool = True
    args: list[str] = Field(default_factory=list)
    slow_mo: int = 0


class StorefrontConfig(BaseModel):
    """Remote storefront configuration."""

    base_url: str = "https://advantageonlineshopping.com/"
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    default_timeout: int = 30_000  # ms
    navigation_retries: int = 3
    title_pattern: str = "Advantage Shopping"
    launch: LaunchConfig = Field(default_factory=LaunchConfig)


class DataConfig(BaseModel):
    """Purchase intent input."""

    items_file: Path = Path("shopping_items.csv")
    encoding: str = "utf-8"


class CartConfig(BaseModel):
    """Cart pricing rules."""

    price_places: int = Field(default=2, ge=0)


class ReportingConfig(BaseModel):
    """Where run events are sent."""

    log_dir: Path = Path("Logs")
    console: bool = True
    file: bool = True


class Config(BaseSettings):
    """Main configuration for Cart Recon."""

    model_config = SettingsConfigDict(
        env_prefix="CART_RECON_",
        env_nested_delimiter="__",
    )

    storefront: StorefrontConfig = Field(default_factory=StorefrontConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    cart: CartConfig = Field(default_factory=CartConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment first so it overrides values passed in from YAML
        return env_settings, init_settings, dotenv_settings, file_secret_settings


CONFIG_FILE_NAMES = ["cart_recon.yaml", "cart_recon.yml", ".cart_recon.yaml"]


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file and environment variables."""
    config_data: dict = {}

    if config_path is not None and not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    # Try to find config file
    if config_path is None:
        for name in CONFIG_FILE_NAMES:
            if Path(name).exists():
                config_path = Path(name)
                break

    # Load from YAML if exists
    if config_path:
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if raw and not isinstance(raw, dict):
            raise ConfigurationError(f"Expected a mapping in {config_path}")
        if raw and "cart_recon" in raw:
            config_data = raw["cart_recon"] or {}
        elif raw:
            config_data = raw

    # Environment variables override YAML
    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
