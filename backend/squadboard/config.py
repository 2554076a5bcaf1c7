"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class PolymarketSection(BaseModel):
    """Polymarket data API parameters."""

    base_url: str = "https://data-api.polymarket.com"
    closed_positions_limit: int = 50
    closed_positions_sort_by: str = "REALIZEDPNL"
    timeout_seconds: float = 30.0
    max_connections: int = 100
    max_keepalive_connections: int = 20


class LeaderboardSection(BaseModel):
    """Leaderboard caching and presentation."""

    cache_ttl_seconds: float = 30.0
    cache_max_entries: int = 1024
    anonymous_name: str = "Anonymous"
    avatar_url_template: str = "https://api.dicebear.com/9.x/pixel-art/svg?seed={address}"


class SquadsSection(BaseModel):
    """Squad membership limits."""

    max_members: int = 10


class Settings(BaseSettings):
    """Main configuration class."""

    # Application
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Comma-separated list of allowed CORS origins",
    )

    # Paths
    data_dir: Path = Path("data")

    # Database
    database_url: str = "sqlite+aiosqlite:///./squadboard.db"

    # API Keys
    polymarket_api_key: str = ""
    logfire_token: str = ""

    # Nested configuration sections
    polymarket: PolymarketSection = Field(default_factory=PolymarketSection)
    leaderboard: LeaderboardSection = Field(default_factory=LeaderboardSection)
    squads: SquadsSection = Field(default_factory=SquadsSection)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration."""
        config_path = self.data_dir / "config.yaml"

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["polymarket", "leaderboard", "squads"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    section_dict = section.model_dump()
                    section_dict.update(yaml_config[section_name] or {})
                    setattr(self, section_name, section.__class__(**section_dict))

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
