"""Configuration management for ghfolio."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghfolio import __version__


class FeaturedConfig(BaseModel):
    """Featured repository list loaded from featured.yaml."""

    repos: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Application settings from environment variables and config files."""

    model_config = SettingsConfigDict(
        env_prefix="GHFOLIO_",
        env_file=".env",
        extra="ignore",
    )

    github_username: str = "octocat"
    github_token: str = ""
    user_agent: str = f"ghfolio/{__version__}"
    cache_dir: Path = Path(".cache/ghfolio")
    config_dir: Path = Path("config")
    request_timeout: float = 30.0
    retry_base_delay: float = 1.0

    def load_featured(self) -> list[str]:
        """Load featured repository names from featured.yaml.

        Returns:
            Repository names in the order listed, or an empty list.
        """
        featured_file = self.config_dir / "featured.yaml"
        if not featured_file.exists():
            return []

        with open(featured_file) as f:
            data = yaml.safe_load(f) or {}

        return FeaturedConfig(**data).repos


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings loaded from environment and config files.
    """
    return Settings()
