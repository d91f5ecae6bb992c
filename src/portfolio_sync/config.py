# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to Notion credentials, output paths and logging config

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_SYNC_",
        env_file=(".env", ".env.local"),  # .env.local wins
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
        populate_by_name=True,
    )

    # Notion credentials and collections
    notion_token: str = Field(
        default="",
        validation_alias=AliasChoices("PORTFOLIO_SYNC_NOTION_TOKEN", "NOTION_TOKEN"),
        description="Notion integration token",
    )
    organizations_db_id: str = Field(
        default="",
        validation_alias=AliasChoices("PORTFOLIO_SYNC_ORGANIZATIONS_DB_ID", "NOTION_DB_ORGANIZATIONS_ID"),
        description="Notion database id for organizations",
    )
    involvements_db_id: str = Field(
        default="",
        validation_alias=AliasChoices("PORTFOLIO_SYNC_INVOLVEMENTS_DB_ID", "NOTION_DB_INVOLVEMENTS_ID"),
        description="Notion database id for involvements",
    )
    projects_db_id: str = Field(
        default="",
        validation_alias=AliasChoices("PORTFOLIO_SYNC_PROJECTS_DB_ID", "NOTION_DB_PROJECTS_ID"),
        description="Notion database id for projects",
    )
    skills_db_id: str = Field(
        default="",
        validation_alias=AliasChoices("PORTFOLIO_SYNC_SKILLS_DB_ID", "NOTION_DB_SKILLS_ID"),
        description="Notion database id for skills",
    )

    # Notion API
    notion_base_url: str = Field(default="https://api.notion.com/v1", description="Notion REST API base URL")
    notion_version: str = Field(default="2022-06-28", description="Notion-Version header value")
    max_concurrent_requests: int = Field(
        default=3, ge=1, description="Maximum in-flight Notion requests across the whole run"
    )
    page_size: int = Field(default=100, ge=1, le=100, description="Page size for paginated Notion requests")
    request_timeout: float | None = Field(
        default=None, description="Transport timeout in seconds (None waits indefinitely)"
    )
    rate_limit_retries: int = Field(default=3, ge=1, description="Attempts made when Notion answers 429")
    publish_property: str = Field(default="Published", description="Checkbox property that marks a page public")

    # Output
    cache_dir: Path = Field(default=Path("src/content/cache"), description="Directory for the JSON documents")
    assets_dir: Path = Field(default=Path("public/notion-assets"), description="Directory for downloaded media")
    assets_url_prefix: str = Field(default="/notion-assets", description="Public URL prefix for cached assets")
    schema_version: str = Field(default="1.0.0", description="Schema version written to meta.json")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")

    @property
    def has_notion_config(self) -> bool:
        """True when enough configuration exists to talk to Notion."""
        return bool(self.notion_token and self.organizations_db_id)

    @property
    def database_ids(self) -> dict[str, str]:
        """Database ids keyed by output collection name."""
        return {
            "organizations": self.organizations_db_id,
            "involvements": self.involvements_db_id,
            "projects": self.projects_db_id,
            "skills": self.skills_db_id,
        }


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
