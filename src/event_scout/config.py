"""Configuration management for Event Scout.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PIPELINE_MODES = ("scout_explorer", "raw_tools")


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the EVENT_SCOUT_ prefix (e.g., EVENT_SCOUT_GEMINI_MODEL). The API key
    is also read from a plain GOOGLE_API_KEY variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="EVENT_SCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini Configuration
    google_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "google_api_key",
            "EVENT_SCOUT_GOOGLE_API_KEY",
            "GOOGLE_API_KEY",
        ),
        description="API key for the Gemini generation API",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model used for every generation call",
    )
    gemini_timeout_seconds: Optional[int] = Field(
        default=None,
        description="Optional per-call timeout for Gemini requests in seconds",
    )

    # Scout (link discovery)
    scout_links_per_search: int = Field(
        default=20,
        description="Maximum number of links kept from one interest/day search",
    )
    scout_delay_seconds: float = Field(
        default=0.5,
        description="Pause between consecutive Scout searches",
    )
    scout_temperature: float = Field(default=0.2)
    scout_max_output_tokens: int = Field(default=4096)

    # Explorer (link verification)
    explorer_batch_size: int = Field(
        default=5,
        description="Number of links described to the model per Explorer call",
    )
    explorer_delay_seconds: float = Field(
        default=1.0,
        description="Pause between consecutive Explorer batches",
    )
    explorer_temperature: float = Field(default=0.1)
    explorer_max_output_tokens: int = Field(default=8192)

    # Editor
    editor_temperature: float = Field(default=0.3)
    editor_max_output_tokens: int = Field(default=2048)
    editor_use_search: bool = Field(
        default=False,
        description="Attach the web search tool to edit requests",
    )

    # Pipeline
    default_days: int = Field(
        default=3,
        description="Length of the default date window when no end date is given",
    )
    pipeline_mode: str = Field(
        default="scout_explorer",
        description="Discovery pipeline: scout_explorer or raw_tools",
    )

    # Raw search/scrape tools (MCP)
    mcp_url: Optional[str] = Field(
        default=None,
        description="SSE endpoint of the MCP server exposing search/scrape tools",
    )
    brightdata_api_key: Optional[str] = Field(
        default=None,
        description="Bright Data token used to build the default MCP URL",
    )
    raw_search_tool: str = Field(default="search_engine")
    raw_scrape_tool: str = Field(default="scrape_as_markdown")
    raw_tool_timeout_seconds: float = Field(
        default=600.0,
        description="Timeout for one search or scrape tool call",
    )
    raw_max_pages_per_interest: int = Field(default=5)
    raw_page_char_limit: int = Field(default=8000)

    # Request logs
    log_dir: Path = Field(
        default=Path("logs"),
        description="Directory receiving per-request prompt/response logs",
    )
    request_logging: bool = Field(
        default=True,
        description="Write per-request log artifacts under log_dir",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=5500)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("pipeline_mode")
    @classmethod
    def _check_pipeline_mode(cls, v: str) -> str:
        mode = v.strip().lower()
        if mode not in PIPELINE_MODES:
            raise ValueError(f"pipeline_mode must be one of {PIPELINE_MODES}, got {v!r}")
        return mode

    @field_validator("explorer_batch_size", "scout_links_per_search")
    @classmethod
    def _check_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def mcp_sse_url(self) -> Optional[str]:
        """SSE URL of the tool server, if one is configured."""
        if self.mcp_url:
            return self.mcp_url
        if self.brightdata_api_key:
            return f"https://mcp.brightdata.com/sse?token={self.brightdata_api_key}&pro=1"
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
