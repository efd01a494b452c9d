"""Configuration management for the TestPilot framework."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = Field(
        default="gpt-4o-mini", description="Model used for scenario generation"
    )
    openai_temperature: float = Field(
        default=0.3, ge=0.0, le=2.0, description="Generation temperature"
    )
    openai_max_retries: int = Field(
        default=3, ge=1, description="Maximum API retry attempts"
    )
    openai_request_timeout_seconds: int = Field(
        default=300,
        ge=10,
        description="Request timeout for OpenAI API calls in seconds",
    )

    # Browser Configuration
    browser_headless: bool = Field(
        default=True, description="Run browser in headless mode"
    )
    browser_user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User agent for browser contexts"
    )
    browser_timeout: int = Field(
        default=30000, ge=1000, description="Default browser timeout (ms)"
    )
    browser_viewport_width: int = Field(
        default=1280, ge=320, description="Browser viewport width"
    )
    browser_viewport_height: int = Field(
        default=720, ge=240, description="Browser viewport height"
    )

    # Execution Configuration
    initial_navigation_timeout_ms: int = Field(
        default=30000, ge=1000, description="Timeout for loading the run's start URL"
    )
    navigation_timeout_ms: int = Field(
        default=15000, ge=1000, description="Timeout for navigate/reload/history steps"
    )
    action_timeout_ms: int = Field(
        default=10000, ge=500, description="Timeout for element interactions"
    )
    short_action_timeout_ms: int = Field(
        default=5000, ge=500, description="Timeout for hover, focus and inspections"
    )
    type_delay_ms: int = Field(
        default=50, ge=0, description="Delay between keystrokes for 'type' steps"
    )
    fallback_input_text: str = Field(
        default="TestPilot input",
        description="Text entered by type/fill steps whose description has no quoted value",
    )
    placeholder_image_url: str = Field(
        default="https://placehold.co",
        description="Placeholder image service used when a screenshot cannot be captured",
    )
    placeholder_width: int = Field(
        default=600, ge=1, description="Width of placeholder screenshots"
    )

    # Generation Configuration
    dom_fetch_timeout_ms: int = Field(
        default=45000, ge=1000, description="Timeout for loading a page to read its markup"
    )
    dom_settle_ms: int = Field(
        default=3000, ge=0, description="Wait for dynamic content before reading markup"
    )
    max_dom_characters: int = Field(
        default=200000, ge=1000, description="Markup characters sent to the generator"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="text",
        description="Log format (json or text)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path"
    )

    # Storage Configuration
    data_dir: Path = Field(
        default=Path("data"), description="Data storage directory"
    )
    plan_file: Path = Field(
        default=Path("data/test_plan.json"), description="Saved test plan snapshot"
    )
    reports_dir: Path = Field(
        default=Path("reports"), description="Reports output directory"
    )

    # Development Configuration
    debug_mode: bool = Field(
        default=False, description="Enable debug mode"
    )

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ["json", "text"]:
            raise ValueError(f"Invalid log format: {v}")
        return v

    def create_directories(self) -> None:
        """Create required directories if they don't exist."""
        for dir_path in [
            self.data_dir,
            self.reports_dir,
            self.plan_file.parent,
        ]:
            dir_path.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    # Load .env file if it exists
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    settings = Settings()
    settings.create_directories()
    return settings
