"""Application settings and configuration.

This module defines all configuration options for the heartbeat tracker.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Heartbeat Tracker", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=3000, alias="PORT")

    # Database configuration
    database_url: str = Field(default="sqlite:///./heartbeat.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Status page thresholds
    active_window_seconds: int = Field(default=60 * 10, alias="ACTIVE_WINDOW_SECONDS")
    asleep_after_seconds: int = Field(default=60 * 60 * 4, alias="ASLEEP_AFTER_SECONDS")

    # Page rendering limits
    recent_beats_limit: int = Field(default=4000, alias="RECENT_BEATS_LIMIT")
    report_absences_limit: int = Field(default=1000, alias="REPORT_ABSENCES_LIMIT")
    owner_name: str = Field(default="my", alias="OWNER_NAME")
    owner_url: str | None = Field(default=None, alias="OWNER_URL")

    # CORS configuration
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_methods: list[str] = Field(default=["GET", "POST"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
