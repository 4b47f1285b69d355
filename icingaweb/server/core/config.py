"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class SessionConfig(BaseModel):
    """Server-side session configuration."""

    cookie_name: str = Field(
        default="Icingaweb2", alias="ICINGAWEB_SESSION_COOKIE_NAME", description="Name of the session id cookie"
    )
    lifetime: int = Field(
        default=1440,
        alias="ICINGAWEB_SESSION_LIFETIME",
        description="Seconds of inactivity after which a stored session expires",
    )

    model_config = {"populate_by_name": True}


class CookieConfig(BaseModel):
    """Defaults applied to cookies sent to the client."""

    http_only: bool = Field(
        default=True, alias="ICINGAWEB_COOKIE_HTTP_ONLY", description="Hide cookies from client side script"
    )
    samesite: Optional[Literal["lax", "strict", "none"]] = Field(
        default="lax", alias="ICINGAWEB_COOKIE_SAMESITE", description="SameSite attribute of cookies"
    )
    domain: Optional[str] = Field(
        default=None, alias="ICINGAWEB_COOKIE_DOMAIN", description="Domain attribute of cookies (optional)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    project_name: str = Field(
        default="Icinga Web",
        description="Application title shown in the API docs",
        alias="ICINGAWEB_PROJECT_NAME",
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="ICINGAWEB_SERVER_HOST",
    )
    server_port: int = Field(
        default=8080,
        description="Server port number",
        alias="ICINGAWEB_SERVER_PORT",
    )
    base_path: str = Field(
        default="",
        description="Path prefix the web UI is mounted under, e.g. /icingaweb2",
        alias="ICINGAWEB_BASE_PATH",
    )
    slow_request_threshold_ms: float = Field(
        default=1000.0,
        description="Requests slower than this are logged as warnings",
        alias="ICINGAWEB_SLOW_REQUEST_MS",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="ICINGAWEB_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="ICINGAWEB_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file",
        alias="ICINGAWEB_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to <log_file_dir>/icingaweb.log",
        alias="ICINGAWEB_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Session / Cookie Configuration (flat, grouped below)
    # =====================================================================
    session_cookie_name: str = Field(default="Icingaweb2", alias="ICINGAWEB_SESSION_COOKIE_NAME")
    session_lifetime: int = Field(default=1440, alias="ICINGAWEB_SESSION_LIFETIME")
    cookie_http_only: bool = Field(default=True, alias="ICINGAWEB_COOKIE_HTTP_ONLY")
    cookie_samesite: Optional[Literal["lax", "strict", "none"]] = Field(
        default="lax", alias="ICINGAWEB_COOKIE_SAMESITE"
    )
    cookie_domain: Optional[str] = Field(default=None, alias="ICINGAWEB_COOKIE_DOMAIN")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def session(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        return SessionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cookie(self) -> CookieConfig:
        """Get cookie configuration from environment variables."""
        return CookieConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
