"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable loading and validation
- Secure credential management
- GitHub client tuning (timeouts, rate limits, listing size)
- Path normalization for output directories
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
from logger import LogManager


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Attributes:
        app_name (str): Name of the application
        dev (bool): Debug mode flag
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: debug)
        github_token (Optional[SecretStr]): GitHub API authentication token
        github_urls (str): Comma-separated token project GitHub URLs
        request_timeout_seconds (float): Timeout applied to each GitHub call
        max_candidate_repositories (int): Repositories listed per owner
        commit_window_days (int): Window used to count recent commits
        github_max_requests (int): Requests allowed per rate limit period
        github_rate_period (int): Rate limit period in seconds
        data_dir (str): Directory for cached scores
        report_output_dir (str): Directory for generated reports
    """

    # Application settings
    app_name: str = Field(default="TokenHealthScan", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=10, description="Logging level, default debug")

    # GitHub configuration
    github_token: Optional[SecretStr] = Field(
        default=None, description="GitHub token"
    )
    github_urls: str = Field(
        default="", description="Comma-separated GitHub URLs of token projects"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Timeout for a single GitHub API call"
    )
    max_candidate_repositories: int = Field(
        default=100, description="Maximum repositories listed per owner"
    )
    commit_window_days: int = Field(
        default=30, description="Window in days for recent commit counts"
    )
    github_max_requests: int = Field(
        default=60, description="GitHub requests allowed per period"
    )
    github_rate_period: int = Field(
        default=60, description="GitHub rate limit period in seconds"
    )

    data_dir: str = Field(default="data", description="Data output directory")

    report_output_dir: str = Field(
        default="reports", description="Report output directory"
    )

    @property
    def token_urls(self) -> List[str]:
        """
        Get list of token project URLs from configuration.

        Returns:
            List[str]: Cleaned, non-empty URLs
        """
        return [url.strip() for url in self.github_urls.split(",") if url.strip()]

    @field_validator("report_output_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure report directory path is absolute.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to report directory
        """
        if not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
