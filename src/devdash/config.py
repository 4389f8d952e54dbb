from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
import json
import os

from devdash.constants import (
    DEFAULT_FALLBACK_REPOS,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MAX_FILES_PER_REPO,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_STATIC_REPOS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
    GITHUB_USERNAME = os.getenv("GITHUB_USERNAME")
    GITHUB_API_URL = os.getenv("GITHUB_API_URL", DEFAULT_GITHUB_API_URL)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///devdash.db")  # Default to SQLite

    # Storage backend: 'local' (SQLite) or 'memory'
    DB_BACKEND = os.getenv("DB_BACKEND", "local")

    # BeautifulSoup tree builder
    HTML_PARSER = os.getenv("HTML_PARSER", "html.parser")
    USER_AGENT = os.getenv("USER_AGENT", "DevDash-Analyzer/1.0")


settings = Settings()


@dataclass
class Config:
    """Configuration for a dashboard run."""
    github_token: Optional[str] = None
    github_username: Optional[str] = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    user_agent: str = "DevDash-Analyzer/1.0"
    timeout: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    max_files_per_repo: int = DEFAULT_MAX_FILES_PER_REPO
    max_workers: int = DEFAULT_MAX_WORKERS
    html_parser: str = "html.parser"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            github_token=os.getenv("GITHUB_TOKEN"),
            github_username=os.getenv("GITHUB_USERNAME"),
            github_api_url=os.getenv("GITHUB_API_URL", DEFAULT_GITHUB_API_URL),
            user_agent=os.getenv("USER_AGENT", "DevDash-Analyzer/1.0"),
            timeout=int(os.getenv("TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))),
            max_retries=int(os.getenv("MAX_RETRIES", str(DEFAULT_MAX_RETRIES))),
            max_files_per_repo=int(
                os.getenv("MAX_FILES_PER_REPO", str(DEFAULT_MAX_FILES_PER_REPO))
            ),
            max_workers=int(os.getenv("MAX_WORKERS", str(DEFAULT_MAX_WORKERS))),
            html_parser=os.getenv("HTML_PARSER", "html.parser"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


@dataclass
class AnalysisThresholds:
    """Configurable thresholds for recommendations and trends."""

    # File-level recommendations
    file_semantic_ratio_min: float = 20.0  # percent of elements
    file_alt_coverage_target: float = 100.0  # percent

    # Portfolio-level recommendations
    portfolio_semantic_ratio_min: float = 25.0
    portfolio_semantic_ratio_target: float = 40.0
    portfolio_alt_coverage_min: float = 90.0
    portfolio_alt_coverage_target: float = 100.0

    # Overall quality verdicts
    quality_excellent: float = 80.0
    quality_good: float = 60.0

    # Trends (percentage points, boundaries are exclusive)
    semantic_trend_delta: float = 5.0
    combined_trend_delta: float = 10.0

    # Repository selection
    max_static_repos: int = DEFAULT_MAX_STATIC_REPOS
    fallback_repos: int = DEFAULT_FALLBACK_REPOS

    @classmethod
    def from_env(cls) -> "AnalysisThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with DEVDASH_THRESHOLD_
        e.g., DEVDASH_THRESHOLD_SEMANTIC_TREND_DELTA=4.0

        Returns:
            AnalysisThresholds with values from environment
        """
        thresholds = cls()
        prefix = "DEVDASH_THRESHOLD_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type == int:
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type == float:
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    pass  # Keep default if conversion fails

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "AnalysisThresholds":
        """Load thresholds from a JSON configuration file.

        Args:
            path: Path to JSON configuration file

        Returns:
            AnalysisThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        with open(file_path, 'r') as f:
            config = json.load(f)

        threshold_config = config.get('thresholds', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary."""
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }

    def save_to_file(self, path: str) -> None:
        """Save current thresholds to a JSON file.

        Args:
            path: Path to save configuration
        """
        with open(path, 'w') as f:
            json.dump({'thresholds': self.to_dict()}, f, indent=2)


# Global default thresholds instance
default_thresholds = AnalysisThresholds()
