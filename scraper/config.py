"""
Configuration for the profile scraper.

All tunables live on a single dataclass so the Flask app, the fetcher and the
rate limiter read the same values. Defaults match the public SkillRack site;
every field can be overridden from the environment via ``from_env``.
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from dotenv import find_dotenv, load_dotenv


PROFILE_HOST = "skillrack.com"
RELAY_ENDPOINT = "https://api.scraperapi.com/"

MIN_ATTEMPTS = 2
MAX_ATTEMPTS = 3


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ScraperConfig:
    """Configuration class for the profile scraper."""

    # Target site
    profile_host: str = PROFILE_HOST
    rewrite_profile_path: bool = True

    # Fetching
    max_attempts: int = 3
    request_timeout: int = 20  # in seconds
    backoff_base: float = 1.0  # seconds per attempt number
    backoff_jitter: float = 1.0  # upper bound of the random extra delay

    # Optional anti-block relay
    relay_api_key: Optional[str] = None
    relay_endpoint: str = RELAY_ENDPOINT

    # Rate limiting
    rate_limit_max_requests: int = 10
    rate_limit_window_seconds: int = 60

    # Logging
    log_level: str = "INFO"
    log_file: str = "profile_scraper.log"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not MIN_ATTEMPTS <= self.max_attempts <= MAX_ATTEMPTS:
            raise ValueError(f"max_attempts must be between {MIN_ATTEMPTS} and {MAX_ATTEMPTS}")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.backoff_base <= 0:
            raise ValueError("backoff_base must be positive")
        if self.backoff_jitter < 0:
            raise ValueError("backoff_jitter must not be negative")
        # Keeps each retry delay longer than the one before it
        if self.backoff_jitter > self.backoff_base:
            raise ValueError("backoff_jitter must not exceed backoff_base")
        if self.rate_limit_max_requests < 1:
            raise ValueError("rate_limit_max_requests must be at least 1")
        if self.rate_limit_window_seconds <= 0:
            raise ValueError("rate_limit_window_seconds must be positive")
        if not self.relay_api_key:
            self.relay_api_key = None

    @property
    def canonical_host(self) -> str:
        """Host name the site requires, including the ``www.`` label."""
        return f"www.{self.profile_host}"

    @property
    def use_relay(self) -> bool:
        return self.relay_api_key is not None

    def to_dict(self) -> Dict[str, Any]:
        config_dict = asdict(self)
        # Never expose the relay credential
        config_dict["relay_api_key"] = "***" if self.relay_api_key else None
        return config_dict

    @classmethod
    def from_env(cls, **overrides) -> 'ScraperConfig':
        """
        Build a configuration from environment variables.

        A ``.env`` file in the working directory is loaded first; variables
        already set in the process environment take precedence over it.

        Args:
            **overrides: Field values that win over the environment

        Returns:
            A validated ScraperConfig
        """
        load_dotenv(find_dotenv(usecwd=True))
        values = dict(
            profile_host=os.getenv("PROFILE_HOST", PROFILE_HOST),
            rewrite_profile_path=_env_bool("REWRITE_PROFILE_PATH", True),
            max_attempts=int(os.getenv("MAX_ATTEMPTS", "3")),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "20")),
            backoff_base=float(os.getenv("BACKOFF_BASE", "1.0")),
            backoff_jitter=float(os.getenv("BACKOFF_JITTER", "1.0")),
            relay_api_key=os.getenv("SCRAPER_API_KEY"),
            relay_endpoint=os.getenv("RELAY_ENDPOINT", RELAY_ENDPOINT),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "10")),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "profile_scraper.log"),
        )
        values.update(overrides)
        return cls(**values)
