"""
End-to-end scrape: normalize -> fetch -> extract -> score.
"""

import logging
from typing import Optional

import requests

from .config import ScraperConfig
from .errors import ErrorCode, FetchError, InvalidUrlError, ScrapeError
from .extractor import ProfileExtractor
from .fetcher import ProfileFetcher
from .models import FetchOutcome, ProfileRecord
from .responses import BLOCKED_MESSAGE, DEFAULT_MESSAGES, TIMEOUT_MESSAGE
from .url_normalizer import normalize, is_valid_profile_url

logger = logging.getLogger(__name__)


class ProfileScraper:
    """Runs the scrape pipeline for one submitted URL at a time."""

    def __init__(self, config: Optional[ScraperConfig] = None,
                 fetcher: Optional[ProfileFetcher] = None,
                 extractor: Optional[ProfileExtractor] = None):
        self.config = config or ScraperConfig()
        self.fetcher = fetcher or ProfileFetcher(self.config)
        self.extractor = extractor or ProfileExtractor()

    def prepare_url(self, raw_url: str) -> str:
        """Normalize and validate ``raw_url``; no network access."""
        normalized = normalize(
            raw_url,
            host=self.config.profile_host,
            rewrite_profile_path=self.config.rewrite_profile_path,
        )
        if normalized.was_modified:
            logger.info(f"Normalized URL: {normalized.canonical_url} ({'; '.join(normalized.change_log)})")

        if not is_valid_profile_url(normalized.canonical_url, host=self.config.profile_host):
            logger.info(f"Rejected URL: {raw_url!r}")
            raise InvalidUrlError(DEFAULT_MESSAGES[ErrorCode.INVALID_URL])
        return normalized.canonical_url

    def scrape(self, raw_url: str) -> ProfileRecord:
        """
        Scrape one profile.

        Args:
            raw_url: URL exactly as the caller submitted it

        Returns:
            The extracted ProfileRecord, with total points filled in

        Raises:
            InvalidUrlError: if the URL is not a profile link
            ScrapeError: if the page could not be fetched
        """
        url = self.prepare_url(raw_url)

        outcome = self.fetcher.fetch(url)
        if not outcome.ok:
            raise self._fetch_failure(outcome)

        record = self.extractor.extract(outcome.raw_body)
        if record.counts.is_empty():
            logger.warning(f"No counters found on {url}; reporting an all-zero profile")
        logger.info(
            f"Scraped {url}: name={record.name!r}, total_points={record.total_points}, "
            f"languages={len(record.language_usage)}, certificates={len(record.certificates)}"
        )
        return record

    def _fetch_failure(self, outcome: FetchOutcome) -> ScrapeError:
        code = outcome.error_kind or ErrorCode.PARSE_ERROR
        if code is ErrorCode.NETWORK_ERROR:
            if outcome.blocked:
                message = BLOCKED_MESSAGE
            elif isinstance(outcome.cause, requests.exceptions.Timeout):
                message = TIMEOUT_MESSAGE
            else:
                message = DEFAULT_MESSAGES[code]
            return FetchError(message, code=code, cause=outcome.cause)
        return ScrapeError(DEFAULT_MESSAGES[code], code=code, cause=outcome.cause)
