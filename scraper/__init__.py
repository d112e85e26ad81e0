"""
Scraper package for the SkillRack profile tracker.
"""

from .config import ScraperConfig
from .errors import ErrorCode, ScrapeError, InvalidRequestError, InvalidUrlError, FetchError
from .extractor import ProfileExtractor, extract_profile
from .fetcher import ProfileFetcher
from .models import ProfileRecord, ProfileCounts, Certificate, FetchOutcome, ParseProfileRequest
from .pipeline import ProfileScraper
from .rate_limiter import RateLimiter
from .scoring import calculate_total_points, plan_goal, validate_goal_inputs
from .url_normalizer import normalize, is_valid_profile_url

__all__ = [
    'ScraperConfig',
    'ErrorCode',
    'ScrapeError',
    'InvalidRequestError',
    'InvalidUrlError',
    'FetchError',
    'ProfileExtractor',
    'extract_profile',
    'ProfileFetcher',
    'ProfileRecord',
    'ProfileCounts',
    'Certificate',
    'FetchOutcome',
    'ParseProfileRequest',
    'ProfileScraper',
    'RateLimiter',
    'calculate_total_points',
    'plan_goal',
    'validate_goal_inputs',
    'normalize',
    'is_valid_profile_url',
]
