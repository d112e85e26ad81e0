"""
Profile page fetcher with bounded retry and anti-blocking measures.

The retry loop is built from three small pieces that can be tested on their
own:

- ``backoff_schedule``: the delay to wait before each attempt
- ``is_block_page``: whether a response is the protection layer's block page
- ``fetch_once``: a single GET through a ``requests`` session
"""

import time
import random
import logging
from typing import Dict, Iterator, List, Optional, Tuple

import requests

from .config import ScraperConfig
from .errors import ErrorCode
from .models import FetchOutcome

logger = logging.getLogger(__name__)

# Desktop browser signatures rotated between attempts
USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15',
]

# Markers found on the protection layer's challenge / block pages
BLOCK_SIGNATURES = (
    'cf-wrapper',
    'Cloudflare',
    'Sorry, you have been blocked',
    'Access denied',
    'Ray ID',
)

NOT_FOUND_STATUSES = (404, 410)


def backoff_schedule(max_attempts: int, base: float = 1.0, jitter: float = 1.0,
                     rng: Optional[random.Random] = None) -> Iterator[float]:
    """
    Yield the delay to wait before each attempt.

    The first attempt starts immediately. Attempt ``n`` after that waits
    ``base * n`` seconds plus up to ``jitter`` seconds of random noise, so the
    delays grow strictly while ``jitter <= base``.
    """
    rng = rng or random
    for attempt in range(1, max_attempts + 1):
        if attempt == 1:
            yield 0.0
        else:
            yield base * attempt + rng.uniform(0, jitter)


def is_block_page(status: Optional[int], body: Optional[str]) -> bool:
    """Return True if the response looks like a bot-protection block page."""
    if status == 403:
        return True
    if not body:
        return False
    return any(signature in body for signature in BLOCK_SIGNATURES)


def build_headers(attempt: int, host: str, rng: Optional[random.Random] = None) -> Dict[str, str]:
    """Browser-like request headers, varied slightly from attempt to attempt."""
    rng = rng or random
    headers = {
        'User-Agent': rng.choice(USER_AGENTS),
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7',
        'Accept-Language': 'en-US,en;q=0.9',
        'Accept-Encoding': 'gzip, deflate',
        'Connection': 'keep-alive',
        'Upgrade-Insecure-Requests': '1',
        'Sec-Fetch-Dest': 'document',
        'Sec-Fetch-Mode': 'navigate',
        'Sec-Fetch-Site': 'cross-site' if attempt == 1 else 'same-origin',
        'Sec-Fetch-User': '?1',
        'Sec-Ch-Ua': '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
        'Sec-Ch-Ua-Mobile': '?0',
        'Sec-Ch-Ua-Platform': '"Windows"',
        'Cache-Control': 'max-age=0' if attempt == 1 else 'no-cache',
        'Referer': 'https://www.google.com/' if attempt == 1 else f'https://www.{host}/',
        'DNT': '1',
    }
    if attempt > 1:
        headers['Pragma'] = 'no-cache'
    if attempt == 2:
        headers['X-Requested-With'] = 'XMLHttpRequest'
    return headers


def create_session() -> requests.Session:
    """Create an HTTP session with browser-like defaults."""
    session = requests.Session()
    session.headers.update({
        'User-Agent': random.choice(USER_AGENTS),
        'Accept-Language': 'en-US,en;q=0.9',
        'Connection': 'keep-alive',
    })
    return session


def fetch_once(session, url: str, headers: Dict[str, str], timeout: float,
               params: Optional[Dict[str, str]] = None) -> Tuple[int, str]:
    """Perform one GET and return ``(status_code, body)``."""
    response = session.get(
        url,
        params=params,
        headers=headers,
        timeout=timeout,
        allow_redirects=True,
    )
    return response.status_code, response.text


class ProfileFetcher:
    """
    Fetches a profile page, retrying blocked and transient failures.

    ``fetch`` always returns a ``FetchOutcome``; a terminal failure is
    reported through ``error_kind`` with the original exception kept in
    ``cause`` for logging.
    """

    def __init__(self, config: ScraperConfig, session=None, sleep=time.sleep,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.session = session if session is not None else create_session()
        self.sleep = sleep
        self.rng = rng or random.Random()

    def _paths_for(self, url: str, final_attempt: bool) -> List[Tuple[str, str, Optional[Dict[str, str]]]]:
        """Request paths to try for one attempt, primary first."""
        direct = ('direct', url, None)
        if not self.config.use_relay:
            return [direct]

        relay = ('relay', self.config.relay_endpoint, {
            'api_key': self.config.relay_api_key,
            'url': url,
        })
        # The direct path reliably fails once the relay has, so skip it at the end
        if final_attempt:
            return [relay]
        return [relay, direct]

    def fetch(self, url: str) -> FetchOutcome:
        """
        Fetch a profile page, retrying blocked and transient failures.

        Args:
            url: Canonical profile URL to request

        Returns:
            The first successful or NOT_FOUND outcome, otherwise the outcome
            of the last request made
        """
        max_attempts = self.config.max_attempts
        schedule = backoff_schedule(
            max_attempts, self.config.backoff_base, self.config.backoff_jitter, self.rng
        )
        outcome = FetchOutcome(attempt_number=0)

        for attempt, delay in enumerate(schedule, start=1):
            if delay > 0:
                logger.info(f"Waiting {delay:.2f}s before attempt {attempt}/{max_attempts}")
                self.sleep(delay)

            final_attempt = attempt == max_attempts
            headers = build_headers(attempt, self.config.profile_host, self.rng)

            for path_name, target, params in self._paths_for(url, final_attempt):
                outcome = self._attempt(attempt, path_name, target, params, headers, url)
                if outcome.ok or outcome.error_kind is ErrorCode.NOT_FOUND:
                    return outcome

        logger.error(
            f"Giving up on {url} after {max_attempts} attempts "
            f"(status={outcome.http_status}, blocked={outcome.blocked}, error={outcome.error_kind})"
        )
        return outcome

    def _attempt(self, attempt: int, path_name: str, target: str,
                 params: Optional[Dict[str, str]], headers: Dict[str, str],
                 url: str) -> FetchOutcome:
        """Run one request and classify the result."""
        try:
            status, body = fetch_once(
                self.session, target, headers, self.config.request_timeout, params=params
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"Attempt {attempt} ({path_name}) timed out for {url}: {str(e)}")
            return FetchOutcome(attempt, error_kind=ErrorCode.NETWORK_ERROR, cause=e)
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Attempt {attempt} ({path_name}) could not connect to {url}: {str(e)}")
            return FetchOutcome(attempt, error_kind=ErrorCode.NETWORK_ERROR, cause=e)
        except Exception as e:
            logger.error(f"Attempt {attempt} ({path_name}) failed for {url}: {str(e)}")
            return FetchOutcome(attempt, error_kind=ErrorCode.PARSE_ERROR, cause=e)

        if is_block_page(status, body):
            logger.warning(f"Attempt {attempt} ({path_name}): block page detected for {url} (status {status})")
            return FetchOutcome(attempt, raw_body=None, blocked=True, http_status=status,
                                error_kind=ErrorCode.NETWORK_ERROR)

        if status in NOT_FOUND_STATUSES:
            logger.warning(f"Profile not found at {url} (status {status})")
            return FetchOutcome(attempt, http_status=status, error_kind=ErrorCode.NOT_FOUND)

        # Relay replies outside 2xx are the relay's own errors (bad key, quota), not the page
        if path_name == 'relay' and not 200 <= status < 300:
            logger.warning(f"Attempt {attempt} (relay): relay returned status {status} for {url}")
            return FetchOutcome(attempt, http_status=status, error_kind=ErrorCode.NETWORK_ERROR)

        if status >= 500:
            logger.warning(f"Attempt {attempt} ({path_name}): upstream error {status} for {url}")
            return FetchOutcome(attempt, http_status=status, error_kind=ErrorCode.PARSE_ERROR)

        logger.info(f"Attempt {attempt} ({path_name}) fetched {url} - status {status}, {len(body)} bytes")
        return FetchOutcome(attempt, raw_body=body, http_status=status)
