"""
URL cleanup and validation for submitted profile links.
"""

import re
import logging
from dataclasses import dataclass, field
from urllib.parse import urlsplit, parse_qs
from typing import List

from .config import PROFILE_HOST

logger = logging.getLogger(__name__)

PROFILE_PATH_PATTERN = re.compile(r'/profile/[0-9]+/[a-zA-Z0-9]+')
RESUME_PATH = '/faces/resume.xhtml'


@dataclass
class NormalizedUrl:
    canonical_url: str
    was_modified: bool
    change_log: List[str] = field(default_factory=list)


def normalize(raw_input: str, host: str = PROFILE_HOST,
              rewrite_profile_path: bool = True) -> NormalizedUrl:
    """
    Canonicalize a user-submitted profile URL.

    Steps run in order and each one that changes the URL adds a note to the
    change log:
      1. trim surrounding whitespace
      2. drop whitespace inside the URL
      3. add ``https://`` to a bare ``[www.]host`` link
      4. upgrade ``http://`` to ``https://``
      5. add the ``www.`` label
      6. rewrite ``/profile/<id>/<key>`` to ``/faces/resume.xhtml?id=<id>&key=<key>``
    """
    change_log = []
    escaped_host = re.escape(host)

    url = raw_input.strip()
    if url != raw_input:
        change_log.append("Removed leading/trailing whitespace")

    compact = re.sub(r'\s+', '', url)
    if compact != url:
        change_log.append("Removed whitespace inside the URL")
        url = compact

    if url and not re.match(r'^https?://', url) and re.match(rf'^(www\.)?{escaped_host}', url):
        url = f"https://{url}"
        change_log.append("Added missing https:// protocol")

    if url.startswith('http://'):
        url = 'https://' + url[len('http://'):]
        change_log.append("Upgraded http:// to https://")

    if f'://{host}' in url and f'://www.{host}' not in url:
        url = url.replace(f'://{host}', f'://www.{host}', 1)
        change_log.append("Added www. subdomain")

    if rewrite_profile_path:
        # The resume page is less aggressively bot-protected than /profile/
        match = re.match(
            rf'^https://www\.{escaped_host}/profile/([0-9]+)/([a-zA-Z0-9]+)/?(?:[?#].*)?\Z', url
        )
        if match:
            profile_id, profile_key = match.groups()
            url = f"https://www.{host}{RESUME_PATH}?id={profile_id}&key={profile_key}"
            change_log.append("Converted profile link to resume format")

    was_modified = url != raw_input
    if was_modified:
        logger.debug(f"Normalized {raw_input!r} to {url!r}: {'; '.join(change_log)}")

    return NormalizedUrl(canonical_url=url, was_modified=was_modified, change_log=change_log)


def is_valid_profile_url(url: str, host: str = PROFILE_HOST) -> bool:
    """
    Return True if ``url`` points at a public profile on the canonical host.

    Accepts ``/profile/<digits>/<alnum>`` and ``/faces/resume.xhtml`` carrying
    both ``id`` and ``key`` query parameters. Unparseable input is rejected.
    """
    try:
        parts = urlsplit(url)
        if parts.scheme not in ('http', 'https'):
            return False
        if parts.hostname != f'www.{host}':
            return False

        if PROFILE_PATH_PATTERN.fullmatch(parts.path):
            return True

        params = parse_qs(parts.query, keep_blank_values=True)
        return parts.path == RESUME_PATH and 'id' in params and 'key' in params
    except (ValueError, TypeError, AttributeError):
        return False
