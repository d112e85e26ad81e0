"""
Shared pytest fixtures and helpers.

No test touches the network: the HTTP session is replaced with ``FakeSession``,
which replays a scripted list of responses and exceptions.
"""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
# Allow tests to import app.py and the scraper package from the repo root.
sys.path.insert(0, str(ROOT_DIR))

from scraper import ScraperConfig, ProfileFetcher, ProfileScraper, RateLimiter  # noqa: E402


PROFILE_URL = "https://www.skillrack.com/profile/440943/bf966a469d73bfb792f4d2a72a4762937ba3fc48"
RESUME_URL = "https://www.skillrack.com/faces/resume.xhtml?id=440943&key=bf966a469d73bfb792f4d2a72a4762937ba3fc48"

PROFILE_HTML = """
<!DOCTYPE html>
<html>
<head><title>SkillRack - Resume</title></head>
<body>
<div class="ui grid">
<div class="ui four wide center aligned column">
  <img id="j_id_s" src="/faces/javax.faces.resource/profile/440943.png">
  <div class="ui big label black">JANE DOE</div>
  <br>SEC23AD073<br>
  <div class="ui large label">ARTIFICIAL INTELLIGENCE AND DATA SCIENCE</div>
  SRI SAIRAM ENGINEERING COLLEGE
  (BE 2027)
</div>
<div class="ui fourteen wide left aligned column">FEMALE</div>
</div>
<div class="ui six small statistics">
  <div class="statistic"><div class="value">1,234</div><div class="label">RANK</div></div>
  <div class="statistic"><div class="value">7</div><div class="label">LEVEL</div></div>
  <div class="statistic"><div class="value">12</div><div class="label">GOLD</div></div>
  <div class="statistic"><div class="value">5</div><div class="label">SILVER</div></div>
  <div class="statistic"><div class="value">3</div><div class="label">BRONZE</div></div>
  <div class="statistic"><div class="value">640</div><div class="label">PROGRAMS SOLVED</div></div>
</div>
<div class="ui six small statistics">
  <div class="statistic"><div class="value">320</div><div class="label">JAVA</div></div>
  <div class="statistic"><div class="value">250</div><div class="label">PYTHON3</div></div>
  <div class="statistic"><div class="value">0</div><div class="label">C</div></div>
  <div class="statistic"><div class="value">70</div><div class="label"> </div></div>
</div>
<div class="ui statistics">
  <div class="statistic"><div class="value">15</div><div class="label">CODE TEST</div></div>
  <div class="statistic"><div class="value">470</div><div class="label">CODE TRACK</div></div>
  <div class="statistic"><div class="value">25</div><div class="label">DC</div></div>
  <div class="statistic"><div class="value">30</div><div class="label">DT</div></div>
  <div class="statistic"><div class="value">100</div><div class="label">CODE TUTOR</div></div>
</div>
<div class="ui cards">
  <div class="ui brown card">
    <div class="content">
      <b>Python Programming Certificate</b>
      <div class="meta">Issued on 15-08-2024 10:30</div>
      <a href="https://www.skillrack.com/faces/certificate.xhtml?id=A1">Verify</a>
    </div>
  </div>
  <div class="ui brown card">
    <div class="content"><b>Data Structures</b></div>
  </div>
</div>
</body>
</html>
"""

BLOCK_PAGE_HTML = """
<html>
<head><title>Attention Required! | Cloudflare</title></head>
<body><div id="cf-wrapper"><h1>Sorry, you have been blocked</h1></div></body>
</html>
"""


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Replays scripted responses; exception instances are raised instead."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None, allow_redirects=True):
        self.calls.append({
            "url": url,
            "params": params,
            "headers": headers,
            "timeout": timeout,
        })
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSleep:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture()
def scraper_config():
    return ScraperConfig()


@pytest.fixture()
def make_fetcher(scraper_config):
    # Factory so tests can script the session and inspect the sleeps.
    def _make(responses, config=None):
        session = FakeSession(responses)
        sleep = RecordingSleep()
        fetcher = ProfileFetcher(config or scraper_config, session=session, sleep=sleep)
        return fetcher, session, sleep

    return _make


@pytest.fixture()
def make_client(scraper_config):
    # Build a Flask test client whose scraper talks to a FakeSession.
    from app import create_app

    def _make(responses=(), rate_limiter=None, scraper=None, config=None):
        config = config or scraper_config
        session = FakeSession(responses)
        if scraper is None:
            fetcher = ProfileFetcher(config, session=session, sleep=RecordingSleep())
            scraper = ProfileScraper(config, fetcher=fetcher)
        app = create_app({
            "TESTING": True,
            "SCRAPER_CONFIG": config,
            "SCRAPER": scraper,
            "RATE_LIMITER": rate_limiter or RateLimiter(max_requests=100, window_seconds=60),
        })
        client = app.test_client()
        client.session_calls = session.calls
        return client

    return _make


@pytest.fixture()
def client(make_client):
    return make_client()
