"""
Tests for URL cleanup and validation.
"""

import pytest

from scraper.url_normalizer import normalize, is_valid_profile_url

from conftest import RESUME_URL


def test_normalize_bare_link_with_whitespace():
    result = normalize("  skillrack.com/profile/123/abc  ")
    assert result.canonical_url == "https://www.skillrack.com/faces/resume.xhtml?id=123&key=abc"
    assert result.was_modified is True
    assert result.change_log


def test_normalize_without_path_rewrite():
    result = normalize("  skillrack.com/profile/123/abc  ", rewrite_profile_path=False)
    assert result.canonical_url == "https://www.skillrack.com/profile/123/abc"
    assert result.was_modified is True
    assert len(result.change_log) == 3


def test_normalize_is_idempotent_on_canonical_url():
    result = normalize(RESUME_URL)
    assert result.canonical_url == RESUME_URL
    assert result.was_modified is False
    assert result.change_log == []

    again = normalize(normalize("http://skillrack.com/profile/1/x").canonical_url)
    assert again.was_modified is False


def test_normalize_strips_internal_whitespace():
    result = normalize("https://www.skill rack.com/profile/ 42/abc\t")
    assert result.canonical_url == "https://www.skillrack.com/faces/resume.xhtml?id=42&key=abc"


def test_normalize_upgrades_http_and_adds_www():
    result = normalize("http://skillrack.com/profile/7/deadbeef", rewrite_profile_path=False)
    assert result.canonical_url == "https://www.skillrack.com/profile/7/deadbeef"
    assert "Upgraded http:// to https://" in result.change_log
    assert "Added www. subdomain" in result.change_log


def test_normalize_leaves_foreign_hosts_alone():
    result = normalize("example.com/profile/1/abc")
    assert result.canonical_url == "example.com/profile/1/abc"
    assert result.was_modified is False


def test_normalize_keeps_trailing_slash_profile_links_valid():
    result = normalize("https://www.skillrack.com/profile/99/abc123/")
    assert result.canonical_url == "https://www.skillrack.com/faces/resume.xhtml?id=99&key=abc123"


@pytest.mark.parametrize("url", [
    "https://www.skillrack.com/profile/440943/bf966a469d73",
    "http://www.skillrack.com/profile/1/A",
    "https://www.skillrack.com/faces/resume.xhtml?id=440943&key=bf966a",
    "https://www.skillrack.com/faces/resume.xhtml?key=abc&id=1",
    "https://www.skillrack.com/faces/resume.xhtml?id=&key=",
])
def test_valid_profile_urls(url):
    assert is_valid_profile_url(url) is True


@pytest.mark.parametrize("url", [
    "https://skillrack.com/profile/1/abc",
    "https://www.example.com/profile/1/abc",
    "ftp://www.skillrack.com/profile/1/abc",
    "https://www.skillrack.com/profile/abc/abc",
    "https://www.skillrack.com/profile/1/abc-def",
    "https://www.skillrack.com/profile/1/abc/extra",
    "https://www.skillrack.com/faces/resume.xhtml?id=1",
    "https://www.skillrack.com/faces/other.xhtml?id=1&key=abc",
    "www.skillrack.com/profile/1/abc",
    "",
    "not a url",
    "http://[::1",
])
def test_invalid_profile_urls(url):
    assert is_valid_profile_url(url) is False
