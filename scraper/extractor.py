"""
HTML extraction for profile pages.

Pulls the statistic counters, identity fields, language usage table and
certificate list out of a fetched profile document. Extraction is tied to the
site's current markup; anything that cannot be found falls back to a default
instead of raising.
"""

import re
import logging
from enum import Enum
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from .models import Certificate, ProfileCounts, ProfileRecord
from .scoring import calculate_total_points

logger = logging.getLogger(__name__)


class StatLabel(Enum):
    """Label text of the statistic blocks we track."""
    RANK = "RANK"
    LEVEL = "LEVEL"
    GOLD = "GOLD"
    SILVER = "SILVER"
    BRONZE = "BRONZE"
    PROGRAMS_SOLVED = "PROGRAMS SOLVED"
    CODE_TEST = "CODE TEST"
    CODE_TRACK = "CODE TRACK"
    DAILY_CHALLENGE = "DC"
    DAILY_TEST = "DT"
    CODE_TUTOR = "CODE TUTOR"


# ProfileCounts field -> statistic label
COUNTER_LABELS: Dict[str, StatLabel] = {
    'rank': StatLabel.RANK,
    'level': StatLabel.LEVEL,
    'gold': StatLabel.GOLD,
    'silver': StatLabel.SILVER,
    'bronze': StatLabel.BRONZE,
    'programs_solved': StatLabel.PROGRAMS_SOLVED,
    'code_test': StatLabel.CODE_TEST,
    'code_track': StatLabel.CODE_TRACK,
    'daily_challenge': StatLabel.DAILY_CHALLENGE,
    'daily_test': StatLabel.DAILY_TEST,
    'code_tutor': StatLabel.CODE_TUTOR,
}

# Selectors for the site's Semantic UI markup
PROFILE_IMAGE_SELECTOR = '#j_id_s'
NAME_SELECTOR = '.ui.big.label.black'
INFO_COLUMN_SELECTOR = '.ui.four.wide.center.aligned.column'
DEPARTMENT_SELECTOR = '.ui.large.label'
GENDER_SELECTOR = '.ui.fourteen.wide.left.aligned.column'
STATISTIC_SELECTOR = '.statistic'
STATISTICS_GROUP_SELECTOR = 'div.ui.six.small.statistics'
CERTIFICATE_SELECTOR = '.ui.brown.card'

LANGUAGE_GROUP_INDEX = 1

ID_PATTERN = re.compile(r'([A-Z]{3}\d{2}[A-Z]{2}\d{3})')  # e.g. SEC23AD073
YEAR_PATTERN = re.compile(r'\(([^)]+)\s+(\d{4})\)')
CERTIFICATE_DATE_PATTERN = re.compile(r'(\d{2}-\d{2}-\d{4}\s+\d{2}:\d{2})')


def _text(elements) -> str:
    """Concatenated text of all ``elements``."""
    return ''.join(element.get_text() for element in elements)


def _digits_to_int(text: str) -> int:
    digits = re.sub(r'[^0-9]', '', text)
    return int(digits) if digits else 0


class ProfileExtractor:
    """Extracts a ``ProfileRecord`` from a profile page."""

    def extract(self, html: str) -> ProfileRecord:
        """
        Extract a profile record from page HTML.

        Args:
            html: Page body; None or an empty string is allowed

        Returns:
            A ProfileRecord. Fields that cannot be found keep their defaults,
            and any unexpected error yields an all-default record.
        """
        try:
            return self._extract(html or '')
        except Exception as e:
            logger.error(f"Unexpected error extracting profile data: {str(e)}", exc_info=True)
            return ProfileRecord()

    def _extract(self, html: str) -> ProfileRecord:
        """Parse ``html`` once and derive every field from the same tree."""
        soup = BeautifulSoup(html, 'html.parser')

        title = soup.title.get_text(strip=True) if soup.title else ''
        logger.debug(f"Extracting profile from page titled {title!r}")

        info_text = _text(soup.select(INFO_COLUMN_SELECTOR))
        # Department is the anchor for the institution pattern, so it goes first
        department = _text(soup.select(DEPARTMENT_SELECTOR)).strip()

        counts = self.extract_counts(soup)
        markup_detected = bool(soup.select(STATISTIC_SELECTOR) or soup.select(NAME_SELECTOR))
        if not markup_detected:
            logger.warning("No recognizable profile markup found; page layout may have changed")

        return ProfileRecord(
            profile_image_url=self.extract_profile_image(soup),
            name=self.extract_name(soup),
            identifier=self.extract_identifier(info_text),
            department=department,
            institution=self.extract_institution(info_text, department),
            cohort_year=self.extract_cohort_year(info_text),
            gender=_text(soup.select(GENDER_SELECTOR)).strip(),
            counts=counts,
            language_usage=self.extract_language_usage(soup),
            certificates=self.extract_certificates(soup),
            total_points=calculate_total_points(counts),
            markup_detected=markup_detected,
        )

    def extract_profile_image(self, soup: BeautifulSoup) -> Optional[str]:
        image = soup.select_one(PROFILE_IMAGE_SELECTOR)
        if image is None:
            return None
        return image.get('src')

    def extract_name(self, soup: BeautifulSoup) -> str:
        label = soup.select_one(NAME_SELECTOR)
        return label.get_text().strip() if label else ''

    def extract_identifier(self, info_text: str) -> str:
        match = ID_PATTERN.search(info_text)
        return match.group(1) if match else ''

    def extract_institution(self, info_text: str, department: str) -> str:
        """
        Text between the department and the opening ``(`` of the year.

        Only works when the department string reappears verbatim in the
        column text.
        """
        if not department:
            return ''
        pattern = re.escape(department) + r'\s*\n\s*(.+?)\s*\n\s*\('
        match = re.search(pattern, info_text)
        return match.group(1).strip() if match else ''

    def extract_cohort_year(self, info_text: str) -> str:
        match = YEAR_PATTERN.search(info_text)
        return match.group(2).strip() if match else ''

    def _first_stat_values(self, soup: BeautifulSoup) -> Dict[str, str]:
        """Map each statistic label to the value text of its first block."""
        values = {}
        for block in soup.select(STATISTIC_SELECTOR):
            label = _text(block.select('.label')).strip()
            if label not in values:
                values[label] = _text(block.select('.value'))
        return values

    def extract_counts(self, soup: BeautifulSoup) -> ProfileCounts:
        values = self._first_stat_values(soup)
        return ProfileCounts(**{
            field_name: _digits_to_int(values.get(label.value, ''))
            for field_name, label in COUNTER_LABELS.items()
        })

    def extract_language_usage(self, soup: BeautifulSoup) -> Dict[str, int]:
        languages = {}
        groups = soup.select(STATISTICS_GROUP_SELECTOR)
        if len(groups) <= LANGUAGE_GROUP_INDEX:
            return languages

        for block in groups[LANGUAGE_GROUP_INDEX].select(STATISTIC_SELECTOR):
            label = _text(block.select('.label')).strip()
            value = _digits_to_int(_text(block.select('.value')))
            if label and value:
                languages[label] = value
        return languages

    def extract_certificates(self, soup: BeautifulSoup) -> List[Certificate]:
        certificates = []
        for card in soup.select(CERTIFICATE_SELECTOR):
            title = _text(card.find_all('b')).strip()

            date_match = CERTIFICATE_DATE_PATTERN.search(card.get_text())
            issued_at = date_match.group(1) if date_match else ''

            anchor = card.find('a')
            link = anchor.get('href', '') if anchor else ''

            certificates.append(Certificate(title=title, issued_at=issued_at, verification_link=link))
        return certificates


def extract_profile(html: str) -> ProfileRecord:
    """Convenience wrapper around ``ProfileExtractor().extract``."""
    return ProfileExtractor().extract(html)
