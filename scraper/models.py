"""
Data classes passed between the pipeline stages.

Every instance is created per request and discarded once the response has
been sent. ``to_dict`` produces the camelCase shape returned by the API.
"""

from dataclasses import dataclass, field, fields
from typing import List, Dict, Any, Optional

from .errors import ErrorCode, InvalidRequestError


@dataclass
class ProfileCounts:
    """The eleven statistic counters shown on a profile."""
    rank: int = 0
    level: int = 0
    gold: int = 0
    silver: int = 0
    bronze: int = 0
    programs_solved: int = 0
    code_test: int = 0
    code_track: int = 0
    daily_challenge: int = 0
    daily_test: int = 0
    code_tutor: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'rank': self.rank,
            'level': self.level,
            'gold': self.gold,
            'silver': self.silver,
            'bronze': self.bronze,
            'programsSolved': self.programs_solved,
            'codeTest': self.code_test,
            'codeTrack': self.code_track,
            'dailyChallenge': self.daily_challenge,
            'dailyTest': self.daily_test,
            'codeTutor': self.code_tutor,
        }

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))


@dataclass
class Certificate:
    title: str = ""
    issued_at: str = ""
    verification_link: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            'title': self.title,
            'issuedAt': self.issued_at,
            'verificationLink': self.verification_link,
        }


@dataclass
class ProfileRecord:
    """
    Result of a successful scrape.

    Free-text fields use the empty string for "not found"; counters default
    to 0. ``markup_detected`` is False when none of the expected profile
    markup was present, which separates a broken page from an empty profile.
    """
    profile_image_url: Optional[str] = None
    name: str = ""
    identifier: str = ""
    department: str = ""
    institution: str = ""
    cohort_year: str = ""
    gender: str = ""
    counts: ProfileCounts = field(default_factory=ProfileCounts)
    language_usage: Dict[str, int] = field(default_factory=dict)
    certificates: List[Certificate] = field(default_factory=list)
    total_points: int = 0
    markup_detected: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'profileImageUrl': self.profile_image_url,
            'name': self.name,
            'identifier': self.identifier,
            'department': self.department,
            'institution': self.institution,
            'cohortYear': self.cohort_year,
            'gender': self.gender,
            'counts': self.counts.to_dict(),
            'languageUsage': dict(self.language_usage),
            'certificates': [cert.to_dict() for cert in self.certificates],
            'totalPoints': self.total_points,
            'markupDetected': self.markup_detected,
        }


@dataclass
class FetchOutcome:
    """State of the fetcher after its last attempt."""
    attempt_number: int
    raw_body: Optional[str] = None
    blocked: bool = False
    http_status: Optional[int] = None
    error_kind: Optional[ErrorCode] = None
    cause: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None and self.raw_body is not None


@dataclass
class ParseProfileRequest:
    """Validated body of a parse-profile request."""
    url: str

    @classmethod
    def from_json(cls, payload: Any) -> 'ParseProfileRequest':
        if not isinstance(payload, dict):
            raise InvalidRequestError("URL is required and must be a string")
        url = payload.get('url')
        if not url or not isinstance(url, str):
            raise InvalidRequestError("URL is required and must be a string")
        return cls(url=url)


@dataclass
class AchievementPath:
    strategy: str
    description: str
    feasible: bool
    daily_requirement: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'strategy': self.strategy,
            'description': self.description,
            'feasible': self.feasible,
        }
        if self.daily_requirement is not None:
            data['dailyRequirement'] = self.daily_requirement
        return data


@dataclass
class GoalCalculation:
    target_points: int
    current_points: int
    timeline_days: int
    required_points: int
    suggestions: List[AchievementPath] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'targetPoints': self.target_points,
            'currentPoints': self.current_points,
            'timelineDays': self.timeline_days,
            'requiredPoints': self.required_points,
            'suggestions': [path.to_dict() for path in self.suggestions],
        }
