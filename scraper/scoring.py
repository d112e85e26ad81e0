"""
Point calculation and goal planning.

Points per unit:
    Code Track       2
    Daily Test      20  (at most one per day)
    Daily Challenge  2  (at most one per day)
    Code Test       30
    Code Tutor       0  (display only)
"""

import math
from typing import Dict

from .models import AchievementPath, GoalCalculation, ProfileCounts

SCORE_WEIGHTS: Dict[str, int] = {
    'code_track': 2,
    'daily_test': 20,
    'daily_challenge': 2,
    'code_test': 30,
    'code_tutor': 0,
}

MAX_TARGET_POINTS = 1000000
MAX_TIMELINE_DAYS = 3650

# Daily effort above these limits is flagged as hard to sustain
MAX_CODE_TRACKS_PER_DAY = 10
MAX_MIXED_CODE_TRACKS_PER_DAY = 5


def calculate_total_points(counts: ProfileCounts) -> int:
    """Weighted sum of the scored counters."""
    return sum(getattr(counts, name) * weight for name, weight in SCORE_WEIGHTS.items())


def validate_goal_inputs(current_points: int, target_points, timeline_days) -> Dict[str, str]:
    """Return a mapping of field name to error message; empty when valid."""
    errors = {}

    if not isinstance(target_points, int) or isinstance(target_points, bool):
        errors['targetPoints'] = 'Please enter a valid target points number'
    elif target_points <= 0:
        errors['targetPoints'] = 'Target points must be greater than 0'
    elif target_points > MAX_TARGET_POINTS:
        errors['targetPoints'] = f'Target points seems unreasonably high (max: {MAX_TARGET_POINTS:,})'
    elif target_points <= current_points:
        errors['targetPoints'] = f'Target must be higher than your current points ({current_points:,})'

    if not isinstance(timeline_days, int) or isinstance(timeline_days, bool):
        errors['timelineDays'] = 'Please enter a valid number of days'
    elif timeline_days <= 0:
        errors['timelineDays'] = 'Timeline must be at least 1 day'
    elif timeline_days > MAX_TIMELINE_DAYS:
        errors['timelineDays'] = 'Timeline seems unreasonably long (max: 10 years)'

    return errors


def plan_goal(current_points: int, target_points: int, timeline_days: int) -> GoalCalculation:
    """
    Suggest ways to reach ``target_points`` within ``timeline_days``.

    Inputs are assumed to have passed ``validate_goal_inputs`` apart from the
    target already being reached, which yields a single "achieved" path.
    """
    required_points = max(0, target_points - current_points)
    suggestions = []

    if required_points == 0:
        suggestions.append(AchievementPath(
            strategy='Goal Already Achieved',
            description='Congratulations! You have already reached your target points.',
            feasible=True,
        ))
    else:
        code_tracks_needed = math.ceil(required_points / SCORE_WEIGHTS['code_track'])
        code_tracks_per_day = math.ceil(code_tracks_needed / timeline_days)
        suggestions.append(AchievementPath(
            strategy='Code Tracks Only',
            description=f'Solve {code_tracks_needed} Code Track problems',
            daily_requirement=f'{code_tracks_per_day} Code Tracks per day',
            feasible=code_tracks_per_day <= MAX_CODE_TRACKS_PER_DAY,
        ))

        daily_tests_needed = math.ceil(required_points / SCORE_WEIGHTS['daily_test'])
        suggestions.append(AchievementPath(
            strategy='Daily Tests Only',
            description=f'Complete {daily_tests_needed} Daily Tests',
            daily_requirement='1 Daily Test per day',
            feasible=daily_tests_needed <= timeline_days,
        ))

        # One daily test per day, code tracks make up the rest
        daily_test_days = min(timeline_days, daily_tests_needed)
        remaining_points = max(0, required_points - daily_test_days * SCORE_WEIGHTS['daily_test'])
        additional_code_tracks = math.ceil(remaining_points / SCORE_WEIGHTS['code_track'])
        if daily_test_days > 0 and additional_code_tracks > 0:
            extra_per_day = math.ceil(additional_code_tracks / timeline_days)
            suggestions.append(AchievementPath(
                strategy='Mixed Strategy',
                description=f'{daily_test_days} Daily Tests + {additional_code_tracks} Code Tracks',
                daily_requirement=f'1 Daily Test + {extra_per_day} Code Tracks per day',
                feasible=extra_per_day <= MAX_MIXED_CODE_TRACKS_PER_DAY,
            ))

    return GoalCalculation(
        target_points=target_points,
        current_points=current_points,
        timeline_days=timeline_days,
        required_points=required_points,
        suggestions=suggestions,
    )
