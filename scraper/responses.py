"""
JSON envelopes returned by the API.
"""

from typing import Any, Dict, Optional

from .errors import ErrorCode
from .models import ProfileRecord

DEFAULT_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.INVALID_URL: 'Invalid SkillRack profile URL format. Expected: https://www.skillrack.com/profile/[id]/[hash]',
    ErrorCode.NETWORK_ERROR: 'Unable to connect to SkillRack. Please check your internet connection.',
    ErrorCode.NOT_FOUND: 'Profile not found. Please check if the URL is correct and the profile is public.',
    ErrorCode.PARSE_ERROR: 'Failed to parse profile data. Please verify the profile URL is correct.',
}

BLOCKED_MESSAGE = ('Access temporarily blocked by security protection. '
                   'Please try again later or contact support if this persists.')
TIMEOUT_MESSAGE = 'Request timeout. Please try again.'
RATE_LIMIT_MESSAGE = 'Too many requests. Please wait a moment before trying again.'
METHOD_NOT_ALLOWED_MESSAGE = 'Method not allowed'

STATUS_FOR_CODE: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_URL: 400,
    ErrorCode.NETWORK_ERROR: 500,
    ErrorCode.NOT_FOUND: 500,
    ErrorCode.PARSE_ERROR: 500,
}


def success_envelope(record: ProfileRecord) -> Dict[str, Any]:
    """Wrap a scraped record as ``{'success': True, 'data': ...}``."""
    return {'success': True, 'data': record.to_dict()}


def error_envelope(code: ErrorCode, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the failure body returned to the caller.

    Args:
        code: Error classification sent as ``code``
        message: Text for ``error``; the code's default message when omitted

    Returns:
        Dictionary with ``success``, ``error`` and ``code`` keys
    """
    return {
        'success': False,
        'error': message or DEFAULT_MESSAGES[code],
        'code': code.value,
    }


def status_for(code: ErrorCode) -> int:
    return STATUS_FOR_CODE.get(code, 500)
