"""
SkillRack Profile Tracker - Flask Web Application

This application accepts a public SkillRack profile URL, scrapes the profile
page for statistics, computes the total points and returns the result as JSON.
It also exposes a small goal-planning calculator built on the same scoring
rules.
"""

import os
import logging
from typing import Dict, Optional, Any

from flask import Flask, Blueprint, current_app, request, jsonify
from flask_cors import CORS

from scraper import (
    ScraperConfig, ProfileScraper, RateLimiter, ParseProfileRequest,
    ScrapeError, ErrorCode, plan_goal, validate_goal_inputs
)
from scraper.responses import (
    success_envelope, error_envelope, status_for,
    RATE_LIMIT_MESSAGE, METHOD_NOT_ALLOWED_MESSAGE
)

settings = ScraperConfig.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_file),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)

CORS_METHODS = ['POST', 'OPTIONS']
CORS_ALLOW_HEADERS = ['Content-Type']

CORS_RESOURCES = {
    r'/api/*': {
        'origins': '*',
        'methods': CORS_METHODS,
        'allow_headers': CORS_ALLOW_HEADERS,
        'send_wildcard': True,
    }
}

# flask-cors only sends these two on preflight; clients expect them on every reply
CORS_ALWAYS_HEADERS = {
    'Access-Control-Allow-Methods': ', '.join(CORS_METHODS),
    'Access-Control-Allow-Headers': ', '.join(CORS_ALLOW_HEADERS),
}


def get_client_address() -> str:
    """Address used as the rate-limit key."""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'unknown'


@api.app_errorhandler(405)
def method_not_allowed(error):
    """JSON envelope for every method the API routes do not accept."""
    return jsonify(error_envelope(ErrorCode.INVALID_URL, METHOD_NOT_ALLOWED_MESSAGE)), 405


@api.route('/api/parse-profile', methods=['POST', 'OPTIONS'])
def parse_profile():
    """Scrape a profile and return its statistics."""
    # Preflight
    if request.method == 'OPTIONS':
        return '', 200

    client_address = get_client_address()
    if not current_app.config['RATE_LIMITER'].check(client_address):
        logger.warning(f"Rate limit exceeded for {client_address}")
        return jsonify(error_envelope(ErrorCode.NETWORK_ERROR, RATE_LIMIT_MESSAGE)), 429

    try:
        payload = ParseProfileRequest.from_json(request.get_json(silent=True))
        record = current_app.config['SCRAPER'].scrape(payload.url)
    except ScrapeError as e:
        if e.cause is not None:
            logger.error(f"Error parsing profile: {str(e)} (cause: {e.cause!r})")
        else:
            logger.warning(f"Error parsing profile: {str(e)}")
        return jsonify(error_envelope(e.code, e.message)), status_for(e.code)
    except Exception as e:
        logger.error(f"Unexpected error parsing profile: {str(e)}", exc_info=True)
        return jsonify(error_envelope(ErrorCode.PARSE_ERROR)), 500

    return jsonify(success_envelope(record)), 200


def _read_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    value = payload.get(key)
    # bool is an int subclass but never a valid count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


@api.route('/api/plan-goal', methods=['POST', 'OPTIONS'])
def plan_goal_route():
    """Suggest achievement paths towards a target score."""
    if request.method == 'OPTIONS':
        return '', 200

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object', 'errors': {}}), 400

    current_points = _read_int(payload, 'currentPoints')
    target_points = _read_int(payload, 'targetPoints')
    timeline_days = _read_int(payload, 'timelineDays')

    errors = {}
    if current_points is None or current_points < 0:
        errors['currentPoints'] = 'Current points must be a non-negative number'
        current_points = 0
    errors.update(validate_goal_inputs(current_points, target_points, timeline_days))

    if errors:
        return jsonify({'success': False, 'error': 'Invalid goal inputs', 'errors': errors}), 400

    calculation = plan_goal(current_points, target_points, timeline_days)
    return jsonify({'success': True, 'data': calculation.to_dict()}), 200


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Application factory for tests and production."""
    app = Flask(__name__)
    # Keep language usage in page order
    app.json.sort_keys = False

    app.config['SCRAPER_CONFIG'] = settings
    if config:
        app.config.update(config)

    scraper_config = app.config['SCRAPER_CONFIG']
    if 'SCRAPER' not in app.config:
        app.config['SCRAPER'] = ProfileScraper(scraper_config)
    if 'RATE_LIMITER' not in app.config:
        app.config['RATE_LIMITER'] = RateLimiter(
            max_requests=scraper_config.rate_limit_max_requests,
            window_seconds=scraper_config.rate_limit_window_seconds,
        )

    app.register_blueprint(api)

    # Registered before CORS() so it runs after the extension's own hook
    @app.after_request
    def add_cors_method_headers(response):
        for header, value in CORS_ALWAYS_HEADERS.items():
            if header not in response.headers:
                response.headers[header] = value
        return response

    CORS(app, resources=CORS_RESOURCES)

    logger.info(f"Profile scraper configured: {scraper_config.to_dict()}")
    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_DEBUG', '0') == '1', host='0.0.0.0', port=int(os.getenv('PORT', '5000')))
