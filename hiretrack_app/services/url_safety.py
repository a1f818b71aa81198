"""
Google Safe Browsing lookups for links applicants submit.
"""
import json
import logging
from datetime import datetime
import requests
from flask import current_app
from hiretrack_app.models import db

logger = logging.getLogger(__name__)

SAFE_BROWSING_URL = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
THREAT_TYPES = ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE", "POTENTIALLY_HARMFUL_APPLICATION"]


def check_urls(urls):
    """
    Returns a list of {'url', 'threat_type'} matches, or None when the check
    could not run (no key, network error). Callers treat None as unknown.
    """
    api_key = current_app.config.get('GOOGLE_SAFE_BROWSING_KEY')
    urls = [u for u in urls if u]
    if not api_key or not urls:
        return None

    body = {
        "client": {"clientId": "hiretrack", "clientVersion": "1.0.0"},
        "threatInfo": {
            "threatTypes": THREAT_TYPES,
            "platformTypes": ["ANY_PLATFORM"],
            "threatEntryTypes": ["URL"],
            "threatEntries": [{"url": u} for u in urls],
        },
    }
    try:
        response = requests.post(SAFE_BROWSING_URL, params={"key": api_key}, json=body, timeout=10)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Safe Browsing check failed: %s", e)
        return None

    matches = response.json().get('matches', [])
    return [{'url': m.get('threat', {}).get('url'), 'threat_type': m.get('threatType')} for m in matches]


def check_applicant_urls(applicant):
    """Record the Safe Browsing verdict on the applicant. Never raises."""
    try:
        matches = check_urls([applicant.linked_in, applicant.website, applicant.portfolio_url])
        if matches is None:
            return
        applicant.url_safe = not matches
        applicant.url_flags = json.dumps(matches) if matches else None
        applicant.url_checked_at = datetime.utcnow()
        db.session.commit()
        if matches:
            logger.warning("Applicant %s submitted flagged URLs: %s", applicant.id, matches)
    except Exception:
        db.session.rollback()
        logger.exception("URL safety check failed for applicant %s", applicant.id)
