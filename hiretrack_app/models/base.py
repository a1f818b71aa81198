"""
Base database setup for HireTrack.
"""
from flask_sqlalchemy import SQLAlchemy
import json
import uuid

db = SQLAlchemy()


def generate_uuid():
    """Generate a UUID string for primary keys."""
    return str(uuid.uuid4())


def iso(value):
    return value.isoformat() if value else None


def load_json_list(value):
    """Decode a JSON list column; NULL stays None."""
    if value is None:
        return None
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return None
    return decoded if isinstance(decoded, list) else None
