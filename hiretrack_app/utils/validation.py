"""
Request body validation.
"""
import re
from functools import wraps
from flask import request, jsonify, g
from pydantic import ValidationError


def validate_email(email):
    """Validate email format."""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_password(password):
    """
    Validate password strength.
    Returns (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"
    if not re.search(r'[A-Z]', password):
        return False, "Password must contain at least one uppercase letter"
    if not re.search(r'[a-z]', password):
        return False, "Password must contain at least one lowercase letter"
    if not re.search(r'\d', password):
        return False, "Password must contain at least one number"
    return True, None


def format_validation_errors(exc):
    """Map a pydantic ValidationError to {dotted.path: first message}."""
    fields = {}
    for error in exc.errors():
        path = '.'.join(str(part) for part in error['loc'])
        if path in fields:
            continue
        message = error['msg']
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        fields[path] = message
    return fields


def request_payload():
    """Form fields for multipart/urlencoded bodies, otherwise the JSON object."""
    if request.mimetype in ('multipart/form-data', 'application/x-www-form-urlencoded'):
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def validate_body(schema):
    """
    Parse the request body with `schema` before the view runs.

    On success the parsed model replaces the raw body as `g.data`; on failure
    the view is skipped and a 400 with per-field messages is returned.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                g.data = schema.model_validate(request_payload())
            except ValidationError as e:
                return jsonify({
                    'error': 'Validation failed',
                    'fields': format_validation_errors(e),
                }), 400
            return f(*args, **kwargs)
        return decorated_function
    return decorator
