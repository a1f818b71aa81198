"""
Upload storage and validation.

Files are written under UPLOAD_FOLDER/<category>/ with a random name, then
checked by magic bytes (not the client's Content-Type or extension) and
virus-scanned. Rejected files are removed before the response goes out.
"""
import logging
import os
import random
import time
from dataclasses import dataclass
from functools import wraps
import filetype
from flask import current_app, g, jsonify, request
from hiretrack_app.services.virus_scan import scan_file
from hiretrack_app.utils.files import delete_uploaded_files

logger = logging.getLogger(__name__)

MB = 1024 * 1024

DOCX_MIME = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'

_PORTFOLIO_MIMES = frozenset(['application/pdf', 'image/jpeg', 'image/png', 'application/zip'])


@dataclass(frozen=True)
class UploadRule:
    category: str
    extensions: frozenset
    max_bytes: int
    allowed_mimes: frozenset


UPLOAD_RULES = {
    'resume': UploadRule(
        category='resumes',
        extensions=frozenset(['.pdf', '.doc', '.docx']),
        max_bytes=10 * MB,
        # .doc is an OLE compound file, .docx a zip container
        allowed_mimes=frozenset(['application/pdf', 'application/msword', 'application/x-cfb',
                                 'application/zip', DOCX_MIME]),
    ),
    'portfolio': UploadRule(
        category='portfolios',
        extensions=frozenset(['.pdf', '.jpg', '.jpeg', '.png', '.zip']),
        max_bytes=50 * MB,
        allowed_mimes=_PORTFOLIO_MIMES,
    ),
    'offer_letter': UploadRule(
        category='offers',
        extensions=frozenset(['.pdf', '.jpg', '.jpeg', '.png', '.zip']),
        max_bytes=50 * MB,
        allowed_mimes=_PORTFOLIO_MIMES,
    ),
}


@dataclass
class StoredFile:
    field: str
    original_name: str
    disk_path: str
    public_path: str


def _random_name(ext):
    return f"{int(time.time() * 1000)}-{random.randint(0, 999_999_999):09d}{ext}"


def _extension_message(rule):
    labels = ', '.join(sorted(ext.lstrip('.').upper() for ext in rule.extensions))
    return f"Only {labels} files are allowed"


def save_uploaded_files(fields):
    """
    Store the request's files for `fields`.
    Returns (stored, errors); files failing the extension or size rules are not kept.
    """
    stored, errors = [], []
    upload_root = current_app.config['UPLOAD_FOLDER']

    for field in fields:
        uploads = [u for u in request.files.getlist(field) if u.filename]
        if not uploads:
            continue
        if len(uploads) > 1:
            errors.append(f"{field}: Only one file is allowed")
            continue
        upload = uploads[0]
        rule = UPLOAD_RULES[field]
        ext = os.path.splitext(upload.filename)[1].lower()
        if ext not in rule.extensions:
            errors.append(f"{field}: {_extension_message(rule)}")
            continue

        directory = os.path.join(upload_root, rule.category)
        os.makedirs(directory, exist_ok=True)
        name = _random_name(ext)
        disk_path = os.path.join(directory, name)
        upload.save(disk_path)

        if os.path.getsize(disk_path) > rule.max_bytes:
            os.remove(disk_path)
            errors.append(f"{field}: File exceeds the {rule.max_bytes // MB}MB limit")
            continue

        stored.append(StoredFile(
            field=field,
            original_name=upload.filename,
            disk_path=disk_path,
            public_path=f"/uploads/{rule.category}/{name}",
        ))
    return stored, errors


def detect_mime(path):
    kind = filetype.guess(path)
    return kind.mime if kind else None


def validate_uploaded_files(stored):
    """
    Check stored files by content and virus-scan them.
    Every rejected file is deleted; returns the list of error messages.
    """
    errors = []
    for item in stored:
        rule = UPLOAD_RULES[item.field]
        mime = detect_mime(item.disk_path)

        if mime is None:
            # Old Word files are not always recognisable by signature
            if not item.original_name.lower().endswith('.doc'):
                errors.append(f"{item.field}: Unable to verify file type")
                delete_uploaded_files(item.public_path)
                continue
        elif mime not in rule.allowed_mimes:
            errors.append(f'{item.field}: File type "{mime}" is not allowed')
            delete_uploaded_files(item.public_path)
            continue

        result = scan_file(item.disk_path)
        if not result.clean:
            message = f"{item.field}: File rejected by virus scan"
            if result.viruses:
                message += ': ' + ', '.join(result.viruses)
            errors.append(message)
            delete_uploaded_files(item.public_path)
    return errors


def accept_uploads(*fields):
    """
    Store and validate uploads for `fields` before the view runs.

    The view sees accepted files in `g.uploads` keyed by field. Any error
    answers 400 and discards every file from the request.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            stored, errors = save_uploaded_files(fields)
            if not errors:
                errors = validate_uploaded_files(stored)
            if errors:
                delete_uploaded_files(*[item.public_path for item in stored])
                logger.info("Rejected upload on %s: %s", request.path, errors)
                return jsonify({'error': 'File validation failed', 'fields': errors}), 400
            g.uploads = {item.field: item for item in stored}
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def uploaded_path(field):
    """Public path of the accepted upload for `field`, or None."""
    item = g.get('uploads', {}).get(field)
    return item.public_path if item else None
