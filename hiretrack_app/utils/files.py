"""
Helpers for files stored under the upload folder.
"""
import logging
import os
from flask import current_app

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = '/uploads/'


def resolve_upload_path(public_path):
    """
    Map a stored '/uploads/<category>/<name>' path to its location on disk.
    Returns None for anything that would escape the upload folder.
    """
    if not public_path or not public_path.startswith(PUBLIC_PREFIX):
        return None
    root = os.path.abspath(current_app.config['UPLOAD_FOLDER'])
    full_path = os.path.abspath(os.path.join(root, public_path[len(PUBLIC_PREFIX):]))
    if os.path.commonpath([root, full_path]) != root:
        return None
    return full_path


def delete_uploaded_files(*public_paths):
    """Remove stored uploads; missing files are ignored."""
    for public_path in public_paths:
        full_path = resolve_upload_path(public_path)
        if not full_path:
            continue
        try:
            os.remove(full_path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not delete uploaded file %s", full_path, exc_info=True)
