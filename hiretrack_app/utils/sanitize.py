"""
HTML sanitization for user-supplied text.

Script and style elements are dropped along with their content; every other
disallowed tag is unwrapped so its text survives.
"""
import nh3

RICH_TEXT_TAGS = {'b', 'i', 'em', 'strong', 'p', 'br', 'ul', 'ol', 'li'}


def strip_html(text):
    """Remove every tag and trim surrounding whitespace."""
    return nh3.clean(text, tags=set(), attributes={}).strip()


def sanitize_rich_text(text):
    """Keep basic formatting tags (no attributes) and trim."""
    return nh3.clean(text, tags=RICH_TEXT_TAGS, attributes={}).strip()
