"""
URL slugs for job postings.
"""
import re
from hiretrack_app.models import Job


def slugify(text):
    """'Senior Designer (NYC)' -> 'senior-designer-nyc'"""
    return re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')


def generate_unique_slug(title, exclude_id=None):
    """Slug for `title` that no other job uses; appends -2, -3, ... on collision."""
    base = slugify(title) or 'job'
    slug = base
    counter = 2
    while True:
        query = Job.query.filter_by(slug=slug)
        if exclude_id:
            query = query.filter(Job.id != exclude_id)
        if not query.first():
            return slug
        slug = f"{base}-{counter}"
        counter += 1
