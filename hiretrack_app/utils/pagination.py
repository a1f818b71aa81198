"""
Opt-in pagination for list endpoints.
"""
from flask import request

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100


def _to_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_pagination_params(args=None):
    """
    Return (page, page_size) when the client asked for a page, else None.

    Lists stay unpaginated unless `page` is present, so older clients keep
    receiving plain arrays.
    """
    args = request.args if args is None else args
    if 'page' not in args:
        return None
    page = max(1, _to_int(args.get('page'), 1))
    page_size = _to_int(args.get('page_size'), DEFAULT_PAGE_SIZE)
    page_size = min(MAX_PAGE_SIZE, max(1, page_size))
    return page, page_size


def paginated_response(query, page, page_size, serialize):
    """Run `query` for one page and wrap the rows with paging metadata."""
    result = query.paginate(page=page, per_page=page_size, error_out=False)
    total_pages = (result.total + page_size - 1) // page_size
    return {
        'data': [serialize(item) for item in result.items],
        'total': result.total,
        'page': page,
        'page_size': page_size,
        'total_pages': total_pages,
    }
