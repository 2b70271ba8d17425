from typing import Any

from config.settings import settings


def parse_limit(value: Any) -> int:
    """Parse a client-supplied page size.

    Missing or non-integer input falls back to DEFAULT_PAGE_LIMIT; anything
    else is clamped to [1, MAX_PAGE_LIMIT].
    """
    if value is None or value == "" or isinstance(value, bool):
        return settings.DEFAULT_PAGE_LIMIT
    try:
        limit = int(str(value).strip())
    except ValueError:
        return settings.DEFAULT_PAGE_LIMIT
    return max(1, min(limit, settings.MAX_PAGE_LIMIT))
