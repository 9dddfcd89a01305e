import math
import uuid
from typing import Any, List

from api.errors import InvalidArgument

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def parse_id(value: str, label: str = "ID") -> str:
    """Return ``value`` in canonical UUID form or raise InvalidArgument."""
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError, TypeError):
        raise InvalidArgument(f"Invalid {label}")


def clamp_pagination(page: int, limit: int) -> tuple[int, int]:
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    return page, limit


def page_payload(items: List[Any], total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if total else 0
    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }
