# apihub/normalizers/pagination.py
from typing import Callable, Any, List, Dict


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    start: int,
    end: int,
) -> Dict[str, Any]:
    """
    Normalize an offset-paginated list response.

    ``has_more`` is a hint only: it is true when the page came back full.
    """
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": {
            "start": start,
            "end": end,
            "has_more": len(items) >= end - start > 0,
        },
    }
