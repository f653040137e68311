# apihub/utils/pagination.py
from __future__ import annotations

from typing import Optional, Tuple

from werkzeug.exceptions import BadRequest


def parse_range(
    start: Optional[str],
    end: Optional[str],
    *,
    page_size: int,
) -> Tuple[int, int]:
    """
    Parse ``start``/``end`` query values into a half-open [start, end) range.

    Defaults to the first ``page_size`` rows.
    """
    try:
        from_ = int(start) if start not in (None, "") else 0
        to = int(end) if end not in (None, "") else from_ + page_size
    except ValueError as exc:
        raise BadRequest("start and end must be integers") from exc

    if from_ < 0 or to < from_:
        raise BadRequest("Invalid range")

    return from_, to
