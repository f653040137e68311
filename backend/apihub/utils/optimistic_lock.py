from typing import Any, Mapping, Optional

from flask import request
from werkzeug.exceptions import BadRequest

CONTENT_VERSION_HEADER = "X-Content-Version"


def _as_version(raw: Any, source: str) -> int:
    if isinstance(raw, bool):
        raise BadRequest(f"Invalid {source}")
    try:
        version = int(raw)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {source}")
    if version < 0:
        raise BadRequest(f"Invalid {source}")
    return version


def expected_base_version(body: Optional[Mapping[str, Any]] = None) -> int:
    """
    Read the content version a client based its edit on.

    The X-Content-Version header wins over a ``baseVersion`` body field.
    One of them is required: appends without a base version are rejected.
    """
    header = request.headers.get(CONTENT_VERSION_HEADER)
    if header is not None:
        return _as_version(header, f"{CONTENT_VERSION_HEADER} header")

    if body and "baseVersion" in body:
        return _as_version(body["baseVersion"], "baseVersion")

    raise BadRequest(f"{CONTENT_VERSION_HEADER} header or baseVersion is required")
