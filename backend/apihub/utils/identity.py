from dataclasses import dataclass
from typing import Optional

from flask import request
from flask_jwt_extended import get_jwt, get_jwt_identity


@dataclass(frozen=True)
class Identity:
    """The already-authenticated caller, as carried by the JWT."""

    login: str
    name: Optional[str]
    token: str


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_identity() -> Identity:
    """Must be called inside a @jwt_required() view."""
    claims = get_jwt()
    login = get_jwt_identity()
    return Identity(
        login=login,
        name=claims.get("name") or login,
        token=bearer_token(),
    )
