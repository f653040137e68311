from functools import wraps
from flask import g
from flask_jwt_extended import jwt_required
from .identity import current_identity


def identity_required(fn):
    """
    Require a valid JWT and expose the caller as ``g.identity``.

    Authentication itself is upstream; the token is trusted as-is.
    """
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        g.identity = current_identity()
        return fn(*args, **kwargs)
    return wrapper
