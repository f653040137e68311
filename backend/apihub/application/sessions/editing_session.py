import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from flask import current_app

from apihub.models.base import utc_now
from apihub.application.content.content_store import get_latest_snapshot

EXTENSION_KEY = "apihub.editing_sessions"


@dataclass(frozen=True)
class EditingSession:
    session_id: str
    design_id: str
    user: str
    secret: str
    base_version: int
    created_at: datetime


@dataclass(frozen=True)
class EditingHandshake:
    session: EditingSession
    version: int
    content: str


class EditingSessionManager:
    """
    Issues editing-session handles.

    Sessions are not stored anywhere: concurrent edits are arbitrated by the
    content store's version check, so issuing needs no registry or lock.
    """

    def __init__(
        self,
        signing_key: str,
        secret_length: int = 64,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not signing_key:
            raise ValueError("An editing session signing key is required")
        self._signing_key = signing_key.encode("utf-8")
        self._secret_length = secret_length
        self._clock = clock

    def truncate_secret(self, token: str) -> str:
        # Never the whole token: at most secret_length chars, always one short
        return token[: max(min(self._secret_length, len(token) - 1), 0)]

    def create_session(
        self,
        design_id: str,
        user: str,
        secret: str,
        base_version: int,
    ) -> EditingSession:
        issued_at = self._clock()
        nonce = secrets.token_hex(16)
        message = "\n".join([design_id, user, issued_at.isoformat(), nonce]).encode("utf-8")
        session_id = hmac.new(self._signing_key, message, hashlib.sha256).hexdigest()

        return EditingSession(
            session_id=session_id,
            design_id=design_id,
            user=user,
            secret=self.truncate_secret(secret),
            base_version=base_version,
            created_at=issued_at,
        )


def session_manager() -> EditingSessionManager:
    return current_app.extensions[EXTENSION_KEY]


def open_editing_session(*, design_id: str, user: str, token: str) -> EditingHandshake:
    """
    Editing handshake: bind the caller to the version they are about to see.

    The client sends ``version`` back as its expected base version on the
    next append.
    """
    state = get_latest_snapshot(design_id=design_id, user=user)
    content = state.materialize()
    session = session_manager().create_session(design_id, user, token, state.version)

    current_app.logger.debug(
        "Created editing session %s for %s on design %s at version %s",
        session.session_id, user, design_id, state.version,
    )
    return EditingHandshake(session=session, version=state.version, content=content)
