from dataclasses import dataclass
from typing import List, Optional

from flask import current_app

from apihub.extensions import db
from apihub.models.publication import ApiPublication
from apihub.connectors.base import PublicationTarget
from apihub.connectors.registry import connector_registry
from apihub.domain.errors import ErrorKind, HubError
from apihub.utils.formats import FormatType
from apihub.utils.transaction import transactional
from apihub.application.collaboration.permissions import require_write
from apihub.application.content.content_store import get_content


@dataclass(frozen=True)
class PublishRequest:
    target: PublicationTarget
    format: FormatType = FormatType.JSON
    commit_message: Optional[str] = None


def record_publication(
    *,
    design_id: str,
    user: str,
    request: PublishRequest,
) -> Optional[ApiPublication]:
    """
    Append the audit record for a publish that already happened.

    Never raises: the content is already out, so a failure here is logged and
    the caller still sees success.
    """
    try:
        record = ApiPublication()
        record.design_id = design_id
        record.created_by = user
        record.target = request.target.to_dict()
        record.format = FormatType(request.format).value
        record.commit_message = request.commit_message

        with transactional():
            db.session.add(record)
        return record
    except Exception:
        db.session.rollback()
        current_app.logger.error(
            "Failed to record API publication for design %s", design_id, exc_info=True
        )
        return None


def publish_design(*, design_id: str, user: str, request: PublishRequest) -> Optional[ApiPublication]:
    """
    Push the materialized design to an external target, then record it.

    Responsibilities:
    - write permission gate (masked as NotFound)
    - update the resource if it exists, create it otherwise
    - audit record (non-fatal)
    """
    require_write(design_id, user)
    connector = connector_registry().for_type(request.target.type)
    url = connector.resource_url(request.target)
    content, version = get_content(design_id=design_id, user=user, format=request.format)

    current_app.logger.debug("Publishing design %s (version %s) to %s", design_id, version, url)
    try:
        existing = connector.get_resource_content(url)
    except HubError as exc:
        if exc.kind is not ErrorKind.NOT_FOUND:
            raise
        connector.create_resource_content(url, request.commit_message or "", content)
    else:
        connector.update_resource_content(url, request.commit_message or "", existing, content)

    return record_publication(design_id=design_id, user=user, request=request)


def list_publications(
    *,
    design_id: str,
    user: str,
    start: int = 0,
    end: int = 20,
) -> List[ApiPublication]:
    require_write(design_id, user)
    return (
        ApiPublication.query
        .filter_by(design_id=design_id)
        .order_by(ApiPublication.created_at.desc(), ApiPublication.id.desc())
        .offset(start)
        .limit(max(end - start, 0))
        .all()
    )
