from typing import List, Optional

from flask import current_app
from sqlalchemy import update

from apihub.extensions import db
from apihub.models.base import utc_now
from apihub.models.design import ApiDesign
from apihub.models.invitation import Invitation
from apihub.models.permission import Permission
from apihub.domain.errors import NotFound
from apihub.domain.invariants.permission import assert_invitable_role
from apihub.domain.lifecycle.invitation import InvitationStatus, assert_invitation_transition
from apihub.domain.roles import Role
from apihub.utils.transaction import transactional
from .permissions import find_permission, require_owner, require_write


def create_invitation(
    *,
    design_id: str,
    inviter: str,
    inviter_name: Optional[str] = None,
    role: Role = Role.COLLABORATOR,
) -> Invitation:
    """
    Invite someone to collaborate on a design.

    Responsibilities:
    - owner-only gate (AccessDenied)
    - only the collaborator role may be offered
    - new invitation starts as pending
    """
    design = require_owner(design_id, inviter)
    assert_invitable_role(role)

    invite = Invitation()
    invite.design_id = design.id
    invite.design_name = design.name
    invite.created_by = inviter
    invite.created_by_name = inviter_name or inviter
    invite.role = Role(role).value
    invite.status = InvitationStatus.PENDING.value

    with transactional():
        db.session.add(invite)

    current_app.logger.debug("Created invitation %s for design %s", invite.id, design_id)
    return invite


def get_invitation(*, design_id: str, invite_id: str) -> Invitation:
    """Invitations of deleted designs are reported as missing."""
    invite = (
        Invitation.query
        .join(ApiDesign, ApiDesign.id == Invitation.design_id)
        .filter(
            Invitation.id == invite_id,
            Invitation.design_id == design_id,
            ApiDesign.deleted_at.is_(None),  # type: ignore
        )
        .first()
    )
    if invite is None:
        raise NotFound("Invitation not found")
    return invite


def list_invitations(*, design_id: str, user: str) -> List[Invitation]:
    require_write(design_id, user)
    return (
        Invitation.query
        .filter_by(design_id=design_id)
        .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        .all()
    )


def _transition(invite_id: str, *, to_status: InvitationStatus, user: str) -> bool:
    """
    Compare-and-swap the status away from pending.

    Returns False when another request already settled the invitation.
    """
    assert_invitation_transition(from_status=InvitationStatus.PENDING, to_status=to_status)
    result = db.session.execute(
        update(Invitation)
        .where(
            Invitation.id == invite_id,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        .values(status=to_status.value, modified_by=user, modified_on=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def accept_invitation(*, design_id: str, invite_id: str, user: str) -> Permission:
    """
    Accept a pending invitation and grant its role.

    A user who already holds any permission on the design cannot accept:
    that case is reported as NotFound, same as a missing or settled invite.
    """
    invite = get_invitation(design_id=design_id, invite_id=invite_id)
    if find_permission(user, design_id) is not None:
        raise NotFound("Invitation not found")

    with transactional():
        if not _transition(invite.id, to_status=InvitationStatus.ACCEPTED, user=user):
            raise NotFound("Invitation not found")

        permission = Permission()
        permission.design_id = design_id
        permission.user_id = user
        permission.role = invite.role
        db.session.add(permission)

    db.session.refresh(invite)
    current_app.logger.debug("User %s accepted invitation %s", user, invite_id)
    return permission


def reject_invitation(*, design_id: str, invite_id: str, user: str) -> Invitation:
    invite = get_invitation(design_id=design_id, invite_id=invite_id)

    with transactional():
        if not _transition(invite.id, to_status=InvitationStatus.REJECTED, user=user):
            raise NotFound("Invitation not found")

    db.session.refresh(invite)
    current_app.logger.debug("User %s rejected invitation %s", user, invite_id)
    return invite
