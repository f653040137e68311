from typing import List, Optional

from flask import current_app

from apihub.extensions import db
from apihub.models.design import ApiDesign
from apihub.models.permission import Permission
from apihub.domain.errors import AccessDenied, NotFound
from apihub.domain.invariants.permission import assert_revocable, assert_role_change
from apihub.domain.roles import Capability, Role
from apihub.utils.transaction import transactional


def _live_design(design_id: str) -> Optional[ApiDesign]:
    return ApiDesign.query.filter_by(id=design_id, deleted_at=None).first()


def find_permission(user: str, design_id: str) -> Optional[Permission]:
    return (
        Permission.query
        .join(ApiDesign, ApiDesign.id == Permission.design_id)
        .filter(
            Permission.design_id == design_id,
            Permission.user_id == user,
            ApiDesign.deleted_at.is_(None),  # type: ignore
        )
        .first()
    )


def _allows(user: str, design_id: str, capability: Capability) -> bool:
    permission = find_permission(user, design_id)
    return permission is not None and permission.role_enum.allows(capability)


def has_read_permission(user: str, design_id: str) -> bool:
    return _allows(user, design_id, Capability.READ)


def has_write_permission(user: str, design_id: str) -> bool:
    return _allows(user, design_id, Capability.WRITE)


def has_owner_permission(user: str, design_id: str) -> bool:
    return _allows(user, design_id, Capability.ADMINISTER)


def require_read(design_id: str, user: str) -> ApiDesign:
    """Return the design, or NotFound when it is missing or hidden from ``user``."""
    design = _live_design(design_id)
    if design is None or not has_read_permission(user, design_id):
        raise NotFound("API design not found")
    return design


def require_write(design_id: str, user: str) -> ApiDesign:
    design = _live_design(design_id)
    if design is None or not has_write_permission(user, design_id):
        raise NotFound("API design not found")
    return design


def require_owner(design_id: str, user: str) -> ApiDesign:
    """
    Owner-only gate.

    Checked before existence, so every non-owner gets AccessDenied whether or
    not the design exists.
    """
    if not has_owner_permission(user, design_id):
        raise AccessDenied("Only the owner of an API design may do this")
    design = _live_design(design_id)
    if design is None:
        raise NotFound("API design not found")
    return design


def list_permissions(*, design_id: str, user: str) -> List[Permission]:
    require_write(design_id, user)
    return (
        Permission.query
        .filter_by(design_id=design_id)
        .order_by(Permission.created_at.asc(), Permission.user_id.asc())
        .all()
    )


def update_permission(
    *,
    design_id: str,
    owner: str,
    user_id: str,
    new_role: Role,
) -> Permission:
    """Change a collaborator's role. The owner row is never touched."""
    require_owner(design_id, owner)
    new_role = Role(new_role)

    permission = Permission.query.filter_by(design_id=design_id, user_id=user_id).first()
    if permission is None:
        raise NotFound("Collaborator not found")

    with transactional():
        assert_role_change(current=permission.role_enum, new=new_role)
        permission.role = new_role.value

    current_app.logger.debug("Updated %s on %s to %s", user_id, design_id, new_role.value)
    return permission


def delete_permission(*, design_id: str, owner: str, user_id: str) -> None:
    require_owner(design_id, owner)

    permission = Permission.query.filter_by(design_id=design_id, user_id=user_id).first()
    if permission is None:
        raise NotFound("Collaborator not found")

    with transactional():
        assert_revocable(permission.role_enum)
        db.session.delete(permission)

    current_app.logger.debug("Revoked %s on %s", user_id, design_id)
