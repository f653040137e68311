# apihub/normalizers/invitation.py
from __future__ import annotations

from typing import Any, Dict

from apihub.models.invitation import Invitation
from apihub.models.permission import Permission
from .design import iso_or_none


def normalize_invitation(invite: Invitation) -> Dict[str, Any]:
    """
    Normalizes an Invitation into API-safe JSON.

    Notes:
    - ``subject`` is the design name captured when the invite was created
    - modifiedBy/modifiedOn stay null while the invite is pending
    """
    return {
        "inviteId": invite.id,
        "designId": invite.design_id,
        "subject": invite.design_name,
        "createdBy": invite.created_by,
        "createdByName": invite.created_by_name,
        "createdOn": iso_or_none(invite.created_at),
        "role": invite.role,
        "status": invite.status,
        "modifiedBy": invite.modified_by,
        "modifiedOn": iso_or_none(invite.modified_on),
    }


def normalize_collaborator(permission: Permission) -> Dict[str, Any]:
    return {
        "designId": permission.design_id,
        "userId": permission.user_id,
        "role": permission.role,
    }
