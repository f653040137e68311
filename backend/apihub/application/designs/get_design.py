from typing import List

from apihub.models.design import ApiDesign
from apihub.models.permission import Permission
from apihub.application.collaboration.permissions import require_read


def get_design(*, design_id: str, user: str) -> ApiDesign:
    return require_read(design_id, user)


def list_designs(*, user: str) -> List[ApiDesign]:
    """Every live design the user owns or collaborates on."""
    return (
        ApiDesign.query
        .join(Permission, Permission.design_id == ApiDesign.id)
        .filter(
            Permission.user_id == user,
            ApiDesign.deleted_at.is_(None),  # type: ignore
        )
        .order_by(ApiDesign.created_at.desc(), ApiDesign.id.desc())
        .all()
    )
