from typing import List, Optional

from flask import current_app

from apihub.extensions import db
from apihub.models.design import ApiDesign
from apihub.models.design_content import ApiDesignContent
from apihub.models.permission import Permission
from apihub.domain.documents import new_api_document
from apihub.domain.roles import Role
from apihub.utils.transaction import transactional


def store_design(
    *,
    user: str,
    name: str,
    description: Optional[str],
    tags: Optional[List[str]],
    document: str,
) -> ApiDesign:
    """
    Persist a design with its version-0 snapshot and the owner permission,
    all in one transaction.
    """
    design = ApiDesign()
    design.name = name
    design.description = description
    design.created_by = user
    design.tags = list(tags or [])
    design.head_version = 0

    with transactional():
        db.session.add(design)
        db.session.flush()  # ensures design.id is available

        snapshot = ApiDesignContent()
        snapshot.design_id = design.id
        snapshot.version = 0
        snapshot.document = document
        snapshot.created_by = user
        db.session.add(snapshot)

        owner = Permission()
        owner.design_id = design.id
        owner.user_id = user
        owner.role = Role.OWNER.value
        db.session.add(owner)

    return design


def create_design(
    *,
    user: str,
    name: str,
    description: Optional[str] = None,
    spec_version: Optional[str] = None,
) -> ApiDesign:
    """
    Create a new, empty API design owned by ``user``.

    No spec version means a Swagger 2.0 document.
    """
    if not name or not name.strip():
        raise ValueError("A design name is required")

    current_app.logger.debug("Creating an API design: %s", name)
    document = new_api_document(
        name,
        description,
        spec_version,
        indent=current_app.config["CONTENT_JSON_INDENT"],
    )
    return store_design(
        user=user,
        name=name,
        description=description,
        tags=[],
        document=document,
    )
