from flask import current_app

from apihub.application.collaboration.permissions import require_owner
from apihub.utils.transaction import transactional


def delete_design(*, design_id: str, user: str) -> None:
    """
    Soft-delete a design. Owner only.

    The command log, snapshots and publication records are kept.
    """
    design = require_owner(design_id, user)

    with transactional():
        design.soft_delete()

    current_app.logger.debug("Deleted API design %s", design_id)
