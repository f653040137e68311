from typing import Any, Dict

from apihub.models.design import ApiDesign


def iso_or_none(value):
    return value.isoformat() if value is not None else None


def normalize_design(design: ApiDesign) -> Dict[str, Any]:
    return {
        "id": design.id,
        "name": design.name,
        "description": design.description,
        "createdBy": design.created_by,
        "createdOn": iso_or_none(design.created_on),
        "tags": list(design.tags or []),
    }


def normalize_contributor(contributor) -> Dict[str, Any]:
    return {"name": contributor.name, "edits": contributor.edits}
