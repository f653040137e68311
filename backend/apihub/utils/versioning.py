from typing import List, Optional

from apihub.models.design_command import ApiDesignCommand
from apihub.models.design_content import ApiDesignContent


def latest_snapshot(design_id: str, *, at_or_before: int) -> Optional[ApiDesignContent]:
    return (
        ApiDesignContent.query
        .filter(
            ApiDesignContent.design_id == design_id,
            ApiDesignContent.version <= at_or_before,
        )
        .order_by(ApiDesignContent.version.desc())
        .first()
    )


def commands_between(design_id: str, *, after: int, upto: int) -> List[ApiDesignCommand]:
    """Commands with after < version <= upto, oldest first."""
    return (
        ApiDesignCommand.query
        .filter(
            ApiDesignCommand.design_id == design_id,
            ApiDesignCommand.version > after,
            ApiDesignCommand.version <= upto,
        )
        .order_by(ApiDesignCommand.version.asc())
        .all()
    )
