import json
from typing import Any, Dict

from apihub.models.design_command import ApiDesignCommand
from apihub.models.publication import ApiPublication
from .design import iso_or_none


def normalize_command(command: ApiDesignCommand) -> Dict[str, Any]:
    return {
        "designId": command.design_id,
        "version": command.version,
        "type": "command",
        "by": command.created_by,
        "on": iso_or_none(command.created_at),
        "data": json.loads(command.command),
    }


def normalize_publication(record: ApiPublication) -> Dict[str, Any]:
    return {
        "designId": record.design_id,
        "by": record.created_by,
        "on": iso_or_none(record.created_at),
        "target": record.target or {},
        "format": record.format,
        "commitMessage": record.commit_message,
    }
