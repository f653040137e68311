import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from flask import current_app
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from apihub.extensions import db
from apihub.models.design import ApiDesign
from apihub.models.design_command import ApiDesignCommand
from apihub.models.design_content import ApiDesignContent
from apihub.domain.errors import StorageFailure, VersionConflict
from apihub.domain.invariants.command import parse_command
from apihub.domain.replay import VersionedCommand, materialize
from apihub.utils.formats import FormatType, json_to_yaml
from apihub.utils.transaction import transactional
from apihub.utils.versioning import commands_between, latest_snapshot
from apihub.application.collaboration.permissions import (
    require_owner,
    require_read,
    require_write,
)


@dataclass
class ContentState:
    """A consistent view of a design: base snapshot plus the commands up to the head."""

    design_id: str
    document: str
    base_version: int
    version: int
    commands: List[ApiDesignCommand] = field(default_factory=list)

    def materialize(self, extra: Optional[List[VersionedCommand]] = None) -> str:
        return materialize(
            self.document,
            [*self.commands, *(extra or [])],
            base_version=self.base_version,
            indent=current_app.config["CONTENT_JSON_INDENT"],
        )


def _load_state(design: ApiDesign, *, upto: int) -> ContentState:
    snapshot = latest_snapshot(design.id, at_or_before=upto)
    if snapshot is None:
        raise StorageFailure(f"No base document stored for design {design.id}")

    # Only commands at or below the head read above: a gap-free prefix
    commands = commands_between(design.id, after=snapshot.version, upto=upto)
    return ContentState(
        design_id=design.id,
        document=snapshot.document,
        base_version=snapshot.version,
        version=upto,
        commands=commands,
    )


def get_latest_snapshot(*, design_id: str, user: str) -> ContentState:
    design = require_read(design_id, user)
    return _load_state(design, upto=design.head_version)


def get_content(
    *,
    design_id: str,
    user: str,
    format: FormatType = FormatType.JSON,
) -> Tuple[str, int]:
    """Materialized document text and the version it reflects."""
    state = get_latest_snapshot(design_id=design_id, user=user)
    content = state.materialize()
    if FormatType(format) is FormatType.YAML:
        content = json_to_yaml(content)
    return content, state.version


def append_command(
    *,
    design_id: str,
    expected_base_version: int,
    payload: Any,
    author: str,
) -> int:
    """
    Append one command to the design's log and return its version.

    Responsibilities:
    - write permission gate (masked as NotFound)
    - reject malformed or unapplicable commands before anything is stored
    - compare-and-swap the head so exactly one racing writer wins
    """
    design = require_write(design_id, author)
    if design.head_version != expected_base_version:
        raise VersionConflict(expected_base_version, design.head_version)

    command = parse_command(payload)
    new_version = expected_base_version + 1

    # Raises CommandApplicationError if it does not apply on top of the base
    state = _load_state(design, upto=expected_base_version)
    state.materialize([VersionedCommand(new_version, command)])

    with transactional():
        result = db.session.execute(
            update(ApiDesign)
            .where(
                ApiDesign.id == design_id,
                ApiDesign.head_version == expected_base_version,
            )
            .values(head_version=new_version)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = (
                db.session.query(ApiDesign.head_version)
                .filter(ApiDesign.id == design_id)
                .scalar()
            )
            raise VersionConflict(expected_base_version, current)

        entry = ApiDesignCommand()
        entry.design_id = design_id
        entry.version = new_version
        entry.command = json.dumps(command, sort_keys=True, separators=(",", ":"))
        entry.created_by = author
        db.session.add(entry)

        try:
            db.session.flush()
        except IntegrityError as exc:
            raise VersionConflict(expected_base_version, new_version) from exc

    current_app.logger.debug("Appended version %s to design %s", new_version, design_id)
    return new_version


def list_activity(
    *,
    design_id: str,
    user: str,
    start: int = 0,
    end: int = 20,
) -> List[ApiDesignCommand]:
    """Command log entries, newest first, rows [start, end)."""
    require_write(design_id, user)
    return (
        ApiDesignCommand.query
        .filter_by(design_id=design_id)
        .order_by(ApiDesignCommand.version.desc())
        .offset(start)
        .limit(max(end - start, 0))
        .all()
    )


@dataclass(frozen=True)
class Contributor:
    name: str
    edits: int


def list_contributors(*, design_id: str, user: str) -> List[Contributor]:
    """The creator plus everyone who appended commands, with their edit counts."""
    require_read(design_id, user)

    edits: Counter = Counter()
    creator = (
        db.session.query(ApiDesignContent.created_by)
        .filter_by(design_id=design_id, version=0)
        .scalar()
    )
    if creator:
        edits[creator] += 1

    rows = (
        db.session.query(ApiDesignCommand.created_by, func.count(ApiDesignCommand.id))
        .filter(ApiDesignCommand.design_id == design_id)
        .group_by(ApiDesignCommand.created_by)
        .all()
    )
    for name, count in rows:
        edits[name] += count

    return [
        Contributor(name=name, edits=count)
        for name, count in sorted(edits.items(), key=lambda item: (-item[1], item[0]))
    ]


def rebase_content(*, design_id: str, user: str) -> ApiDesignContent:
    """
    Store the materialized head as a new base snapshot.

    The command log is kept; later reads simply start from the newer base.
    """
    design = require_owner(design_id, user)
    state = _load_state(design, upto=design.head_version)
    if not state.commands:
        return latest_snapshot(design_id, at_or_before=state.version)

    snapshot = ApiDesignContent()
    snapshot.design_id = design_id
    snapshot.version = state.version
    snapshot.document = state.materialize()
    snapshot.created_by = user

    try:
        with transactional():
            db.session.add(snapshot)
    except StorageFailure as exc:
        if not isinstance(exc.__cause__, IntegrityError):
            raise
        # Another request re-based at the same head first
        return latest_snapshot(design_id, at_or_before=state.version)

    current_app.logger.debug("Re-based design %s at version %s", design_id, state.version)
    return snapshot
