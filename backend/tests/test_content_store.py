import json
from types import SimpleNamespace

import pytest

from apihub.extensions import db
from apihub.models.design_command import ApiDesignCommand
from apihub.application.content import content_store
from apihub.application.content.content_store import (
    append_command,
    get_content,
    get_latest_snapshot,
    list_activity,
    list_contributors,
    rebase_content,
)
from apihub.application.designs.delete_design import delete_design
from apihub.domain.errors import (
    AccessDenied,
    CommandApplicationError,
    NotFound,
    VersionConflict,
)
from apihub.utils.formats import FormatType


def set_title(title):
    return {"type": "set", "path": "/info/title", "value": title}


def head_of(design_id, user="alice"):
    return get_latest_snapshot(design_id=design_id, user=user).version


def test_new_design_starts_at_version_zero(design):
    state = get_latest_snapshot(design_id=design.id, user="alice")

    assert state.version == 0
    assert state.base_version == 0
    assert state.commands == []
    assert json.loads(state.document)["info"]["title"] == "Pet Store"


def test_versions_increase_by_one_without_gaps(design):
    versions = [
        append_command(design_id=design.id, expected_base_version=n, payload=set_title(f"v{n}"), author="alice")
        for n in range(5)
    ]

    state = get_latest_snapshot(design_id=design.id, user="alice")
    assert versions == [1, 2, 3, 4, 5]
    assert state.version == 5
    assert [c.version for c in state.commands] == [1, 2, 3, 4, 5]


def test_second_append_on_same_base_conflicts(design):
    first = append_command(design_id=design.id, expected_base_version=0, payload=set_title("A"), author="alice")

    with pytest.raises(VersionConflict) as excinfo:
        append_command(design_id=design.id, expected_base_version=0, payload=set_title("B"), author="alice")

    assert first == 1
    assert excinfo.value.current == 1
    assert head_of(design.id) == 1
    content, _ = get_content(design_id=design.id, user="alice")
    assert json.loads(content)["info"]["title"] == "A"


def test_racing_writer_loses_at_compare_and_swap(design, monkeypatch):
    append_command(design_id=design.id, expected_base_version=0, payload=set_title("winner"), author="alice")

    # The loser read the design before the winner committed
    stale = SimpleNamespace(id=design.id, head_version=0)
    monkeypatch.setattr(content_store, "require_write", lambda design_id, user: stale)

    with pytest.raises(VersionConflict) as excinfo:
        append_command(design_id=design.id, expected_base_version=0, payload=set_title("loser"), author="alice")

    assert excinfo.value.expected == 0
    assert excinfo.value.current == 1
    assert ApiDesignCommand.query.filter_by(design_id=design.id).count() == 1


def test_retry_against_new_head_succeeds(design):
    append_command(design_id=design.id, expected_base_version=0, payload=set_title("A"), author="alice")
    with pytest.raises(VersionConflict):
        append_command(design_id=design.id, expected_base_version=0, payload=set_title("B"), author="alice")

    assert append_command(design_id=design.id, expected_base_version=1, payload=set_title("B"), author="alice") == 2


def test_malformed_command_is_not_stored(design):
    with pytest.raises(CommandApplicationError):
        append_command(design_id=design.id, expected_base_version=0, payload={"type": "set"}, author="alice")

    with pytest.raises(CommandApplicationError):
        append_command(
            design_id=design.id,
            expected_base_version=0,
            payload={"type": "delete", "path": "/nope"},
            author="alice",
        )

    assert head_of(design.id) == 0
    assert ApiDesignCommand.query.count() == 0


def test_strangers_cannot_see_or_edit(design):
    with pytest.raises(NotFound):
        get_latest_snapshot(design_id=design.id, user="mallory")

    with pytest.raises(NotFound):
        append_command(design_id=design.id, expected_base_version=0, payload=set_title("x"), author="mallory")


def test_missing_and_deleted_designs_are_not_found(design):
    with pytest.raises(NotFound):
        get_latest_snapshot(design_id="no-such-design", user="alice")

    delete_design(design_id=design.id, user="alice")

    with pytest.raises(NotFound):
        get_latest_snapshot(design_id=design.id, user="alice")
    with pytest.raises(NotFound):
        append_command(design_id=design.id, expected_base_version=0, payload=set_title("x"), author="alice")


def test_collaborators_can_append(design, add_collaborator):
    add_collaborator(design.id, "bob")

    assert append_command(design_id=design.id, expected_base_version=0, payload=set_title("Bob's"), author="bob") == 1


def test_reads_ignore_commands_past_the_head(design):
    append_command(design_id=design.id, expected_base_version=0, payload=set_title("A"), author="alice")

    # A row written past the head must stay invisible until the head moves
    orphan = ApiDesignCommand()
    orphan.design_id = design.id
    orphan.version = 2
    orphan.command = json.dumps(set_title("not yet"))
    orphan.created_by = "alice"
    db.session.add(orphan)
    db.session.commit()

    state = get_latest_snapshot(design_id=design.id, user="alice")
    assert state.version == 1
    assert [c.version for c in state.commands] == [1]
    assert json.loads(state.materialize())["info"]["title"] == "A"


def test_logged_commands_are_immutable(design):
    append_command(design_id=design.id, expected_base_version=0, payload=set_title("A"), author="alice")
    entry = ApiDesignCommand.query.filter_by(design_id=design.id).one()

    entry.command = json.dumps(set_title("rewritten"))
    with pytest.raises(RuntimeError):
        db.session.commit()
    db.session.rollback()

    db.session.delete(entry)
    with pytest.raises(RuntimeError):
        db.session.commit()
    db.session.rollback()


def test_content_as_yaml(design):
    content, version = get_content(design_id=design.id, user="alice", format=FormatType.YAML)

    assert version == 0
    assert "title: Pet Store" in content


def test_activity_is_newest_first(design, add_collaborator):
    add_collaborator(design.id, "bob")
    for n in range(3):
        append_command(design_id=design.id, expected_base_version=n, payload=set_title(f"v{n}"), author="bob")

    assert [c.version for c in list_activity(design_id=design.id, user="alice")] == [3, 2, 1]
    assert [c.version for c in list_activity(design_id=design.id, user="alice", start=1, end=2)] == [2]

    with pytest.raises(NotFound):
        list_activity(design_id=design.id, user="mallory")


def test_contributors_count_edits(design, add_collaborator):
    add_collaborator(design.id, "bob")
    append_command(design_id=design.id, expected_base_version=0, payload=set_title("a"), author="bob")
    append_command(design_id=design.id, expected_base_version=1, payload=set_title("b"), author="bob")

    contributors = list_contributors(design_id=design.id, user="bob")

    assert [(c.name, c.edits) for c in contributors] == [("bob", 2), ("alice", 1)]


def test_rebase_moves_the_base_forward(design):
    for n in range(3):
        append_command(design_id=design.id, expected_base_version=n, payload=set_title(f"v{n}"), author="alice")
    before, _ = get_content(design_id=design.id, user="alice")

    snapshot = rebase_content(design_id=design.id, user="alice")

    state = get_latest_snapshot(design_id=design.id, user="alice")
    assert snapshot.version == 3
    assert state.base_version == 3
    assert state.commands == []
    assert get_content(design_id=design.id, user="alice")[0] == before

    assert append_command(design_id=design.id, expected_base_version=3, payload=set_title("next"), author="alice") == 4
    assert json.loads(get_content(design_id=design.id, user="alice")[0])["info"]["title"] == "next"


def test_rebase_is_owner_only(design, add_collaborator):
    add_collaborator(design.id, "bob")

    with pytest.raises(AccessDenied):
        rebase_content(design_id=design.id, user="bob")
