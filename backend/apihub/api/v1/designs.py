# apihub/api/v1/designs.py
from flask import Response, current_app, g, jsonify, request

from apihub.utils.decorators import identity_required
from apihub.utils.formats import FormatType
from apihub.utils.optimistic_lock import CONTENT_VERSION_HEADER, expected_base_version
from apihub.utils.pagination import parse_range
from apihub.connectors.base import PublicationTarget
from apihub.application.designs.create_design import create_design
from apihub.application.designs.delete_design import delete_design
from apihub.application.designs.get_design import get_design, list_designs
from apihub.application.designs.import_design import import_design
from apihub.application.content.content_store import (
    append_command,
    get_content,
    list_activity,
    list_contributors,
    rebase_content,
)
from apihub.application.sessions.editing_session import open_editing_session
from apihub.application.publication.publish_design import (
    PublishRequest,
    list_publications,
    publish_design,
)
from apihub.normalizers.design import normalize_contributor, normalize_design
from apihub.normalizers.activity import normalize_command, normalize_publication
from apihub.normalizers.pagination import normalize_pagination
from . import v1_bp

EDITING_SESSION_HEADER = "X-Editing-Session-Id"

CONTENT_TYPES = {
    FormatType.JSON: "application/json; charset=utf-8",
    FormatType.YAML: "application/x-yaml; charset=utf-8",
}


def _document_response(content: str, version: int, fmt: FormatType = FormatType.JSON) -> Response:
    response = Response(content, status=200, content_type=CONTENT_TYPES[fmt])
    response.headers[CONTENT_VERSION_HEADER] = str(version)
    return response


def _requested_range():
    return parse_range(
        request.args.get("start"),
        request.args.get("end"),
        page_size=current_app.config["ACTIVITY_PAGE_SIZE"],
    )


# ------------------------
# Designs
# ------------------------

@v1_bp.route("/designs", methods=["GET"])
@identity_required
def list_designs_route():
    designs = list_designs(user=g.identity.login)
    return jsonify([normalize_design(d) for d in designs]), 200


@v1_bp.route("/designs", methods=["POST"])
@identity_required
def create_design_route():
    data = request.get_json(silent=True) or {}

    design = create_design(
        user=g.identity.login,
        name=data.get("name"),
        description=data.get("description"),
        spec_version=data.get("specVersion"),
    )
    return jsonify(normalize_design(design)), 201


@v1_bp.route("/designs", methods=["PUT"])
@identity_required
def import_design_route():
    data = request.get_json(silent=True) or {}

    design = import_design(
        user=g.identity.login,
        data=data.get("data"),
        url=data.get("url"),
    )
    return jsonify(normalize_design(design)), 200


@v1_bp.route("/designs/<design_id>", methods=["GET"])
@identity_required
def get_design_route(design_id):
    design = get_design(design_id=design_id, user=g.identity.login)
    return jsonify(normalize_design(design)), 200


@v1_bp.route("/designs/<design_id>", methods=["PUT"])
@identity_required
def edit_design_route(design_id):
    """Editing handshake: document body plus session id and content version headers."""
    handshake = open_editing_session(
        design_id=design_id,
        user=g.identity.login,
        token=g.identity.token,
    )
    response = _document_response(handshake.content, handshake.version)
    response.headers[EDITING_SESSION_HEADER] = handshake.session.session_id
    return response


@v1_bp.route("/designs/<design_id>", methods=["DELETE"])
@identity_required
def delete_design_route(design_id):
    delete_design(design_id=design_id, user=g.identity.login)
    return "", 204


# ------------------------
# Content
# ------------------------

@v1_bp.route("/designs/<design_id>/content", methods=["GET"])
@identity_required
def get_content_route(design_id):
    fmt = FormatType(request.args.get("format", FormatType.JSON.value).lower())
    content, version = get_content(design_id=design_id, user=g.identity.login, format=fmt)
    return _document_response(content, version, fmt)


@v1_bp.route("/designs/<design_id>/commands", methods=["POST"])
@identity_required
def append_command_route(design_id):
    data = request.get_json(silent=True) or {}
    if "command" not in data:
        return jsonify({"error": "invalid_request", "message": "command is required"}), 400

    version = append_command(
        design_id=design_id,
        expected_base_version=expected_base_version(data),
        payload=data["command"],
        author=g.identity.login,
    )
    response = jsonify({"version": version})
    response.headers[CONTENT_VERSION_HEADER] = str(version)
    return response, 201


@v1_bp.route("/designs/<design_id>/rebase", methods=["POST"])
@identity_required
def rebase_content_route(design_id):
    snapshot = rebase_content(design_id=design_id, user=g.identity.login)
    return jsonify({"version": snapshot.version}), 200


@v1_bp.route("/designs/<design_id>/contributors", methods=["GET"])
@identity_required
def list_contributors_route(design_id):
    contributors = list_contributors(design_id=design_id, user=g.identity.login)
    return jsonify([normalize_contributor(c) for c in contributors]), 200


@v1_bp.route("/designs/<design_id>/activity", methods=["GET"])
@identity_required
def list_activity_route(design_id):
    start, end = _requested_range()
    commands = list_activity(design_id=design_id, user=g.identity.login, start=start, end=end)
    return jsonify(normalize_pagination(commands, normalize_command, start=start, end=end)), 200


# ------------------------
# Publications
# ------------------------

@v1_bp.route("/designs/<design_id>/publications", methods=["GET"])
@identity_required
def list_publications_route(design_id):
    start, end = _requested_range()
    records = list_publications(design_id=design_id, user=g.identity.login, start=start, end=end)
    return jsonify(normalize_pagination(records, normalize_publication, start=start, end=end)), 200


@v1_bp.route("/designs/<design_id>/publications", methods=["POST"])
@identity_required
def publish_design_route(design_id):
    data = request.get_json(silent=True) or {}
    if not data.get("type"):
        return jsonify({"error": "invalid_request", "message": "type is required"}), 400

    publish_request = PublishRequest(
        target=PublicationTarget(
            type=data["type"],
            org=data.get("org"),
            repo=data.get("repo"),
            team=data.get("team"),
            group=data.get("group"),
            project=data.get("project"),
            branch=data.get("branch"),
            resource=data.get("resource"),
        ),
        format=FormatType(data.get("format", FormatType.JSON.value).lower()),
        commit_message=data.get("commitMessage"),
    )
    record = publish_design(design_id=design_id, user=g.identity.login, request=publish_request)

    # The publish itself succeeded even when the audit record could not be written
    return jsonify({"recorded": record is not None}), 201
