# apihub/api/v1/collaboration.py
from flask import g, jsonify, request

from apihub.utils.decorators import identity_required
from apihub.domain.roles import Role
from apihub.application.collaboration.invitations import (
    accept_invitation,
    create_invitation,
    get_invitation,
    list_invitations,
    reject_invitation,
)
from apihub.application.collaboration.permissions import (
    delete_permission,
    list_permissions,
    update_permission,
)
from apihub.normalizers.invitation import normalize_collaborator, normalize_invitation
from . import v1_bp


# ------------------------
# Invitations
# ------------------------

@v1_bp.route("/designs/<design_id>/invitations", methods=["POST"])
@identity_required
def create_invitation_route(design_id):
    data = request.get_json(silent=True) or {}

    invite = create_invitation(
        design_id=design_id,
        inviter=g.identity.login,
        inviter_name=g.identity.name,
        role=Role(data.get("role", Role.COLLABORATOR.value)),
    )
    return jsonify(normalize_invitation(invite)), 201


@v1_bp.route("/designs/<design_id>/invitations", methods=["GET"])
@identity_required
def list_invitations_route(design_id):
    invites = list_invitations(design_id=design_id, user=g.identity.login)
    return jsonify([normalize_invitation(i) for i in invites]), 200


@v1_bp.route("/designs/<design_id>/invitations/<invite_id>", methods=["GET"])
@identity_required
def get_invitation_route(design_id, invite_id):
    invite = get_invitation(design_id=design_id, invite_id=invite_id)
    return jsonify(normalize_invitation(invite)), 200


@v1_bp.route("/designs/<design_id>/invitations/<invite_id>", methods=["PUT"])
@identity_required
def accept_invitation_route(design_id, invite_id):
    permission = accept_invitation(
        design_id=design_id,
        invite_id=invite_id,
        user=g.identity.login,
    )
    return jsonify(normalize_collaborator(permission)), 200


@v1_bp.route("/designs/<design_id>/invitations/<invite_id>", methods=["DELETE"])
@identity_required
def reject_invitation_route(design_id, invite_id):
    reject_invitation(design_id=design_id, invite_id=invite_id, user=g.identity.login)
    return "", 204


# ------------------------
# Collaborators
# ------------------------

@v1_bp.route("/designs/<design_id>/collaborators", methods=["GET"])
@identity_required
def list_collaborators_route(design_id):
    permissions = list_permissions(design_id=design_id, user=g.identity.login)
    return jsonify([normalize_collaborator(p) for p in permissions]), 200


@v1_bp.route("/designs/<design_id>/collaborators/<user_id>", methods=["PUT"])
@identity_required
def update_collaborator_route(design_id, user_id):
    data = request.get_json(silent=True) or {}
    if not data.get("newRole"):
        return jsonify({"error": "invalid_request", "message": "newRole is required"}), 400

    permission = update_permission(
        design_id=design_id,
        owner=g.identity.login,
        user_id=user_id,
        new_role=Role(data["newRole"]),
    )
    return jsonify(normalize_collaborator(permission)), 200


@v1_bp.route("/designs/<design_id>/collaborators/<user_id>", methods=["DELETE"])
@identity_required
def delete_collaborator_route(design_id, user_id):
    delete_permission(design_id=design_id, owner=g.identity.login, user_id=user_id)
    return "", 204
