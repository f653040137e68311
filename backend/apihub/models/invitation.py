from apihub.extensions import db
from apihub.domain.lifecycle.invitation import InvitationStatus
from apihub.domain.roles import Role
from .base import BaseModel


class Invitation(BaseModel):
    __tablename__ = "invitations"

    design_id = db.Column(db.String(36), db.ForeignKey("api_designs.id"), nullable=False, index=True)
    design_name = db.Column(db.String(255), nullable=True)

    created_by = db.Column(db.String(255), nullable=False)
    created_by_name = db.Column(db.String(255), nullable=True)

    role = db.Column(db.String(20), nullable=False, default=Role.COLLABORATOR.value)
    status = db.Column(db.String(20), nullable=False, default=InvitationStatus.PENDING.value, index=True)

    modified_by = db.Column(db.String(255), nullable=True)
    modified_on = db.Column(db.DateTime(timezone=True), nullable=True)

    @property
    def invite_id(self):
        return self.id
