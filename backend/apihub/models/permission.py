from apihub.extensions import db
from apihub.domain.roles import Role
from .base import BaseModel


class Permission(BaseModel):
    __tablename__ = "permissions"

    design_id = db.Column(db.String(36), db.ForeignKey("api_designs.id"), nullable=False, index=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("design_id", "user_id", name="uq_permission_user_per_design"),
    )

    @property
    def role_enum(self) -> Role:
        return Role(self.role)
