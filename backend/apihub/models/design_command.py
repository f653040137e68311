from apihub.extensions import db
from .base import BaseModel
from .immutable import make_append_only


class ApiDesignCommand(BaseModel):
    __tablename__ = "api_design_commands"

    design_id = db.Column(db.String(36), db.ForeignKey("api_designs.id"), nullable=False)
    version = db.Column(db.Integer, nullable=False)
    command = db.Column(db.Text, nullable=False)
    created_by = db.Column(db.String(255), nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("design_id", "version", name="uq_design_command_version"),
        db.Index("idx_design_command_design", "design_id"),
    )


make_append_only(ApiDesignCommand, "Design commands")
