from apihub.extensions import db
from .base import BaseModel
from .immutable import make_append_only


class ApiDesignContent(BaseModel):
    """Base document snapshot. Version 0 is written with the design."""

    __tablename__ = "api_design_content"

    design_id = db.Column(db.String(36), db.ForeignKey("api_designs.id"), nullable=False)
    version = db.Column(db.Integer, nullable=False)
    document = db.Column(db.Text, nullable=False)
    created_by = db.Column(db.String(255), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("design_id", "version", name="uq_design_content_version"),
        db.Index("idx_design_content_design", "design_id"),
    )


make_append_only(ApiDesignContent, "Content snapshots")
