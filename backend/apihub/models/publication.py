from apihub.extensions import db
from .base import BaseModel
from .immutable import make_append_only


class ApiPublication(BaseModel):
    __tablename__ = "api_publications"

    __table_args__ = (
        db.Index("ix_publication_design_created", "design_id", "created_at"),
    )

    design_id = db.Column(db.String(36), db.ForeignKey("api_designs.id"), nullable=False)
    created_by = db.Column(db.String(255), nullable=False)

    # type, org, repo, team, group, project, branch, resource
    target = db.Column(db.JSON, nullable=False, default=dict)
    format = db.Column(db.String(10), nullable=False)
    commit_message = db.Column(db.Text, nullable=True)


make_append_only(ApiPublication, "Publication records")
