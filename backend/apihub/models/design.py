from apihub.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin


class ApiDesign(BaseModel, SoftDeleteMixin):
    __tablename__ = "api_designs"

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.String(255), nullable=False, index=True)
    tags = db.Column(db.JSON, nullable=False, default=list)

    # Head of the command log; advanced only by compare-and-swap
    head_version = db.Column(db.Integer, nullable=False, default=0)

    @property
    def created_on(self):
        return self.created_at
