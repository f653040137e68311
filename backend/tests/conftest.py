from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pytest
from flask_jwt_extended import create_access_token

from apihub import create_app
from apihub.extensions import db
from apihub.application.collaboration.invitations import accept_invitation, create_invitation
from apihub.application.designs.create_design import create_design
from apihub.connectors.base import PublicationTarget, ResourceContent, SourceConnector
from apihub.domain.documents import ResourceInfo
from apihub.domain.errors import NotFound


@pytest.fixture
def connectors():
    """Source connectors registered on the app; modules override this."""
    return []


@pytest.fixture
def app(connectors):
    app = create_app("testing", connectors=connectors)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(login: str, name: str | None = None) -> dict:
        token = create_access_token(
            identity=login,
            additional_claims={"name": name or login.title()},
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def design(app):
    """A fresh design owned by alice."""
    return create_design(user="alice", name="Pet Store", description="Pets, mostly")


@pytest.fixture
def add_collaborator(app):
    def _add(design_id: str, user: str, owner: str = "alice"):
        invite = create_invitation(design_id=design_id, inviter=owner)
        return accept_invitation(design_id=design_id, invite_id=invite.id, user=user)

    return _add


class FakeConnector(SourceConnector):
    """In-memory stand-in for a hosted repository."""

    type = "fake"

    def __init__(self):
        self.resources: Dict[str, str] = {}
        self.info: Dict[str, ResourceInfo] = {}
        self.created: List[Tuple[str, str, str]] = []
        self.updated: List[Tuple[str, str, Optional[ResourceContent], str]] = []

    def accepts(self, url: str) -> bool:
        return url.startswith("https://fake.example.com/")

    def resource_url(self, target: PublicationTarget) -> str:
        return f"https://fake.example.com/{target.org}/{target.repo}/{target.branch}/{target.resource}"

    def validate_resource_exists(self, url: str) -> ResourceInfo:
        if url not in self.resources:
            raise NotFound(url)
        return self.info.get(url) or ResourceInfo.from_content(self.resources[url])

    def get_resource_content(self, url: str) -> ResourceContent:
        if url not in self.resources:
            raise NotFound(url)
        return ResourceContent(content=self.resources[url], revision=f"rev-{len(self.updated)}")

    def create_resource_content(self, url: str, message: str, content: str) -> None:
        self.created.append((url, message, content))
        self.resources[url] = content

    def update_resource_content(self, url, message, previous, content) -> None:
        self.updated.append((url, message, previous, content))
        self.resources[url] = content


@pytest.fixture
def fake_connector():
    return FakeConnector()
