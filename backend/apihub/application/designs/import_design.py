import base64
import binascii
import posixpath
from typing import Optional
from urllib.parse import urlparse

import requests
from flask import current_app

from apihub.models.design import ApiDesign
from apihub.connectors.registry import connector_registry
from apihub.domain.documents import ResourceInfo
from apihub.domain.errors import NotFound, SourceConnectorError
from apihub.utils.formats import FormatType, yaml_to_json
from .create_design import store_design

DEFAULT_IMPORT_NAME = "Imported API Design"


def _as_json(content: str, info: ResourceInfo) -> str:
    if info.format is FormatType.YAML:
        return yaml_to_json(content, indent=current_app.config["CONTENT_JSON_INDENT"])
    return content


def import_design_from_data(*, user: str, data: str) -> ApiDesign:
    """Import a design from base64-encoded JSON or YAML pasted by the user."""
    try:
        content = base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError("Import data is not base64-encoded UTF-8 text") from exc

    info = ResourceInfo.from_content(content)
    return store_design(
        user=user,
        name=info.name or DEFAULT_IMPORT_NAME,
        description=info.description,
        tags=info.tags,
        document=_as_json(content, info),
    )


def _name_from_url(url: str) -> Optional[str]:
    path = urlparse(url).path
    return posixpath.basename(path.rstrip("/")) or None


def import_design_from_url(*, user: str, url: str) -> ApiDesign:
    """
    Import from a URL.

    URLs owned by a registered source connector go through its API; anything
    else is fetched as raw content.
    """
    connector = connector_registry().for_url(url)

    if connector is not None:
        current_app.logger.debug("Importing %s through the %s connector", url, connector.type)
        info = connector.validate_resource_exists(url)
        content = connector.get_resource_content(url).content
        return store_design(
            user=user,
            name=info.name or _name_from_url(url) or DEFAULT_IMPORT_NAME,
            description=info.description or "",
            tags=info.tags,
            document=_as_json(content, info),
        )

    current_app.logger.debug("Importing raw content from %s", url)
    try:
        response = requests.get(url, timeout=current_app.config["IMPORT_TIMEOUT_SECONDS"])
    except requests.RequestException as exc:
        raise SourceConnectorError(f"Could not fetch {url}") from exc

    if response.status_code == 404:
        raise NotFound(f"Nothing found at {url}")
    if not response.ok:
        raise SourceConnectorError(f"Fetching {url} failed with HTTP {response.status_code}")

    content = response.text
    info = ResourceInfo.from_content(content)
    return store_design(
        user=user,
        name=info.name or _name_from_url(url) or DEFAULT_IMPORT_NAME,
        description=info.description,
        tags=info.tags,
        document=_as_json(content, info),
    )


def import_design(
    *,
    user: str,
    data: Optional[str] = None,
    url: Optional[str] = None,
) -> ApiDesign:
    if data and data.strip():
        return import_design_from_data(user=user, data=data)
    if url:
        return import_design_from_url(user=user, url=url)
    raise ValueError("Either data or url is required")
