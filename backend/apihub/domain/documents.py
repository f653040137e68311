import json
from dataclasses import dataclass, field
from typing import List, Optional

from apihub.utils.formats import FormatType, detect_format, load_document

DEFAULT_SPEC_VERSION = "2.0"
INITIAL_API_VERSION = "1.0.0"


@dataclass
class ResourceInfo:
    """Name, description and tags read from an API document's info block."""

    name: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    format: FormatType = FormatType.JSON

    @classmethod
    def from_content(cls, content: str) -> "ResourceInfo":
        fmt = detect_format(content)
        try:
            document = load_document(content)
        except ValueError as exc:
            raise ValueError("Content is not a JSON or YAML document") from exc

        if not isinstance(document, dict):
            raise ValueError("Content is not an API document")

        info = document.get("info") or {}
        tags = [
            tag["name"]
            for tag in document.get("tags") or []
            if isinstance(tag, dict) and tag.get("name")
        ]
        return cls(
            name=info.get("title"),
            description=info.get("description"),
            tags=tags,
            format=fmt,
        )


def new_api_document(
    name: str,
    description: Optional[str] = None,
    spec_version: Optional[str] = None,
    *,
    indent: int = 2,
) -> str:
    """
    Build the base document for a new design.

    No spec version (blank, or "2.0") gives a Swagger 2.0 document; anything
    else an OpenAPI 3 document. Empty fields are left out.
    """
    spec_version = (spec_version or "").strip()
    if not spec_version or spec_version == DEFAULT_SPEC_VERSION:
        document = {"swagger": DEFAULT_SPEC_VERSION}
    else:
        document = {"openapi": spec_version}

    info = {"title": name}
    if description is not None:
        info["description"] = description
    info["version"] = INITIAL_API_VERSION
    document["info"] = info

    return json.dumps(document, indent=indent, ensure_ascii=False)


def declared_spec_version(content: str) -> Optional[str]:
    document = json.loads(content)
    return document.get("swagger") or document.get("openapi")
