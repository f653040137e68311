import json
from enum import Enum

import yaml


class FormatType(str, Enum):
    JSON = "json"
    YAML = "yaml"


class _JsonCompatibleLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings so output stays JSON-serializable."""


_JsonCompatibleLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class _OrderedSafeDumper(yaml.SafeDumper):
    """SafeDumper that keeps mapping order and never emits anchors."""

    def ignore_aliases(self, data):
        return True


def yaml_to_json(content: str, *, indent: int = 2) -> str:
    try:
        data = yaml.load(content, Loader=_JsonCompatibleLoader)
    except yaml.YAMLError as exc:
        raise ValueError(str(exc)) from exc
    return json.dumps(data, indent=indent, ensure_ascii=False)


def json_to_yaml(content: str) -> str:
    data = json.loads(content)
    return yaml.dump(
        data,
        Dumper=_OrderedSafeDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def detect_format(content: str) -> FormatType:
    """JSON documents start with an object; anything else is treated as YAML."""
    stripped = content.lstrip()
    if stripped.startswith("{") or stripped.startswith("["):
        return FormatType.JSON
    return FormatType.YAML


def load_document(content: str):
    """Parse JSON or YAML text into Python data. Raises ValueError on bad input."""
    if detect_format(content) is FormatType.JSON:
        return json.loads(content)
    try:
        return yaml.load(content, Loader=_JsonCompatibleLoader)
    except yaml.YAMLError as exc:
        raise ValueError(str(exc)) from exc
