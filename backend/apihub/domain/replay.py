"""
Replay engine: rebuilds a design's document from its base snapshot and the
ordered command log.

``materialize`` is pure. It never touches storage and works on a freshly
parsed copy of the base document, so replaying the same inputs twice gives
byte-identical output.
"""
import copy
import json
from typing import Any, Iterable, List, NamedTuple, Protocol, Union

from .errors import CommandApplicationError
from .invariants.command import assert_version_sequence, parse_command


class CommandLike(Protocol):
    version: int
    command: Union[str, dict]


class VersionedCommand(NamedTuple):
    version: int
    command: Union[str, dict]


def parse_pointer(pointer: str) -> List[str]:
    """Split an RFC 6901 JSON pointer into unescaped reference tokens."""
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise CommandApplicationError(f"Invalid JSON pointer: {pointer!r}")
    return [
        token.replace("~1", "/").replace("~0", "~")
        for token in pointer[1:].split("/")
    ]


def _array_index(container: list, token: str, *, allow_end: bool = False) -> int:
    if allow_end and token == "-":
        return len(container)
    if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
        raise CommandApplicationError(f"Invalid array index: {token!r}")
    index = int(token)
    upper = len(container) if allow_end else len(container) - 1
    if index > upper:
        raise CommandApplicationError(f"Array index out of range: {index}")
    return index


def _resolve(document: Any, tokens: List[str]) -> Any:
    node = document
    for token in tokens:
        if isinstance(node, dict):
            if token not in node:
                raise CommandApplicationError(f"Path segment not found: {token!r}")
            node = node[token]
        elif isinstance(node, list):
            node = node[_array_index(node, token)]
        else:
            raise CommandApplicationError(f"Cannot descend into a scalar at {token!r}")
    return node


def _set(document: Any, tokens: List[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _resolve(document, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        parent[last] = value
    elif isinstance(parent, list):
        parent[_array_index(parent, last)] = value
    else:
        raise CommandApplicationError("Cannot set a member on a scalar")
    return document


def _add(document: Any, tokens: List[str], value: Any) -> Any:
    if not tokens:
        raise CommandApplicationError("Cannot add at the document root")
    parent = _resolve(document, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        if last in parent:
            raise CommandApplicationError(f"Member already exists: {last!r}")
        parent[last] = value
    elif isinstance(parent, list):
        parent.insert(_array_index(parent, last, allow_end=True), value)
    else:
        raise CommandApplicationError("Cannot add a member to a scalar")
    return document


def _delete(document: Any, tokens: List[str]) -> Any:
    if not tokens:
        raise CommandApplicationError("Cannot delete the document root")
    parent = _resolve(document, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        if last not in parent:
            raise CommandApplicationError(f"Member not found: {last!r}")
        del parent[last]
    elif isinstance(parent, list):
        del parent[_array_index(parent, last)]
    else:
        raise CommandApplicationError("Cannot delete a member of a scalar")
    return document


def apply_command(document: Any, command: dict) -> Any:
    """Apply one validated command in place and return the (possibly new) root."""
    command_type = command["type"]
    path = parse_pointer(command["path"])

    if command_type == "set":
        return _set(document, path, copy.deepcopy(command["value"]))
    if command_type == "add":
        return _add(document, path, copy.deepcopy(command["value"]))
    if command_type == "delete":
        return _delete(document, path)

    # move
    source = parse_pointer(command["from"])
    if not source:
        raise CommandApplicationError("Cannot move the document root")
    if path[: len(source)] == source:
        raise CommandApplicationError("Cannot move a member into itself")
    value = _resolve(document, source)
    _delete(document, source)
    return _add(document, path, value)


def materialize(
    base_document: str,
    commands: Iterable[CommandLike],
    *,
    base_version: int = 0,
    indent: int = 2,
) -> str:
    """
    Replay ``commands`` over ``base_document`` and return the document text.

    Commands must be ordered and carry versions base_version+1, +2, ... with
    no gaps. Any malformed or unapplicable command raises
    CommandApplicationError for this read only.
    """
    try:
        document = json.loads(base_document)
    except ValueError as exc:
        raise CommandApplicationError(f"Base document is not valid JSON: {exc}") from exc

    ordered = list(commands)
    assert_version_sequence((c.version for c in ordered), base_version=base_version)

    for entry in ordered:
        try:
            document = apply_command(document, parse_command(entry.command))
        except CommandApplicationError as exc:
            exc.details.setdefault("version", entry.version)
            raise

    return json.dumps(document, indent=indent, ensure_ascii=False)
