import json
from typing import Any, Dict, Iterable

from ..errors import CommandApplicationError

COMMAND_TYPES = {"set", "add", "delete", "move"}

# Fields each command type must carry besides "type"
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "set": ("path", "value"),
    "add": ("path", "value"),
    "delete": ("path",),
    "move": ("from", "path"),
}


def parse_command(payload: Any) -> Dict[str, Any]:
    """
    Turn a stored or submitted payload into a validated command dict.

    Accepts the JSON text kept in the log or an already-decoded dict.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise CommandApplicationError(f"Command is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise CommandApplicationError("Command must be a JSON object")

    command_type = payload.get("type")
    if command_type not in COMMAND_TYPES:
        raise CommandApplicationError(f"Unknown command type: {command_type!r}")

    for field in REQUIRED_FIELDS[command_type]:
        if field not in payload:
            raise CommandApplicationError(
                f"'{command_type}' command is missing '{field}'"
            )

    for field in ("path", "from"):
        if field in payload and not isinstance(payload[field], str):
            raise CommandApplicationError(f"'{field}' must be a JSON pointer string")

    return payload


def assert_version_sequence(versions: Iterable[int], *, base_version: int) -> None:
    """Versions must continue the base version one by one, with no gaps."""
    expected = base_version + 1
    for version in versions:
        if version != expected:
            raise CommandApplicationError(
                f"Command version {version} does not follow {expected - 1}",
                expected=expected,
                actual=version,
            )
        expected += 1
