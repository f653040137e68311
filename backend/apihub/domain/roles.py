from enum import Enum
from typing import FrozenSet


class Capability(str, Enum):
    READ = "read"
    WRITE = "write"
    ADMINISTER = "administer"


class Role(str, Enum):
    OWNER = "owner"
    COLLABORATOR = "collaborator"

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return ROLE_CAPABILITIES[self]

    def allows(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def includes(self, other: "Role") -> bool:
        return self.capabilities >= other.capabilities


# owner ⊇ collaborator
ROLE_CAPABILITIES: dict[Role, FrozenSet[Capability]] = {
    Role.COLLABORATOR: frozenset({Capability.READ, Capability.WRITE}),
    Role.OWNER: frozenset({Capability.READ, Capability.WRITE, Capability.ADMINISTER}),
}
