from ..errors import InvariantViolation
from ..roles import Role


def assert_invitable_role(role: Role) -> None:
    # A design has exactly one owner: its creator
    if Role(role) is Role.OWNER:
        raise InvariantViolation("Invitations can only offer the collaborator role")


def assert_role_change(*, current: Role, new: Role) -> None:
    if Role(current) is Role.OWNER:
        raise InvariantViolation("The owner's role cannot be changed")
    if Role(new) is Role.OWNER:
        raise InvariantViolation("A design cannot have a second owner")


def assert_revocable(role: Role) -> None:
    if Role(role) is Role.OWNER:
        raise InvariantViolation("The owner's permission cannot be revoked")
