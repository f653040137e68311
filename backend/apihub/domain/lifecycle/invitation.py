from enum import Enum
from typing import Set

from ..errors import NotFound


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Explicit allowed state transitions
ALLOWED_INVITATION_TRANSITIONS: dict[InvitationStatus, Set[InvitationStatus]] = {
    InvitationStatus.PENDING: {InvitationStatus.ACCEPTED, InvitationStatus.REJECTED},
    InvitationStatus.ACCEPTED: set(),
    InvitationStatus.REJECTED: set(),
}


def can_transition(from_status: InvitationStatus, to_status: InvitationStatus) -> bool:
    return to_status in ALLOWED_INVITATION_TRANSITIONS.get(from_status, set())


def assert_invitation_transition(
    *, from_status: InvitationStatus, to_status: InvitationStatus
) -> None:
    """
    Guards invitation lifecycle transitions.

    A settled invitation looks the same as a missing one to the caller.
    """
    if not can_transition(InvitationStatus(from_status), InvitationStatus(to_status)):
        raise NotFound(
            f"Invitation cannot move from {from_status} to {to_status}"
        )
