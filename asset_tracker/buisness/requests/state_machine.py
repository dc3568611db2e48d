"""
State machine for request workflow status

Request status only moves forward. PENDING is initial; REJECTED, COMPLETED
and CANCELLED are terminal.
"""

import enum
from typing import Dict, Set

from asset_tracker.buisness.core.errors import TransitionError


class RequestStatus(str, enum.Enum):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'


class RequestType(str, enum.Enum):
    NEW_ASSET = 'NEW_ASSET'
    REPLACEMENT = 'REPLACEMENT'
    COMPLAINT = 'COMPLAINT'
    MAINTENANCE = 'MAINTENANCE'


class RequestStateMachine:
    """
    State machine for Request.status transitions.

    PENDING -> {APPROVED, REJECTED, CANCELLED}
    APPROVED -> IN_PROGRESS -> COMPLETED
    """

    PENDING = RequestStatus.PENDING
    APPROVED = RequestStatus.APPROVED
    REJECTED = RequestStatus.REJECTED
    IN_PROGRESS = RequestStatus.IN_PROGRESS
    COMPLETED = RequestStatus.COMPLETED
    CANCELLED = RequestStatus.CANCELLED

    INITIAL_STATE = PENDING
    TERMINAL_STATES = {REJECTED, COMPLETED, CANCELLED}

    # Decisions a manager makes on a pending request
    DECISIONS = {APPROVED, REJECTED}
    # Fulfilment steps taken by an administrator
    ADVANCES = {IN_PROGRESS, COMPLETED}

    TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
        PENDING: {APPROVED, REJECTED, CANCELLED},
        APPROVED: {IN_PROGRESS},
        IN_PROGRESS: {COMPLETED},
        # REJECTED, COMPLETED and CANCELLED are terminal
    }

    @classmethod
    def can_transition(cls, from_status: RequestStatus, to_status: RequestStatus) -> bool:
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: RequestStatus, to_status: RequestStatus) -> None:
        """
        Validate transition and raise exception if invalid.

        Raises:
            TransitionError: If transition is not allowed
        """
        if not cls.can_transition(from_status, to_status):
            raise TransitionError(
                f"Invalid request status transition: {from_status.value} → {to_status.value}"
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: RequestStatus) -> Set[RequestStatus]:
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())
