"""
State machine for asset status

Encodes valid transitions and the return-condition mapping.
Keeps "what is allowed" separate from "how persistence occurs".
"""

import enum
from typing import Dict, Optional, Set

from asset_tracker.buisness.core.errors import TransitionError


class AssetStatus(str, enum.Enum):
    AVAILABLE = 'AVAILABLE'
    ASSIGNED = 'ASSIGNED'
    MAINTENANCE = 'MAINTENANCE'
    RETIRED = 'RETIRED'
    LOST = 'LOST'


class ReturnCondition(str, enum.Enum):
    GOOD = 'GOOD'
    DAMAGED = 'DAMAGED'
    LOST = 'LOST'


class AssetStateMachine:
    """
    State machine for Asset.status transitions.

    AVAILABLE -> ASSIGNED -> {AVAILABLE, MAINTENANCE, LOST}.
    MAINTENANCE and LOST go back to AVAILABLE through restore.
    RETIRED is terminal.
    """

    AVAILABLE = AssetStatus.AVAILABLE
    ASSIGNED = AssetStatus.ASSIGNED
    MAINTENANCE = AssetStatus.MAINTENANCE
    RETIRED = AssetStatus.RETIRED
    LOST = AssetStatus.LOST

    INITIAL_STATE = AVAILABLE
    TERMINAL_STATES = {RETIRED}

    # Valid transitions: from_status -> set of allowed to_status values
    TRANSITIONS: Dict[AssetStatus, Set[AssetStatus]] = {
        AVAILABLE: {ASSIGNED, RETIRED},
        ASSIGNED: {AVAILABLE, MAINTENANCE, LOST},
        MAINTENANCE: {AVAILABLE, RETIRED},
        LOST: {AVAILABLE, RETIRED},
        # RETIRED is terminal - no transitions out
    }

    # Status an asset takes after being returned in a given condition
    RETURN_STATUS: Dict[ReturnCondition, AssetStatus] = {
        ReturnCondition.GOOD: AVAILABLE,
        ReturnCondition.DAMAGED: MAINTENANCE,
        ReturnCondition.LOST: LOST,
    }

    @classmethod
    def can_transition(cls, from_status: AssetStatus, to_status: AssetStatus) -> bool:
        """
        Check if transition is valid.

        Args:
            from_status: Current status
            to_status: Target status

        Returns:
            bool: True if transition is allowed
        """
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: AssetStatus, to_status: AssetStatus) -> None:
        """
        Validate transition and raise exception if invalid.

        Raises:
            TransitionError: If transition is not allowed
        """
        if not cls.can_transition(from_status, to_status):
            raise TransitionError(
                f"Invalid asset status transition: {_label(from_status)} → {_label(to_status)}"
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: AssetStatus) -> Set[AssetStatus]:
        """Get set of allowed target statuses from current status"""
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def status_for_condition(cls, condition: Optional[str]) -> AssetStatus:
        """Map a return condition to the resulting status; unknown or missing conditions mean AVAILABLE"""
        try:
            return cls.RETURN_STATUS[ReturnCondition(condition)]
        except (ValueError, TypeError):
            return cls.AVAILABLE


def _label(status) -> str:
    return status.value if isinstance(status, enum.Enum) else str(status)
