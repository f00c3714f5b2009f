from typing import Dict, FrozenSet

from ..core.exceptions import InvalidStatusTransition
from ..models.appointment import AppointmentStatus

INITIAL_STATUS = AppointmentStatus.PENDING

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.REJECTED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.REJECTED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

def is_terminal(status: AppointmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]

def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    """Return True if ``target`` is reachable from ``current`` in one step."""
    return target in ALLOWED_TRANSITIONS[current]

def check_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    """Raise InvalidStatusTransition unless ``current -> target`` is allowed."""
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)
