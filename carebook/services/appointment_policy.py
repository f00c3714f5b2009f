"""
Authorization rules for appointment operations.

``decide`` is a pure function of the principal, the operation and (for
row-level operations) the target appointment. It never touches the database;
the appointment service consults it before every read or write.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..core.exceptions import Unauthorized
from ..core.security import Principal, UserRole


class Operation(str, Enum):
    LIST = "list"
    LIST_ALL = "list_all"
    CREATE = "create"
    UPDATE_STATUS = "update_status"
    DELETE = "delete"
    VIEW_UNSEEN = "view_unseen"
    MARK_SEEN = "mark_seen"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self):
        return self.allowed


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


def _owns_as_doctor(principal: Principal, appointment) -> bool:
    return appointment is not None and appointment.doctor_id == principal.id


def decide(principal: Principal, operation: Operation, appointment=None) -> Decision:
    """Decide whether ``principal`` may perform ``operation``.

    ``appointment`` is required for UPDATE_STATUS and for a single-row
    MARK_SEEN; without it those are answered for the role alone.
    """
    role = principal.role

    if operation == Operation.LIST:
        if role in (UserRole.PATIENT, UserRole.DOCTOR):
            return ALLOW
        return _deny("Admins list appointments through the list-all operation")

    if operation in (Operation.LIST_ALL, Operation.DELETE):
        if role == UserRole.ADMIN:
            return ALLOW
        return _deny("Admin access required")

    if operation == Operation.CREATE:
        if role == UserRole.PATIENT:
            return ALLOW
        return _deny("Only patients can create appointments")

    if operation == Operation.UPDATE_STATUS:
        if role == UserRole.ADMIN:
            return ALLOW
        if role == UserRole.DOCTOR:
            if appointment is None or _owns_as_doctor(principal, appointment):
                return ALLOW
            return _deny("Doctors can only update their own appointments")
        return _deny("Unauthorized to update status")

    if operation in (Operation.VIEW_UNSEEN, Operation.MARK_SEEN):
        if role != UserRole.DOCTOR:
            return _deny("Only doctors can track seen appointments")
        if appointment is not None and not _owns_as_doctor(principal, appointment):
            return _deny("Doctors can only mark their own appointments as seen")
        return ALLOW

    return _deny(f"Unknown operation: {operation}")


def authorize(principal: Principal, operation: Operation, appointment=None) -> None:
    """Raise Unauthorized with the decision's reason when denied."""
    decision = decide(principal, operation, appointment)
    if not decision.allowed:
        raise Unauthorized(decision.reason)


def scope_filter(principal: Principal) -> Tuple[str, int]:
    """Column and value that restrict a scoped listing to the principal's rows."""
    if principal.role == UserRole.PATIENT:
        return "patient_id", principal.id
    if principal.role == UserRole.DOCTOR:
        return "doctor_id", principal.id
    raise Unauthorized("Admins list appointments through the list-all operation")
