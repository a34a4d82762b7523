"""Role and ownership checks."""

from collections.abc import Iterable

from app.config import StatusUpdatePolicy
from app.schemas.auth import Role


def has_role(role: Role | None, allowed: Iterable[Role]) -> bool:
    """Return True if ``role`` is one of ``allowed``."""
    return role is not None and role in set(allowed)


def may_change_status(
    policy: StatusUpdatePolicy,
    role: Role,
    caller_identity_id: int | None,
    patient_id: int,
    doctor_id: int,
) -> bool:
    """
    Decide whether a caller may change an appointment's status.

    Args:
        policy: Configured status update policy
        role: Caller's role
        caller_identity_id: Caller's patient_id or doctor_id, matching ``role``
        patient_id: Patient who owns the appointment
        doctor_id: Doctor treating the appointment

    Returns:
        True if the change is allowed
    """
    if policy == StatusUpdatePolicy.AUTHENTICATED:
        return True

    if caller_identity_id is None:
        return False
    if role == Role.PATIENT:
        return caller_identity_id == patient_id
    if role == Role.PROVIDER:
        return caller_identity_id == doctor_id
    return False
