"""Tests for role parsing and the status update policy."""

import pytest

from app.config import StatusUpdatePolicy
from app.core.roles import has_role, may_change_status
from app.schemas.auth import Role


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Patient", Role.PATIENT),
        ("patient", Role.PATIENT),
        ("PROVIDER", Role.PROVIDER),
        (" Provider ", Role.PROVIDER),
        ("admin", None),
        ("", None),
        (None, None),
        (3, None),
    ],
)
def test_role_parse(raw: object, expected: Role | None) -> None:
    """Roles match case-insensitively and unknown values are rejected."""
    assert Role.parse(raw) is expected


def test_has_role() -> None:
    """Role guard admits only the listed roles."""
    assert has_role(Role.PATIENT, [Role.PATIENT])
    assert has_role(Role.PROVIDER, [Role.PATIENT, Role.PROVIDER])
    assert not has_role(Role.PROVIDER, [Role.PATIENT])
    assert not has_role(None, [Role.PATIENT, Role.PROVIDER])


def test_authenticated_policy_allows_anyone() -> None:
    """The default policy does not look at ownership."""
    assert may_change_status(StatusUpdatePolicy.AUTHENTICATED, Role.PATIENT, None, 7, 5)
    assert may_change_status(StatusUpdatePolicy.AUTHENTICATED, Role.PROVIDER, 99, 7, 5)


@pytest.mark.parametrize(
    ("role", "identity", "allowed"),
    [
        (Role.PATIENT, 7, True),
        (Role.PATIENT, 8, False),
        (Role.PATIENT, 5, False),
        (Role.PROVIDER, 5, True),
        (Role.PROVIDER, 7, False),
        (Role.PROVIDER, None, False),
    ],
)
def test_owner_policy(role: Role, identity: int | None, allowed: bool) -> None:
    """Only the owning patient or the treating doctor pass the owner policy."""
    assert may_change_status(StatusUpdatePolicy.OWNER, role, identity, 7, 5) is allowed
