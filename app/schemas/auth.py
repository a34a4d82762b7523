"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    """Roles accepted by the portal."""

    PATIENT = "Patient"
    PROVIDER = "Provider"

    @classmethod
    def parse(cls, value: object) -> "Role | None":
        """Match a token role case-insensitively; None if it is not a known role."""
        if not isinstance(value, str):
            return None
        for role in cls:
            if role.value.lower() == value.strip().lower():
                return role
        return None


class AuthContext(BaseModel):
    """Identity resolved from a bearer token."""

    user_id: int
    role: Role
