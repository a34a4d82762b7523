"""FastAPI dependencies."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import EmailNotifier
from app.core.roles import has_role
from app.core.security import decode_access_token
from app.database import get_db
from app.schemas.auth import AuthContext, Role

# Security
security = HTTPBearer()


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthContext:
    """
    Resolve the bearer token into a user id and a portal role.

    Args:
        credentials: Bearer token credentials

    Returns:
        Authenticated user id and role

    Raises:
        HTTPException: If the token is invalid, expired or carries an unknown role
    """
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _credentials_error()

    user_id_raw = payload.get("sub")
    try:
        user_id = int(user_id_raw)
    except (TypeError, ValueError):
        raise _credentials_error("Invalid user ID format")

    role = Role.parse(payload.get("role"))
    if role is None:
        raise _credentials_error("Unknown role")

    return AuthContext(user_id=user_id, role=role)


def require_roles(*allowed: Role) -> Callable[..., Coroutine[Any, Any, AuthContext]]:
    """
    Build a dependency that admits only the given roles.

    Args:
        allowed: Roles permitted on the route

    Returns:
        Dependency returning the caller's AuthContext
    """
    names = ", ".join(role.value for role in allowed)

    async def checker(
        auth: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> AuthContext:
        if not has_role(auth.role, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {names} users can perform this action",
            )
        return auth

    return checker


def get_notifier(request: Request) -> EmailNotifier:
    """Email notifier built once at startup."""
    return request.app.state.notifier


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
PatientAuth = Annotated[AuthContext, Depends(require_roles(Role.PATIENT))]
ProviderAuth = Annotated[AuthContext, Depends(require_roles(Role.PROVIDER))]
PortalAuth = Annotated[AuthContext, Depends(require_roles(Role.PATIENT, Role.PROVIDER))]
Notifier = Annotated[EmailNotifier, Depends(get_notifier)]
