"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from roster_activity.domain.entities import Identity
from roster_activity.infrastructure.security import identity_from_token

bearer_scheme = HTTPBearer(auto_error=False)


def resolve_identity(token: str) -> Identity:
    """Resolve the caller identity carried by ``token``."""

    try:
        return identity_from_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """Return the identity of the authenticated caller."""

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return resolve_identity(credentials.credentials)


def require_team_scope(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Ensure the caller belongs to a team, which scopes audit history."""

    if not identity.scope:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No team scope for this user",
        )
    return identity
