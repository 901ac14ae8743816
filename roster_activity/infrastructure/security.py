"""Token helpers for the identity issued by the authentication provider."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from roster_activity.config import get_settings
from roster_activity.domain.entities import Identity

ALGORITHM = "HS256"


def create_access_token(
    identity: Identity, expires_delta: timedelta | None = None
) -> str:
    """Issue a signed token carrying ``identity`` (used by tooling and tests)."""

    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict[str, object] = {"sub": identity.owner_id, "exp": expire}
    if identity.scope:
        claims["team_id"] = identity.scope
    if identity.display_name:
        claims["name"] = identity.display_name
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def identity_from_token(token: str) -> Identity:
    """Return the :class:`Identity` carried by ``token`` or raise ``ValueError``."""

    payload = decode_access_token(token)
    owner_id = payload.get("sub")
    if not isinstance(owner_id, str) or not owner_id:
        raise ValueError("Token does not identify a user")
    scope = payload.get("team_id")
    name = payload.get("name")
    return Identity(
        owner_id=owner_id,
        scope=str(scope) if scope else None,
        display_name=str(name) if name else None,
    )


__all__ = ["create_access_token", "decode_access_token", "identity_from_token"]
