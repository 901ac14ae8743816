"""Identity resolved by the external authentication provider."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """The already authenticated caller.

    ``owner_id`` scopes notifications and preferences, ``scope`` (the team)
    scopes audit history.
    """

    owner_id: str
    scope: str | None = None
    display_name: str | None = None


__all__ = ["Identity"]
