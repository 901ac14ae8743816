"""Existence checks for the entities referenced by audit records."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from sqlalchemy.orm import Session

from roster_activity.infrastructure.repositories import PlayerRepository

ExistenceLookup = Callable[[Session, Iterable[str]], set[str]]


def _existing_players(session: Session, ids: Iterable[str]) -> set[str]:
    return PlayerRepository(session).existing_ids(ids)


DEFAULT_LOOKUPS: dict[str, ExistenceLookup] = {
    "player": _existing_players,
}


class EntityDirectory:
    """Answer which referenced entities still exist.

    Entity types without a registered lookup are treated as unresolvable.
    """

    def __init__(
        self,
        session: Session,
        lookups: Mapping[str, ExistenceLookup] | None = None,
    ) -> None:
        self.session = session
        self._lookups = dict(DEFAULT_LOOKUPS if lookups is None else lookups)

    def existing_ids(self, entity_type: str, entity_ids: Iterable[str]) -> set[str]:
        lookup = self._lookups.get(entity_type)
        if lookup is None:
            return set()
        return lookup(self.session, entity_ids)


__all__ = ["DEFAULT_LOOKUPS", "EntityDirectory", "ExistenceLookup"]
