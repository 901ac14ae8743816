"""Persistence layer for rostered players."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy.orm import Session

from roster_activity.domain.entities import Player
from roster_activity.infrastructure.models import PlayerModel


class PlayerRepository:
    """Narrow access to the player table used by the audit trail."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, player_id: str) -> Player | None:
        model = self.session.get(PlayerModel, player_id)
        return self._to_entity(model) if model else None

    def create(self, player: Player) -> Player:
        model = PlayerModel(id=player.id)
        self._apply_entity_to_model(model, player)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, player: Player) -> Player:
        model = self.session.get(PlayerModel, player.id)
        if model is None:
            msg = f"Player with id {player.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, player)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, player_id: str) -> bool:
        model = self.session.get(PlayerModel, player_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def existing_ids(self, player_ids: Iterable[str]) -> set[str]:
        ids = {player_id for player_id in player_ids if player_id}
        if not ids:
            return set()
        rows = self.session.query(PlayerModel.id).filter(PlayerModel.id.in_(ids)).all()
        return {player_id for (player_id,) in rows}

    @staticmethod
    def _apply_entity_to_model(model: PlayerModel, player: Player) -> None:
        model.team_id = player.team_id
        model.full_name = player.full_name
        model.position = player.position
        model.age = player.age
        model.citizenship = player.citizenship
        model.jersey_number = player.jersey_number
        model.market_value = player.market_value
        model.date_of_birth = player.date_of_birth
        model.leagues_participated = list(player.leagues_participated or [])

    @staticmethod
    def _to_entity(model: PlayerModel) -> Player:
        market_value = model.market_value
        return Player(
            id=model.id,
            team_id=model.team_id,
            full_name=model.full_name,
            position=model.position,
            age=model.age,
            citizenship=model.citizenship,
            jersey_number=model.jersey_number,
            market_value=Decimal(market_value) if market_value is not None else None,
            date_of_birth=model.date_of_birth,
            leagues_participated=list(model.leagues_participated or []),
        )


__all__ = ["PlayerRepository"]
