"""Domain entity representing a rostered player."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass
class Player:
    """Roster entry tracked by the audit trail."""

    id: str
    team_id: str
    full_name: str
    position: str | None = None
    age: int | None = None
    citizenship: str | None = None
    jersey_number: int | None = None
    market_value: Decimal | None = None
    date_of_birth: date | None = None
    leagues_participated: list[str] = field(default_factory=list)


__all__ = ["Player"]
