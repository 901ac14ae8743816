"""SQLAlchemy model for rostered players."""

from sqlalchemy import Column, Date, Integer, JSON, Numeric, String

from roster_activity.infrastructure.database import Base


class PlayerModel(Base):
    """Minimal player row, owned by the roster CRUD surfaces."""

    __tablename__ = "player"

    id = Column(String(64), primary_key=True)
    team_id = Column(String(64), nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    position = Column(String(40), nullable=True)
    age = Column(Integer, nullable=True)
    citizenship = Column(String(80), nullable=True)
    jersey_number = Column(Integer, nullable=True)
    market_value = Column(Numeric(14, 2), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    leagues_participated = Column(JSON, nullable=False, default=list)


__all__ = ["PlayerModel"]
