from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from pitchside.database import Base


class PlayerPosition(str, enum.Enum):
    BATSMAN = "batsman"
    BOWLER = "bowler"
    ALL_ROUNDER = "all_rounder"
    WICKET_KEEPER = "wicket_keeper"


class Player(Base):
    """Player profile owned by a user with the player role"""
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    user: Mapped["User"] = relationship("User", back_populates="player_profile")

    team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    team: Mapped[Optional["Team"]] = relationship("Team", back_populates="players")

    position: Mapped[Optional[PlayerPosition]] = mapped_column(Enum(PlayerPosition), nullable=True)
    batting_style: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)  # right-hand, left-hand
    bowling_style: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # right-arm fast, left-arm spin...

    is_approved: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return self.user.full_name if self.user else f"Player #{self.id}"

    @property
    def team_name(self) -> Optional[str]:
        return self.team.name if self.team else None

    def __repr__(self):
        position = self.position.value if self.position else "unassigned"
        return f"<Player {self.full_name} ({position})>"
