"""
Fan follow links to teams and players
"""
from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from pitchside.database import Base


class TeamFollow(Base):
    __tablename__ = "team_follows"
    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_team_follow"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    team: Mapped["Team"] = relationship("Team")

    def __repr__(self):
        return f"<TeamFollow user={self.user_id} team={self.team_id}>"


class PlayerFollow(Base):
    __tablename__ = "player_follows"
    __table_args__ = (UniqueConstraint("user_id", "player_id", name="uq_player_follow"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    player: Mapped["Player"] = relationship("Player")

    def __repr__(self):
        return f"<PlayerFollow user={self.user_id} player={self.player_id}>"
