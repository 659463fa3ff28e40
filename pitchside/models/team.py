from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional
from datetime import datetime
from pitchside.database import Base


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    location: Mapped[str] = mapped_column(String(100))
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Organizer (or admin) who registered the team
    created_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_by: Mapped[Optional["User"]] = relationship("User", back_populates="teams_created")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    players: Mapped[list["Player"]] = relationship("Player", back_populates="team")

    @property
    def squad_size(self) -> int:
        return len(self.players)

    def __repr__(self):
        return f"<Team {self.name} ({self.location})>"
