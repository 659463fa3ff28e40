"""
User model - accounts for fans, organizers, players and admins
"""
from typing import List, Optional
from sqlalchemy import String, DateTime, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from pitchside.database import Base


class UserRole(str, enum.Enum):
    FAN = "fan"
    ORGANIZER = "organizer"
    PLAYER = "player"
    ADMIN = "admin"


class User(Base):
    """
    User account linked to a Google identity.
    New accounts start as unapproved fans; admins approve and promote them.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    google_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255))
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.FAN)
    is_approved: Mapped[bool] = mapped_column(default=False)

    # Profile
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    teams_created: Mapped[List["Team"]] = relationship("Team", back_populates="created_by")
    player_profile: Mapped[Optional["Player"]] = relationship("Player", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User '{self.email}' ({self.role.value})>"
