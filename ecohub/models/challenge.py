"""Challenge and enrollment model definitions."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
from ecohub.database import Base

IN_PROGRESS = 'in_progress'
COMPLETED = 'completed'


class Challenge(Base):
    """Represents an admin-curated eco challenge."""
    __tablename__ = "challenges"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default='')
    points_reward = Column(Integer, nullable=False, default=0)
    co2_saving_kg = Column(Float, default=0.0)
    duration_days = Column(Integer, nullable=False, default=7)
    image_url = Column(String, default='')
    category = Column(String(50), default='Week')
    created_at = Column(DateTime, server_default=func.now())


class UserChallenge(Base):
    """Represents a user's enrollment in a challenge."""
    __tablename__ = "user_challenges"
    __table_args__ = (
        UniqueConstraint('user_id', 'challenge_id', name='uq_user_challenges_user_challenge'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    challenge_id = Column(Integer, ForeignKey("challenges.id"), nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=IN_PROGRESS)  # in_progress/completed
    joined_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime)
