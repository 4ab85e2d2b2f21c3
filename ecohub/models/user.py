"""User model definitions."""

from sqlalchemy import Column, Date, DateTime, Float, Integer, String, Text, func
from ecohub.database import Base

ROLES = ('user', 'seller', 'admin')


class User(Base):
    """Represents a platform member, seller or administrator."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    birth_date = Column(Date)
    gender = Column(String(20))
    role = Column(String(20), nullable=False, default='user')  # user/seller/admin
    avatar_url = Column(String)
    bio = Column(Text)
    eco_points = Column(Integer, default=0)
    carbon_saved_kg = Column(Float, default=0.0)
    trees_planted = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())
