"""Product model definitions."""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, func
from ecohub.database import Base

PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'


class Product(Base):
    """Represents a marketplace listing awaiting or past moderation."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default='')
    price = Column(Float, nullable=False)
    category_id = Column(Integer, nullable=True)
    stock = Column(Integer, default=0)
    image_url = Column(String, default='')
    eco_rating = Column(Integer, default=5)
    co2_reduction_kg = Column(Float, default=0.0)
    status = Column(String(20), nullable=False, default=PENDING)  # pending/approved/rejected
    created_at = Column(DateTime, server_default=func.now())
