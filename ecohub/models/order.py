"""Order model definitions."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, func
from ecohub.database import Base


class Order(Base):
    """Represents a purchase; its status is driven by the payment flow."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"))
    total_amount = Column(Float, default=0.0)
    status = Column(String(20), default='pending')
    payment_intent_id = Column(String)
    created_at = Column(DateTime, server_default=func.now())
