"""Customer SQLAlchemy model"""

from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class Customer(Base):
    __tablename__ = "customer"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    orders = relationship("Order", back_populates="customer")
