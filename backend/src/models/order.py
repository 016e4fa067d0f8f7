"""Order SQLAlchemy models"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class Order(Base):
    """Persisted order header.

    The total is not stored; it is derived from the lines when the aggregate
    is rebuilt.
    """
    __tablename__ = "customer_order"
    __table_args__ = (
        Index("ix_customer_order_customer_created", "customer_id", "created_at"),
    )

    id = Column(Text, primary_key=True)
    customer_id = Column(Text, ForeignKey("customer.id", ondelete="RESTRICT"), nullable=False)
    status = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    payment_status = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.line_no"
    )


class OrderLine(Base):
    __tablename__ = "customer_order_line"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_line_quantity_positive"),
        Index("ix_customer_order_line_order_id", "order_id"),
    )

    id = Column(Text, primary_key=True)
    order_id = Column(Text, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False)
    line_no = Column(Integer, nullable=False)
    product_id = Column(Text, ForeignKey("product.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="lines")
