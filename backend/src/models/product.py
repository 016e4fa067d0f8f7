"""Product SQLAlchemy model"""

from sqlalchemy import CheckConstraint, Column, Index, Integer, Numeric, Text

from .base import Base, UTCDateTime, utcnow


class Product(Base):
    """Catalog product with its sellable stock.

    stock is only changed through conditional UPDATEs (see
    SqlProductRepository.reserve_stock), never read-modify-write.
    """
    __tablename__ = "product"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("price > 0", name="ck_product_price_positive"),
        Index("ix_product_category_id", "category_id"),
    )

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category_id = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="ACTIVE")
    product_type = Column(Text, nullable=True)  # NULL: classified by name
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
