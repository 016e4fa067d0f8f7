"""Product repository backed by SQLAlchemy"""

from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from models.product import Product as ProductModel
from models.base import utcnow
from domain.catalog.models import Product, ProductStatus, ProductType
from domain.catalog.ports import ProductRepository


def to_domain_product(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=Decimal(row.price),
        stock=row.stock,
        description=row.description or "",
        category_id=row.category_id,
        status=ProductStatus(row.status),
        product_type=ProductType(row.product_type) if row.product_type else None,
    )


class SqlProductRepository(ProductRepository):
    """Product lookups and stock reservation.

    Stock changes are single UPDATE statements; rows loaded earlier in the same
    session are refreshed on the next read.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_ids(self, product_ids: Sequence[str]) -> list[Product]:
        if not product_ids:
            return []
        query = (
            select(ProductModel)
            .where(ProductModel.id.in_(list(product_ids)))
            .execution_options(populate_existing=True)
        )
        return [to_domain_product(row) for row in self.db.execute(query).scalars()]

    def find_by_id(self, product_id: str) -> Optional[Product]:
        query = (
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        row = self.db.execute(query).scalar_one_or_none()
        return to_domain_product(row) if row else None

    def reserve_stock(self, product_id: str, quantity: int) -> bool:
        """Decrement stock with UPDATE ... WHERE stock >= quantity.

        The row is marked OUT_OF_STOCK when the reservation takes the last unit.
        """
        if quantity <= 0:
            return False

        stmt = (
            update(ProductModel.__table__)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock >= quantity
            )
            .values(
                stock=ProductModel.stock - quantity,
                status=case(
                    (ProductModel.stock == quantity, ProductStatus.OUT_OF_STOCK.value),
                    else_=ProductModel.status
                ),
                updated_at=utcnow()
            )
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def release_stock(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            return

        stmt = (
            update(ProductModel.__table__)
            .where(ProductModel.id == product_id)
            .values(
                stock=ProductModel.stock + quantity,
                status=case(
                    (ProductModel.status == ProductStatus.OUT_OF_STOCK.value, ProductStatus.ACTIVE.value),
                    else_=ProductModel.status
                ),
                updated_at=utcnow()
            )
        )
        self.db.execute(stmt)
