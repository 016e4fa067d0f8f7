"""Customer repository backed by SQLAlchemy"""

from typing import Optional

from sqlalchemy.orm import Session

from models.customer import Customer as CustomerModel
from domain.catalog.models import Customer
from domain.catalog.ports import CustomerRepository


class SqlCustomerRepository(CustomerRepository):

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        row = self.db.get(CustomerModel, customer_id)
        if row is None:
            return None
        return Customer(id=row.id, name=row.name, email=row.email)
