from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from restaurant.data.database import Base
from restaurant.domain.enums import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    address_id = Column(Integer, ForeignKey("addresses.id"), nullable=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=True)

    status = Column(Enum(OrderStatus, native_enum=False), nullable=False, default=OrderStatus.PLACED)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(String, nullable=True)
    placed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    version = Column(Integer, nullable=False, default=1)

    # UPDATE/DELETE ... WHERE version = :old, nieaktualny zapis konczy sie StaleDataError
    __mapper_args__ = {"version_id_col": version}

    customer = relationship("UserModel")
    address = relationship("AddressModel")
    table = relationship("TableModel")

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

    @property
    def table_number(self) -> str | None:
        return self.table.table_number if self.table else None
