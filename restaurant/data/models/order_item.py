from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from restaurant.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)

    # bez FK - katalog moze byc zdalnym serwisem (CATALOG_SERVICE_URL)
    food_item_id = Column(Integer, nullable=False)
    food_name = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    # cena z momentu zamowienia, nie zmienia sie razem z katalogiem
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    note = Column(String, nullable=True)

    order = relationship("OrderModel", back_populates="items")
