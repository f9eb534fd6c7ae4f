from sqlalchemy import Column, Integer, String, Numeric

from restaurant.data.database import Base


class FoodItemModel(Base):
    __tablename__ = "food_items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False)
