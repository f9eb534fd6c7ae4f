# restaurant/repos/catalog_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from restaurant.data.models.food_item import FoodItemModel


class CatalogRepo:
    """Catalog lookup backed by the local food_items table."""

    def __init__(self, db: Session):
        self.db = db

    def find_food_item_by_name(self, name: str) -> FoodItemModel | None:
        stmt = select(FoodItemModel).where(FoodItemModel.name == name)
        return self.db.execute(stmt).scalar_one_or_none()
