#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from restaurant.data.models.user import UserModel
from restaurant.data.models.address import AddressModel
from restaurant.data.models.food_item import FoodItemModel
from restaurant.data.models.table import TableModel
from restaurant.data.models.order import OrderModel
from restaurant.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "AddressModel",
    "FoodItemModel",
    "TableModel",
    "OrderModel",
    "OrderItemModel",
]
