# restaurant/data/seed.py
from decimal import Decimal

from restaurant.data.database import SessionLocal
from restaurant.data.models import UserModel, AddressModel, FoodItemModel, TableModel
from restaurant.domain.enums import UserRole

FOOD_ITEMS = [
    ("Pizza", "15.99"),
    ("Garlic Bread", "4.50"),
    ("Tiramisu", "6.75"),
    ("Lemonade", "3.20"),
]

TABLES = [("T1", 4), ("T2", 2), ("T3", 6)]

USERS = [
    ("customer@example.com", "Demo Customer", UserRole.CUSTOMER),
    ("waiter@example.com", "Demo Waiter", UserRole.WAITER),
    ("chef@example.com", "Demo Chef", UserRole.CHEF),
    ("admin@example.com", "Demo Admin", UserRole.ADMIN),
]


def seed(db=None) -> bool:
    """Dane demo. Zwraca False gdy baza nie byla pusta."""
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(TableModel).first():
            return False

        for name, price in FOOD_ITEMS:
            db.add(FoodItemModel(name=name, price=Decimal(price)))
        for number, capacity in TABLES:
            db.add(TableModel(table_number=number, capacity=capacity))
        for email, name, role in USERS:
            user = UserModel(email=email, name=name, role=role)
            if role is UserRole.CUSTOMER:
                user.addresses.append(AddressModel(street="1 Main St", city="Springfield", postal_code="00001"))
            db.add(user)

        db.commit()
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    seed()
