"""
Shared fixtures for the order service tests.

Every test gets a fresh in-memory SQLite database, an in-process lock
service and a notifier that records instead of publishing Celery tasks.
"""
import os

# ustawienia przed pierwszym importem restaurant.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CATALOG_SERVICE_URL"] = ""
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restaurant.data.database import Base
from restaurant.data.models import AddressModel, FoodItemModel, TableModel, UserModel
from restaurant.domain.enums import UserRole
from restaurant.domain.location import TableLocation
from restaurant.services.order_service import OrderLine, OrderService


class FakeLockService:
    """In-process replacement for the Redis backed LockService."""

    def __init__(self):
        self.held = {}
        self.acquired = []
        self.released = []

    def acquire(self, key, token, ttl):
        if key in self.held:
            return False
        self.held[key] = token
        self.acquired.append(key)
        return True

    def release(self, key, token):
        if self.held.get(key) != token:
            return False
        del self.held[key]
        self.released.append(key)
        return True


class RecordingNotifier:
    def __init__(self):
        self.placed = []
        self.status_changes = []

    def order_placed(self, customer_id, order_id, warnings):
        self.placed.append((customer_id, order_id, list(warnings)))

    def status_changed(self, customer_id, order_id, status):
        self.status_changes.append((customer_id, order_id, status))


# ============================================================================
# DATABASE
# ============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


# ============================================================================
# COLLABORATORS
# ============================================================================

@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(db, lock_service, notifier):
    return OrderService(db, lock_service=lock_service, notification_service=notifier)


# ============================================================================
# DATA
# ============================================================================

def _user(db, email, role):
    user = UserModel(email=email, name=email.split("@")[0].title(), role=role)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def customer(db):
    return _user(db, "alice@example.com", UserRole.CUSTOMER)


@pytest.fixture
def other_customer(db):
    return _user(db, "bob@example.com", UserRole.CUSTOMER)


@pytest.fixture
def waiter(db):
    return _user(db, "walter@example.com", UserRole.WAITER)


@pytest.fixture
def chef(db):
    return _user(db, "carla@example.com", UserRole.CHEF)


@pytest.fixture
def admin(db):
    return _user(db, "root@example.com", UserRole.ADMIN)


@pytest.fixture
def menu(db):
    items = {
        "Pizza": FoodItemModel(name="Pizza", price=Decimal("15.99")),
        "Garlic Bread": FoodItemModel(name="Garlic Bread", price=Decimal("4.50")),
        "Tiramisu": FoodItemModel(name="Tiramisu", price=Decimal("6.75")),
    }
    db.add_all(items.values())
    db.commit()
    return items


@pytest.fixture
def tables(db):
    result = {
        "T1": TableModel(table_number="T1", capacity=4),
        "T2": TableModel(table_number="T2", capacity=2),
    }
    db.add_all(result.values())
    db.commit()
    return result


@pytest.fixture
def customer_address(db, customer):
    address = AddressModel(user_id=customer.id, street="1 Main St", city="Springfield")
    db.add(address)
    db.commit()
    return address


@pytest.fixture
def place_at_table(service, customer, menu, tables):
    """Place an order at a table, one Pizza by default."""

    def _place(table_number="T1", lines=None, customer_id=None, notes=None):
        lines = lines or [OrderLine("Pizza", 1)]
        result = service.place_order(
            customer_id or customer.id,
            TableLocation(table_number),
            lines,
            notes,
        )
        return result.order

    return _place


@pytest.fixture
def advance(service):
    """Walk an order through statuses in sequence."""

    def _advance(order_id, *statuses):
        order = None
        for status in statuses:
            order = service.update_order_status(order_id, status)
        return order

    return _advance
