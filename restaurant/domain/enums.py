# restaurant/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    PLACED = "PLACED"
    PREPARING = "PREPARING"
    READY = "READY"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, name: str) -> "OrderStatus | None":
        # case-insensitive, None gdy spoza zbioru
        try:
            return cls(name.strip().upper())
        except (ValueError, AttributeError):
            return None

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def reached(self, other: "OrderStatus") -> bool:
        """True gdy status jest na happy path rowny lub dalej niz ``other``."""
        if self not in HAPPY_PATH or other not in HAPPY_PATH:
            return False
        return HAPPY_PATH.index(self) >= HAPPY_PATH.index(other)


HAPPY_PATH = (
    OrderStatus.PLACED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


class TableStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    DIRTY = "DIRTY"

    @classmethod
    def parse(cls, name: str) -> "TableStatus | None":
        try:
            return cls(name.strip().upper())
        except (ValueError, AttributeError):
            return None


class UserRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    WAITER = "WAITER"
    CHEF = "CHEF"
    ADMIN = "ADMIN"

    @property
    def is_staff(self) -> bool:
        return self is not UserRole.CUSTOMER
