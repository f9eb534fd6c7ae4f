# restaurant/domain/policy.py
from enum import Enum

from restaurant.domain.enums import OrderStatus, UserRole


class Action(str, Enum):
    CANCEL = "CANCEL"
    UPDATE_STATUS = "UPDATE_STATUS"
    REASSIGN_TABLE = "REASSIGN_TABLE"


# klient moze anulowac tylko zanim zamowienie jest gotowe
_CUSTOMER_CANCEL_LIMIT = OrderStatus.READY


def is_allowed(role: UserRole, action: Action, status: OrderStatus) -> bool:
    """
    Capability check: (rola, akcja, stan zamowienia) -> allow/deny.

    Terminal states are handled by the engine itself, this only answers
    whether the role may act on an order in ``status``.
    """
    if action is Action.CANCEL:
        if role.is_staff:
            return True
        return not status.reached(_CUSTOMER_CANCEL_LIMIT)

    # zmiana statusu i stolika tylko dla obslugi
    return role.is_staff
