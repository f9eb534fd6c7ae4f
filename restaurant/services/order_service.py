# restaurant/services/order_service.py
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Protocol

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from restaurant.data.models.order import OrderModel
from restaurant.data.models.order_item import OrderItemModel
from restaurant.data.models.table import TableModel
from restaurant.data.models.user import UserModel
from restaurant.domain.enums import OrderStatus, UserRole
from restaurant.domain.errors import (
    AlreadyHasValueError,
    AlreadyInStateError,
    ConcurrencyConflictError,
    InvalidOperationError,
    InvalidValueError,
    NotFoundError,
    NullValueError,
    OrderEngineError,
)
from restaurant.domain.location import AddressLocation, Location, TableLocation
from restaurant.domain.policy import Action, is_allowed
from restaurant.repos.catalog_repo import CatalogRepo
from restaurant.repos.order_repo import OrderRepo
from restaurant.repos.user_repo import UserRepo
from restaurant.services.catalog_client import CatalogClient
from restaurant.services.lock_service import LockService, held_locks, order_key, table_key
from restaurant.services.notification_service import NotificationService
from restaurant.services.table_service import TableService
from restaurant.utils.settings import (
    CATALOG_SERVICE_URL,
    MERGE_WINDOW_MINUTES,
    SERVICE_DAY_START_HOUR,
)
from restaurant.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0.00")

# statusy widoczne dla kuchni w biezacym dniu
CHEF_QUEUE = (
    OrderStatus.PLACED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.CANCELLED,
)


class Catalog(Protocol):
    def find_food_item_by_name(self, name: str): ...


@dataclass(frozen=True)
class OrderLine:
    food_name: str
    quantity: int
    note: str | None = None


@dataclass
class PlacementResult:
    """Zamowienie + nazwy pozycji ktorych nie ma w katalogu."""

    order: OrderModel
    warnings: List[str] = field(default_factory=list)


def default_catalog(db: Session) -> Catalog:
    if CATALOG_SERVICE_URL:
        return CatalogClient()
    return CatalogRepo(db)


def service_day_start(now: datetime) -> datetime:
    start = now.replace(hour=SERVICE_DAY_START_HOUR, minute=0, second=0, microsecond=0)
    if now < start:
        start -= timedelta(days=1)
    return start


class OrderService:
    """
    Silnik cyklu zycia zamowienia.

    commands (place, update status, cancel, reassign table, add/remove item)
    najpierw biora locki na zamowienie i stoliki ktorych dotykaja, potem
    czytaja zamowienie na swiezo, waliduja i commituja raz na koncu.
    query (get, list) tylko odczyt.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        catalog: Catalog | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.users = UserRepo(db)
        self.tables = TableService(db, lock_service)
        self.lock_service = lock_service
        self.catalog = catalog or default_catalog(db)
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, requesting_customer_id: int | None = None) -> OrderModel:
        """
        Use Case: Pobranie zamowienia.

        Klient widzi tylko swoje zamowienia; cudze zwracaja NotFound,
        tak samo jak nieistniejace.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)

        if requesting_customer_id is not None:
            requester = self._get_user(requesting_customer_id)
            if not requester.role.is_staff and order.customer_id != requester.id:
                raise NotFoundError("Order", order_id)

        return order

    def get_order_items(self, order_id: int, requesting_customer_id: int | None = None) -> List[OrderItemModel]:
        return list(self.get_order(order_id, requesting_customer_id).items)

    def get_last_order(self, customer_id: int) -> OrderModel:
        customer = self._get_user(customer_id)
        order = self.repo.find_last_by_customer(customer.id)
        if not order:
            raise NotFoundError("Order")
        return order

    def list_orders_by_status(self, status_name: str) -> List[OrderModel]:
        status = OrderStatus.parse(status_name)
        if status is None:
            raise InvalidValueError("Order", "status", status_name)
        return self.repo.find_by_status(status)

    def list_orders_for(self, user_id: int) -> List[OrderModel]:
        """
        Use Case: Lista zamowien zalezna od roli.

        - CUSTOMER: wlasne zamowienia, najnowsze pierwsze
        - WAITER: wszystko co nie COMPLETED z biezacego dnia
        - CHEF: kolejka kuchni z biezacego dnia
        - ADMIN: wszystko z biezacego dnia
        """
        user = self._get_user(user_id)
        if user.role is UserRole.CUSTOMER:
            return self.repo.find_by_customer(user.id)

        since = service_day_start(datetime.now(timezone.utc))
        if user.role is UserRole.WAITER:
            return self.repo.find_since(since, exclude=[OrderStatus.COMPLETED])
        if user.role is UserRole.CHEF:
            return self.repo.find_since(since, statuses=CHEF_QUEUE)
        return self.repo.find_since(since)

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(
        self,
        customer_id: int,
        location: Location | None,
        items: List[OrderLine],
        notes: str | None = None,
    ) -> PlacementResult:
        """
        Use Case: Zlozenie zamowienia.

        1. Klient musi istniec
        2. Dokladnie jedna lokalizacja: stolik albo adres klienta
        3. Pozycje spoza katalogu ida do warnings, reszta dostaje cene z katalogu
        4. Zero dopasowanych pozycji = blad, nie puste zamowienie
        5. Zapis zamowienia razem z pozycjami, zajecie stolika
        """
        customer = self._get_user(customer_id)

        table = None
        address = None
        if isinstance(location, TableLocation):
            table = self.tables.get_table(location.table_number)
        elif isinstance(location, AddressLocation):
            address = self.users.get_address(location.address_id)
            if not address:
                raise NotFoundError("Address", location.address_id)
            # klient moze zamowic tylko na swoj adres
            if customer.role is UserRole.CUSTOMER and address.user_id != customer.id:
                raise NotFoundError("Address", location.address_id)
        else:
            raise InvalidValueError("Order", "location", "either a table or an address must be provided")

        order_items, warnings = self._resolve_lines(items)

        if not order_items:
            raise InvalidValueError("Order", "items", "no valid order items found")

        for name in warnings:
            logger.warning(f"Food item '{name}' not found in catalog, dropped from order")

        order = OrderModel(
            customer=customer,
            address=address,
            table=table,
            status=OrderStatus.PLACED,
            notes=notes,
            placed_at=datetime.now(timezone.utc),
            items=order_items,
            total=sum((i.total_price for i in order_items), ZERO),
        )

        keys = [table_key(table.table_number)] if table else []
        with self._transaction(keys):
            self.repo.add(order)
            if table:
                self.tables.claim(table)

        logger.info(
            f"Order {order.id} placed by customer {customer.id}: "
            f"{len(order_items)} items, total {order.total}, {len(warnings)} warnings"
        )
        self.notification_service.order_placed(customer.id, order.id, warnings)

        return PlacementResult(order=order, warnings=warnings)

    def update_order_status(self, order_id: int, status_name: str, actor_id: int | None = None) -> OrderModel:
        """
        Use Case: Zmiana statusu (obsluga).

        Przejscie do DELIVERED laczy swieze zamowienia z tego samego stolika,
        COMPLETED i CANCELLED zwalniaja stolik.
        """
        order = self._find(order_id)

        with self._locked(order) as order:
            new_status = OrderStatus.parse(status_name)
            if new_status is None:
                raise InvalidValueError("Order", "status", status_name)

            if order.status == new_status:
                raise AlreadyInStateError("Order", new_status)

            if order.status.is_terminal:
                raise InvalidOperationError("Order", f"leave terminal status {order.status.value}")

            if actor_id is not None:
                self._authorize(actor_id, Action.UPDATE_STATUS, order)

            old_status = order.status
            order.status = new_status

            if new_status is OrderStatus.DELIVERED:
                self.merge_recent_orders(order)
            if new_status.is_terminal:
                self._release_if_idle(order.table, order.id)

        logger.info(f"Order {order.id} status {old_status.value} -> {new_status.value}")
        self.notification_service.status_changed(order.customer_id, order.id, new_status.value)

        return order

    def cancel_order(self, order_id: int, actor_id: int) -> OrderModel:
        """
        Use Case: Anulowanie zamowienia.

        Obsluga moze anulowac zawsze (poza stanami terminalnymi), klient
        tylko swoje i tylko zanim zamowienie jest READY.
        """
        order = self._find(order_id)
        actor = self._get_user(actor_id)

        with self._locked(order) as order:
            # cudze zamowienie = nie istnieje
            if not actor.role.is_staff and order.customer_id != actor.id:
                raise NotFoundError("Order", order_id)

            if order.status is OrderStatus.CANCELLED:
                raise AlreadyInStateError("Order", OrderStatus.CANCELLED)
            if order.status.is_terminal:
                raise InvalidOperationError("Order", f"cancel a {order.status.value} order")

            if not is_allowed(actor.role, Action.CANCEL, order.status):
                raise InvalidValueError(
                    "Order", "status", "cannot cancel, order is already in progress toward delivery"
                )

            order.status = OrderStatus.CANCELLED
            self._release_if_idle(order.table, order.id)

        logger.info(f"Order {order.id} cancelled by {actor.role.value} {actor.id}")
        self.notification_service.status_changed(order.customer_id, order.id, OrderStatus.CANCELLED.value)

        return order

    def reassign_table(self, order_id: int, table_number: str, actor_id: int | None = None) -> OrderModel:
        """
        Use Case: Przeniesienie zamowienia na inny stolik.
        Stary stolik wolny, nowy zajety, jeden commit.
        """
        order = self._find(order_id)
        new_table = self.tables.get_table(table_number)

        with self._locked(order, [table_key(new_table.table_number)]) as order:
            if order.table is None:
                raise NullValueError("Order", "table")

            if order.table.table_number == table_number:
                raise AlreadyHasValueError("Table", "number", table_number)

            if actor_id is not None:
                self._authorize(actor_id, Action.REASSIGN_TABLE, order)

            old_table = order.table
            # stary stolik zostaje zajety jesli siedzi przy nim inne aktywne zamowienie
            self._release_if_idle(old_table, order.id)
            self.tables.claim(new_table)
            order.table = new_table

        logger.info(f"Order {order.id} moved from table {old_table.table_number} to {table_number}")
        return order

    def merge_recent_orders(self, anchor: OrderModel) -> List[int]:
        """
        Laczy zamowienia tego samego klienta przy tym samym stoliku w jeden rachunek.

        Kandydaci: status DELIVERED, zlozone w ciagu MERGE_WINDOW_MINUTES przed
        zamowieniem anchor (pozniejsze nie wchodza). Pozycje sa przenoszone
        (nie kopiowane), kandydat jest usuwany. Nie commituje - robi to
        update_order_status.
        """
        if anchor.table_id is None or anchor.customer_id is None:
            return []

        window = timedelta(minutes=MERGE_WINDOW_MINUTES)
        candidates = self.repo.find_merge_candidates(
            anchor,
            window_start=anchor.placed_at - window,
            window_end=anchor.placed_at,
        )
        if not candidates:
            return []

        merged_notes = [anchor.notes] if anchor.notes and anchor.notes.strip() else []
        absorbed = []
        for candidate in candidates:
            if candidate.notes and candidate.notes.strip():
                merged_notes.append(candidate.notes)

            # przeniesienie wlasnosci: item znika z kandydata i trafia do anchor
            moved = list(candidate.items)
            candidate.items.clear()
            anchor.items.extend(moved)
            anchor.total = (anchor.total or ZERO) + candidate.total

            absorbed.append(candidate.id)
            self.repo.delete(candidate)

        anchor.notes = "\n".join(merged_notes) if merged_notes else anchor.notes
        self.repo.add(anchor)

        logger.info(f"Merged orders {absorbed} into order {anchor.id}, new total {anchor.total}")
        return absorbed

    def add_item(self, order_id: int, food_name: str, quantity: int, note: str | None = None) -> OrderModel:
        """Use Case: Dopisanie pozycji do zamowienia ktore jeszcze nie jest przygotowywane."""
        order = self._find(order_id)

        with self._locked(order) as order:
            self._ensure_editable(order)

            food = self.catalog.find_food_item_by_name(food_name)
            if not food:
                raise NotFoundError("FoodItem", food_name)

            order.items.append(self._make_item(food, quantity, note))
            self._recompute_total(order)

        logger.info(f"Added {quantity} x {food_name} to order {order.id}, total {order.total}")
        return order

    def remove_item(self, order_id: int, item_id: int) -> OrderModel:
        """Use Case: Usuniecie pozycji. Usuniety item jest kasowany, nie odpinany."""
        order = self._find(order_id)

        with self._locked(order) as order:
            self._ensure_editable(order)

            item = next((i for i in order.items if i.id == item_id), None)
            if item is None:
                raise NotFoundError("OrderItem", item_id)

            if len(order.items) == 1:
                raise InvalidOperationError("Order", "remove the last item, cancel the order instead")

            order.items.remove(item)
            self.repo.delete_item(item)
            self._recompute_total(order)

        logger.info(f"Removed item {item_id} from order {order.id}, total {order.total}")
        return order

    def delete_order(self, order_id: int) -> None:
        order = self._find(order_id)

        with self._locked(order) as order:
            table = order.table
            self.repo.delete(order)
            self._release_if_idle(table, order_id)

        logger.info(f"Order {order_id} deleted")

    # =====================================================
    # HELPERS
    # =====================================================
    def _find(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def _get_user(self, user_id: int) -> UserModel:
        user = self.users.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def _authorize(self, actor_id: int, action: Action, order: OrderModel) -> None:
        actor = self._get_user(actor_id)
        if not is_allowed(actor.role, action, order.status):
            raise InvalidOperationError("Order", f"{action.value.lower()} as {actor.role.value}")

    def _resolve_lines(self, lines: List[OrderLine]):
        order_items = []
        warnings = []
        for line in lines:
            food = self.catalog.find_food_item_by_name(line.food_name)
            if not food:
                warnings.append(line.food_name)
                continue
            order_items.append(self._make_item(food, line.quantity, line.note))
        return order_items, warnings

    @staticmethod
    def _make_item(food, quantity: int, note: str | None) -> OrderItemModel:
        price = Decimal(str(food.price))
        return OrderItemModel(
            food_item_id=food.id,
            food_name=food.name,
            quantity=quantity,
            unit_price=price,
            total_price=price * quantity,
            note=note,
        )

    @staticmethod
    def _recompute_total(order: OrderModel) -> None:
        order.total = sum((Decimal(i.total_price) for i in order.items), ZERO)

    @staticmethod
    def _ensure_editable(order: OrderModel) -> None:
        if order.status is not OrderStatus.PLACED:
            raise InvalidOperationError("Order", f"change items of a {order.status.value} order")

    def _keys_for(self, order: OrderModel) -> List[str]:
        keys = [order_key(order.id)]
        if order.table is not None:
            keys.append(table_key(order.table.table_number))
        return keys

    def _release_if_idle(self, table: TableModel | None, order_id: int) -> TableModel | None:
        # stolik wolny dopiero gdy nie ma przy nim innego aktywnego zamowienia
        if table is None:
            return None
        if self.repo.count_active_on_table(table.id, exclude_order_id=order_id):
            logger.info(f"Table {table.table_number} still has active orders, not released")
            return None
        return self.tables.release(table)

    @contextmanager
    def _locked(self, order: OrderModel, extra_keys=()):
        """
        Lock na zamowienie i jego stolik, potem swiezy odczyt zamowienia.

        Wszystkie guardy komendy ida na tym co zwraca, nigdy na odczycie
        sprzed locka.
        """
        order_id = order.id
        keys = self._keys_for(order) + list(extra_keys)

        with self._transaction(keys):
            fresh = self.repo.reload(order_id)
            if not fresh:
                raise NotFoundError("Order", order_id)
            # ktos przeniosl zamowienie na inny stolik zanim dostalismy lock
            if not set(self._keys_for(fresh)) <= set(keys):
                raise ConcurrencyConflictError("Order")
            yield fresh

    @contextmanager
    def _transaction(self, keys: List[str]):
        with held_locks(self.lock_service, keys):
            try:
                yield
                self.repo.commit()
            except StaleDataError as e:
                # wersja w bazie inna niz ta ktora czytalismy
                self.repo.rollback()
                logger.warning(f"Order changed concurrently, rolled back: {e}")
                raise ConcurrencyConflictError("Order") from e
            except OrderEngineError:
                self.repo.rollback()
                raise
            except Exception as e:
                logger.error(f"Order operation failed, rolling back: {e}")
                self.repo.rollback()
                raise
