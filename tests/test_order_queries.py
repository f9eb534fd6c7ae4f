"""
Tests for order reads, item edits and deletion.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from restaurant.data.models import OrderItemModel, OrderModel
from restaurant.domain.enums import OrderStatus, TableStatus
from restaurant.domain.errors import InvalidOperationError, InvalidValueError, NotFoundError
from restaurant.services.order_service import OrderLine, service_day_start


class TestGetOrder:

    def test_owner_sees_order(self, service, place_at_table, customer):
        order = place_at_table()

        assert service.get_order(order.id, customer.id).id == order.id

    def test_staff_sees_any_order(self, service, place_at_table, chef):
        order = place_at_table()

        assert service.get_order(order.id, chef.id).id == order.id

    def test_other_customer_gets_not_found(self, service, place_at_table, other_customer):
        order = place_at_table()

        with pytest.raises(NotFoundError):
            service.get_order(order.id, other_customer.id)

    def test_missing_order(self, service):
        with pytest.raises(NotFoundError):
            service.get_order(1)

    def test_items(self, service, place_at_table):
        order = place_at_table(lines=[OrderLine("Pizza", 1), OrderLine("Tiramisu", 2)])

        items = service.get_order_items(order.id)

        assert [(i.food_name, i.quantity) for i in items] == [("Pizza", 1), ("Tiramisu", 2)]


class TestListOrders:

    def test_customer_sees_own_orders_newest_first(self, service, place_at_table, other_customer, customer):
        first = place_at_table()
        place_at_table(customer_id=other_customer.id)
        second = place_at_table("T2")

        orders = service.list_orders_for(customer.id)

        assert [o.id for o in orders] == [second.id, first.id]

    def test_waiter_sees_everything_but_completed(self, service, place_at_table, advance, waiter):
        done = place_at_table()
        open_ = place_at_table("T2")
        advance(done.id, "PREPARING", "READY", "SHIPPED", "DELIVERED", "COMPLETED")

        orders = service.list_orders_for(waiter.id)

        assert [o.id for o in orders] == [open_.id]

    def test_chef_sees_kitchen_queue(self, service, place_at_table, advance, chef):
        placed = place_at_table()
        shipped = place_at_table("T2")
        advance(shipped.id, "PREPARING", "READY", "SHIPPED")

        orders = service.list_orders_for(chef.id)

        assert [o.id for o in orders] == [placed.id]

    def test_admin_sees_all(self, service, place_at_table, advance, admin):
        first = place_at_table()
        second = place_at_table("T2")
        advance(first.id, "CANCELLED")

        orders = service.list_orders_for(admin.id)

        assert {o.id for o in orders} == {first.id, second.id}

    def test_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            service.list_orders_for(77)

    def test_by_status(self, service, place_at_table, advance):
        first = place_at_table()
        place_at_table("T2")
        advance(first.id, "PREPARING")

        orders = service.list_orders_by_status("preparing")

        assert [o.id for o in orders] == [first.id]

    def test_by_unknown_status(self, service):
        with pytest.raises(InvalidValueError):
            service.list_orders_by_status("lost")

    def test_last_order(self, service, place_at_table, customer):
        place_at_table()
        latest = place_at_table("T2")

        assert service.get_last_order(customer.id).id == latest.id

    def test_last_order_when_none(self, service, customer):
        with pytest.raises(NotFoundError) as exc:
            service.get_last_order(customer.id)

        assert exc.value.entity == "Order"


class TestServiceDay:

    def test_before_opening_hour_belongs_to_previous_day(self):
        assert service_day_start(datetime(2024, 5, 10, 3, 0)) == datetime(2024, 5, 9, 6, 0)

    def test_after_opening_hour(self):
        assert service_day_start(datetime(2024, 5, 10, 10, 30)) == datetime(2024, 5, 10, 6, 0)


class TestEditItems:

    def test_add_item_updates_total(self, service, place_at_table):
        order = place_at_table()

        updated = service.add_item(order.id, "Tiramisu", 2, "no cocoa")

        assert len(updated.items) == 2
        assert updated.items[-1].note == "no cocoa"
        assert updated.total == Decimal("29.49")

    def test_add_unknown_food(self, service, place_at_table):
        order = place_at_table()

        with pytest.raises(NotFoundError) as exc:
            service.add_item(order.id, "Unicorn Stew", 1)

        assert exc.value.entity == "FoodItem"

    def test_items_frozen_after_placed(self, service, place_at_table, advance):
        order = place_at_table()
        advance(order.id, "PREPARING")

        with pytest.raises(InvalidOperationError):
            service.add_item(order.id, "Tiramisu", 1)

    def test_remove_item_deletes_it(self, db, service, place_at_table):
        order = place_at_table(lines=[OrderLine("Pizza", 1), OrderLine("Tiramisu", 1)])
        item_id = order.items[1].id

        updated = service.remove_item(order.id, item_id)

        assert [i.food_name for i in updated.items] == ["Pizza"]
        assert updated.total == Decimal("15.99")
        assert db.get(OrderItemModel, item_id) is None

    def test_remove_unknown_item(self, service, place_at_table):
        order = place_at_table()

        with pytest.raises(NotFoundError):
            service.remove_item(order.id, 9999)

    def test_remove_last_item(self, service, place_at_table):
        order = place_at_table()

        with pytest.raises(InvalidOperationError):
            service.remove_item(order.id, order.items[0].id)


class TestDeleteOrder:

    def test_delete_removes_order_and_items(self, db, service, place_at_table, tables):
        order = place_at_table(lines=[OrderLine("Pizza", 1), OrderLine("Tiramisu", 1)])
        order_id = order.id

        service.delete_order(order_id)

        assert db.query(OrderModel).count() == 0
        assert db.query(OrderItemModel).count() == 0
        assert tables["T1"].status == TableStatus.AVAILABLE
        with pytest.raises(NotFoundError):
            service.get_order(order_id)

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_order(5)

    def test_delete_keeps_table_with_other_orders(self, service, place_at_table, other_customer, tables):
        order = place_at_table()
        place_at_table(customer_id=other_customer.id)

        service.delete_order(order.id)

        assert tables["T1"].status == TableStatus.OCCUPIED
        assert service.list_orders_by_status(OrderStatus.PLACED.value)[0].customer_id == other_customer.id
