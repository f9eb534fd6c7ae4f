# restaurant/repos/order_repo.py
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from restaurant.data.models.order import OrderModel
from restaurant.data.models.order_item import OrderItemModel
from restaurant.domain.enums import OrderStatus, TERMINAL_STATUSES


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def reload(self, order_id: int) -> OrderModel | None:
        # swiezy odczyt z bazy, nadpisuje to co sesja ma w identity map
        return self.db.get(OrderModel, order_id, populate_existing=True)

    def add(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def delete(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.flush()

    def delete_item(self, item: OrderItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def list_all(self) -> List[OrderModel]:
        return list(self.db.execute(select(OrderModel).order_by(OrderModel.id)).scalars())

    def find_by_status(self, status: OrderStatus) -> List[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.status == status).order_by(OrderModel.id)
        return list(self.db.execute(stmt).scalars())

    def find_by_customer(self, customer_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.customer_id == customer_id)
            .order_by(OrderModel.placed_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def find_last_by_customer(self, customer_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .where(OrderModel.customer_id == customer_id)
            .order_by(OrderModel.placed_at.desc(), OrderModel.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_since(
        self,
        since: datetime,
        statuses: Iterable[OrderStatus] | None = None,
        exclude: Iterable[OrderStatus] | None = None,
    ) -> List[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.placed_at >= since)
        if statuses is not None:
            stmt = stmt.where(OrderModel.status.in_(list(statuses)))
        if exclude is not None:
            stmt = stmt.where(OrderModel.status.not_in(list(exclude)))
        stmt = stmt.order_by(OrderModel.placed_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars())

    def find_merge_candidates(
        self,
        anchor: OrderModel,
        window_start: datetime,
        window_end: datetime,
    ) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(
                OrderModel.id != anchor.id,
                OrderModel.customer_id == anchor.customer_id,
                OrderModel.table_id == anchor.table_id,
                OrderModel.status == OrderStatus.DELIVERED,
                OrderModel.placed_at >= window_start,
                OrderModel.placed_at < window_end,
            )
            .order_by(OrderModel.placed_at, OrderModel.id)
        )
        return list(self.db.execute(stmt).scalars())

    def count_active_on_table(self, table_id: int, exclude_order_id: int | None = None) -> int:
        stmt = select(OrderModel.id).where(
            OrderModel.table_id == table_id,
            OrderModel.status.not_in(list(TERMINAL_STATUSES)),
        )
        if exclude_order_id is not None:
            stmt = stmt.where(OrderModel.id != exclude_order_id)
        return len(self.db.execute(stmt).scalars().all())

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
