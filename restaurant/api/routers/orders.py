# restaurant/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from restaurant.api.deps import get_lock_service, http_error
from restaurant.data.database import get_db
from restaurant.domain.errors import OrderEngineError
from restaurant.domain.location import location_from
from restaurant.domain.schemas import (
    OrderItemIn,
    OrderItemOut,
    OrderOut,
    PlaceOrderIn,
    PlaceOrderOut,
    StatusIn,
    TableNumberIn,
)
from restaurant.services.lock_service import LockService
from restaurant.services.order_service import OrderLine, OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db, lock_service=lock_service)


@router.post("/", response_model=PlaceOrderOut, status_code=201)
def place_order(payload: PlaceOrderIn, svc: OrderService = Depends(get_service)):
    """
    Sklada zamowienie. Pozycje spoza katalogu wracaja w ``warnings``.
    """
    lines = [OrderLine(i.food_name, i.quantity, i.note) for i in payload.items]
    try:
        result = svc.place_order(
            customer_id=payload.customer_id,
            location=location_from(payload.table_number, payload.address_id),
            items=lines,
            notes=payload.notes,
        )
    except OrderEngineError as e:
        raise http_error(e)
    return {"order": OrderOut.model_validate(result.order), "warnings": result.warnings}


@router.get("/", response_model=List[OrderOut])
def list_orders(user_id: int = Query(...), svc: OrderService = Depends(get_service)):
    try:
        return svc.list_orders_for(user_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.get("/status/{status}", response_model=List[OrderOut])
def list_orders_by_status(status: str, svc: OrderService = Depends(get_service)):
    try:
        return svc.list_orders_by_status(status)
    except OrderEngineError as e:
        raise http_error(e)


@router.get("/last", response_model=OrderOut)
def get_last_order(customer_id: int = Query(...), svc: OrderService = Depends(get_service)):
    try:
        return svc.get_last_order(customer_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int | None = Query(None),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order(order_id, user_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.get("/{order_id}/items", response_model=List[OrderItemOut])
def get_order_items(
    order_id: int,
    user_id: int | None = Query(None),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order_items(order_id, user_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: StatusIn,
    actor_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Zmiana statusu przez obsluge. DELIVERED laczy zamowienia ze stolika.
    """
    try:
        return svc.update_order_status(order_id, payload.status, actor_id=actor_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    actor_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.cancel_order(order_id, actor_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.patch("/{order_id}/table", response_model=OrderOut)
def reassign_table(
    order_id: int,
    payload: TableNumberIn,
    actor_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.reassign_table(order_id, payload.table_number, actor_id=actor_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.post("/{order_id}/items", response_model=OrderOut)
def add_item(order_id: int, payload: OrderItemIn, svc: OrderService = Depends(get_service)):
    try:
        return svc.add_item(order_id, payload.food_name, payload.quantity, payload.note)
    except OrderEngineError as e:
        raise http_error(e)


@router.delete("/{order_id}/items/{item_id}", response_model=OrderOut)
def remove_item(order_id: int, item_id: int, svc: OrderService = Depends(get_service)):
    try:
        return svc.remove_item(order_id, item_id)
    except OrderEngineError as e:
        raise http_error(e)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, svc: OrderService = Depends(get_service)):
    try:
        svc.delete_order(order_id)
    except OrderEngineError as e:
        raise http_error(e)
