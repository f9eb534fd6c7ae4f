# restaurant/api/routers/tables.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant.api.deps import get_lock_service, http_error
from restaurant.data.database import get_db
from restaurant.domain.errors import OrderEngineError
from restaurant.domain.schemas import StatusIn, TableOut
from restaurant.services.lock_service import LockService
from restaurant.services.table_service import TableService

router = APIRouter(prefix="/tables", tags=["tables"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> TableService:
    return TableService(db, lock_service)


@router.get("/", response_model=List[TableOut])
def list_tables(svc: TableService = Depends(get_service)):
    return svc.list_tables()


@router.get("/available", response_model=List[TableOut])
def list_available(svc: TableService = Depends(get_service)):
    return svc.list_available()


@router.get("/{table_number}", response_model=TableOut)
def get_table(table_number: str, svc: TableService = Depends(get_service)):
    try:
        return svc.get_table(table_number)
    except OrderEngineError as e:
        raise http_error(e)


@router.patch("/{table_number}/status", response_model=TableOut)
def set_table_status(
    table_number: str,
    payload: StatusIn,
    svc: TableService = Depends(get_service),
):
    """
    Reczna zmiana statusu stolika przez obsluge (sprzatanie, rezerwacja).
    """
    try:
        return svc.set_status(table_number, payload.status)
    except OrderEngineError as e:
        raise http_error(e)
