# restaurant/services/table_service.py
from typing import List

from sqlalchemy.orm import Session

from restaurant.data.models.table import TableModel
from restaurant.domain.enums import TableStatus
from restaurant.domain.errors import (
    AlreadyHasValueError,
    ConcurrencyConflictError,
    InvalidOperationError,
    InvalidValueError,
    NotFoundError,
)
from restaurant.repos.order_repo import OrderRepo
from restaurant.repos.table_repo import TableRepo
from restaurant.services.lock_service import LockService, held_locks, table_key
from restaurant.utils.logging import get_logger

logger = get_logger(__name__)


class TableService:
    """
    Rejestr stolikow.

    claim/release nie commituja - wywoluje je silnik zamowien wewnatrz
    swojej transakcji. Zmiana wersji wiersza (optimistic locking) wykrywa
    rownolegly zapis tego samego stolika.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = TableRepo(db)
        self.orders = OrderRepo(db)
        self.lock_service = lock_service

    #query
    def get_table(self, table_number: str) -> TableModel:
        table = self.repo.get_by_number(table_number)
        if not table:
            raise NotFoundError("Table", table_number)
        return table

    def list_tables(self) -> List[TableModel]:
        return self.repo.list_all()

    def list_available(self) -> List[TableModel]:
        return self.repo.list_by_status(TableStatus.AVAILABLE)

    #commands
    def claim(self, table: TableModel) -> TableModel:
        # status sprzed locka moze byc nieaktualny
        table = self.repo.refresh(table)
        if table.status == TableStatus.OCCUPIED:
            # kolejne zamowienie przy tym samym stoliku
            return table
        logger.info(f"Claim table {table.table_number}")
        return self._write_status(table, TableStatus.OCCUPIED)

    def release(self, table: TableModel) -> TableModel:
        table = self.repo.refresh(table)
        if table.status == TableStatus.AVAILABLE:
            return table
        logger.info(f"Release table {table.table_number}")
        return self._write_status(table, TableStatus.AVAILABLE)

    def set_status(self, table_number: str, status_name: str) -> TableModel:
        """
        Reczna zmiana statusu przez obsluge (np. DIRTY -> AVAILABLE po sprzataniu).
        Stolik z aktywnym zamowieniem nie moze byc AVAILABLE.
        """
        table = self.get_table(table_number)

        new_status = TableStatus.parse(status_name)
        if new_status is None:
            raise InvalidValueError("Table", "status", status_name)

        with held_locks(self.lock_service, [table_key(table_number)]):
            table = self.repo.refresh(table)

            if table.status == new_status:
                raise AlreadyHasValueError("Table", "status", status_name)

            if new_status is TableStatus.AVAILABLE and self.orders.count_active_on_table(table.id):
                raise InvalidOperationError("Table", "set AVAILABLE while it has active orders")

            self._write_status(table, new_status)
            self.repo.commit()

        logger.info(f"Table {table_number} set to {new_status.value}")
        return table

    def _write_status(self, table: TableModel, status: TableStatus) -> TableModel:
        # update ... where id = :id and version = :old
        rowcount = self.repo.update_status_version(table.id, table.version, status)

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflictError("Table")

        return self.repo.refresh(table)
