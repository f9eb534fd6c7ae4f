# restaurant/repos/table_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from restaurant.data.models.table import TableModel
from restaurant.domain.enums import TableStatus


class TableRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_number(self, table_number: str) -> TableModel | None:
        stmt = select(TableModel).where(TableModel.table_number == table_number)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_all(self) -> List[TableModel]:
        stmt = select(TableModel).order_by(TableModel.table_number)
        return list(self.db.execute(stmt).scalars())

    def list_by_status(self, status: TableStatus) -> List[TableModel]:
        stmt = select(TableModel).where(TableModel.status == status).order_by(TableModel.table_number)
        return list(self.db.execute(stmt).scalars())

    def update_status_version(self, table_id: int, old_version: int, status: TableStatus) -> int:
        # update set status, version+1 where id and version = old
        stmt = (
            update(TableModel)
            .where(TableModel.id == table_id, TableModel.version == old_version)
            .values(status=status, version=old_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount

    def refresh(self, table: TableModel) -> TableModel:
        self.db.refresh(table)
        return table

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
