from sqlalchemy import Column, Integer, String, Enum

from restaurant.data.database import Base
from restaurant.domain.enums import TableStatus


class TableModel(Base):
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True)
    table_number = Column(String, nullable=False, unique=True)
    capacity = Column(Integer, nullable=False)

    status = Column(Enum(TableStatus, native_enum=False), nullable=False, default=TableStatus.AVAILABLE)
    # optimistic locking przy claim/release
    version = Column(Integer, nullable=False, default=1)
