from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship

from restaurant.data.database import Base
from restaurant.domain.enums import UserRole


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    role = Column(Enum(UserRole, native_enum=False), nullable=False, default=UserRole.CUSTOMER)

    addresses = relationship("AddressModel", back_populates="user", cascade="all, delete-orphan")
