from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship

from restaurant.data.database import Base


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    postal_code = Column(String, nullable=True)

    user = relationship("UserModel", back_populates="addresses")
