from sqlalchemy import Boolean, Column, Integer, String

from storefront.data.database import Base


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), nullable=True, unique=True)
    is_banned = Column(Boolean, nullable=False, default=False)
