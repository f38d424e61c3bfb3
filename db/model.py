# db/model.py

import uuid

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Revenue(Base):
    __tablename__ = "revenue"

    period = Column(String(16), primary_key=True)
    amount = Column(Integer, nullable=False)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    image_url = Column(String(255), nullable=False)

    invoices = relationship("Invoice", back_populates="customer", lazy="raise")


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=_uuid)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    # Stored in cents
    amount = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    # "paid" or "pending"
    status = Column(String(32), nullable=False)

    customer = relationship("Customer", back_populates="invoices", lazy="raise")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
