"""Record shapes returned by the dashboard query service."""
from datetime import date
from typing import List

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    """Base model that can be built straight from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class Revenue(ORMModel):
    period: str
    amount: int


class CustomerSummary(ORMModel):
    name: str
    email: str
    image_url: str


class LatestInvoice(ORMModel):
    id: str
    # Currency formatted, e.g. "$1,234.56"
    amount: str
    customer: CustomerSummary


class CardData(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str


class InvoicesTable(ORMModel):
    id: str
    customer_id: str
    # Raw cents
    amount: int
    date: date
    status: str
    customer: CustomerSummary


class InvoiceForm(ORMModel):
    id: str
    customer_id: str
    # Dollars
    amount: float
    status: str


class CustomerField(ORMModel):
    id: str
    name: str


class CustomerInvoice(ORMModel):
    id: str
    status: str
    amount: int


class FormattedCustomersTable(ORMModel):
    id: str
    name: str
    email: str
    image_url: str
    invoices: List[CustomerInvoice] = []
    total_pending: str
    total_paid: str


class User(ORMModel):
    id: str
    name: str
    email: str
    password: str
