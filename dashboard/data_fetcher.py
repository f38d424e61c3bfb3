import asyncio
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import contains_eager, selectinload

from db.database import Database
from db.model import Customer, Invoice, Revenue, User

from . import schemas
from .utils.data_utils import format_currency, summarize_invoice_totals
from .utils.db_utils import contains_filter, handle_db_errors, page_offset

# Configure logging
logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5

class QueryService:
    """Read-only queries behind the invoice dashboard.

    Every public method runs against the ``Database`` it was built with,
    opens its own session per read, and raises ``DataFetchError`` with a
    generic message if anything goes wrong. Lookups that find nothing
    return ``None`` rather than raising.
    """

    def __init__(self, db: Database):
        self.db = db

    async def _scalar(self, stmt) -> Any:
        async with self.db.session() as session:
            return await session.scalar(stmt)

    async def _mappings(self, stmt) -> List[Dict[str, Any]]:
        async with self.db.session() as session:
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings()]

    @handle_db_errors("Failed to fetch revenue data.")
    async def fetch_revenue(self) -> List[schemas.Revenue]:
        """Return every row of the revenue table, in no particular order."""
        logger.info("Fetching revenue data...")
        async with self.db.session() as session:
            rows = (await session.scalars(select(Revenue))).all()
        return [schemas.Revenue.model_validate(row) for row in rows]

    @handle_db_errors("Failed to fetch the latest invoices.")
    async def fetch_latest_invoices(self) -> List[schemas.LatestInvoice]:
        """
        Fetch the five most recent invoices with their customer details.

        Returns:
            Invoices newest first, amounts formatted as currency strings

        Raises:
            DataFetchError: If the read fails
        """
        logger.info("Fetching latest invoices data...")
        stmt = (
            select(Invoice)
            .join(Invoice.customer)
            .options(contains_eager(Invoice.customer))
            .order_by(Invoice.date.desc(), Invoice.id.desc())
            .limit(LATEST_INVOICES_LIMIT)
        )
        async with self.db.session() as session:
            invoices = (await session.scalars(stmt)).all()

        return [
            schemas.LatestInvoice(
                id=invoice.id,
                amount=format_currency(invoice.amount),
                customer=schemas.CustomerSummary.model_validate(invoice.customer),
            )
            for invoice in invoices
        ]

    @handle_db_errors("Failed to fetch card data.")
    async def fetch_card_data(self) -> schemas.CardData:
        """
        Fetch the dashboard card figures.

        Invoice count, customer count and every invoice status/amount are
        read concurrently. Amounts are summed into paid and pending totals;
        invoices with any other status count towards neither.

        Returns:
            CardData with both counts and the two formatted totals

        Raises:
            DataFetchError: If any of the three reads fails
        """
        logger.info("Fetching card data...")

        # Three independent reads, each on its own session
        number_of_invoices, number_of_customers, invoices = await asyncio.gather(
            self._scalar(select(func.count()).select_from(Invoice)),
            self._scalar(select(func.count()).select_from(Customer)),
            self._mappings(select(Invoice.status, Invoice.amount)),
        )

        totals = summarize_invoice_totals(invoices)
        return schemas.CardData(
            number_of_customers=number_of_customers,
            number_of_invoices=number_of_invoices,
            total_paid_invoices=format_currency(totals["paid"]),
            total_pending_invoices=format_currency(totals["pending"]),
        )

    @handle_db_errors("Failed to fetch invoices.")
    async def fetch_filtered_invoices(
        self,
        query: str,
        current_page: int
    ) -> List[schemas.InvoicesTable]:
        """
        Fetch one page of invoices whose customer name or email contains ``query``.

        Args:
            query: Substring to look for in customer name or email
            current_page: 1-indexed page number; values below 1 mean page 1

        Returns:
            Up to ITEMS_PER_PAGE invoices, newest first, amounts in cents

        Raises:
            DataFetchError: If the read fails
        """
        logger.info(f"Fetching invoices matching '{query}', page {current_page}...")
        offset = page_offset(current_page, ITEMS_PER_PAGE)

        stmt = (
            select(Invoice)
            .join(Invoice.customer)
            .options(contains_eager(Invoice.customer))
            .where(contains_filter(query))
            .order_by(Invoice.date.desc(), Invoice.id.desc())
            .limit(ITEMS_PER_PAGE)
            .offset(offset)
        )
        async with self.db.session() as session:
            invoices = (await session.scalars(stmt)).all()
        return [schemas.InvoicesTable.model_validate(invoice) for invoice in invoices]

    @handle_db_errors("Failed to fetch total number of invoices.")
    async def fetch_invoices_pages(self, query: str) -> int:
        """Number of ITEMS_PER_PAGE pages needed for invoices matching ``query``."""
        logger.info(f"Counting invoice pages matching '{query}'...")
        stmt = (
            select(func.count(Invoice.id))
            .select_from(Invoice)
            .join(Invoice.customer)
            .where(contains_filter(query))
        )
        count = await self._scalar(stmt)
        return math.ceil((count or 0) / ITEMS_PER_PAGE)

    @handle_db_errors("Failed to fetch invoice.")
    async def fetch_invoice_by_id(self, invoice_id: str) -> Optional[schemas.InvoiceForm]:
        """
        Fetch a single invoice for the edit form.

        Args:
            invoice_id: Primary key of the invoice

        Returns:
            InvoiceForm with the amount in dollars, or None if no invoice matches

        Raises:
            DataFetchError: If the read fails
        """
        logger.info(f"Fetching invoice {invoice_id}...")
        stmt = select(
            Invoice.id,
            Invoice.customer_id,
            Invoice.amount,
            Invoice.status,
        ).where(Invoice.id == invoice_id)

        async with self.db.session() as session:
            row = (await session.execute(stmt)).first()

        if row is None:
            return None

        return schemas.InvoiceForm(
            id=row.id,
            customer_id=row.customer_id,
            # Convert amount from cents to dollars
            amount=row.amount / 100,
            status=row.status,
        )

    @handle_db_errors("Failed to fetch all customers.")
    async def fetch_customers(self) -> List[schemas.CustomerField]:
        """Id and name of every customer, sorted by name."""
        logger.info("Fetching customers...")
        stmt = select(Customer.id, Customer.name).order_by(Customer.name.asc())
        rows = await self._mappings(stmt)
        return [schemas.CustomerField(**row) for row in rows]

    @handle_db_errors("Failed to fetch customer table.")
    async def fetch_filtered_customers(self, query: str) -> List[schemas.FormattedCustomersTable]:
        """
        Fetch customers matching ``query`` with their invoices and totals.

        Args:
            query: Substring to look for in customer name or email

        Returns:
            Customers sorted by name, each with formatted paid and pending totals

        Raises:
            DataFetchError: If the read fails
        """
        logger.info(f"Fetching customers matching '{query}'...")
        stmt = (
            select(Customer)
            .options(selectinload(Customer.invoices))
            .where(contains_filter(query))
            .order_by(Customer.name.asc())
        )
        async with self.db.session() as session:
            customers = (await session.scalars(stmt)).all()

        table = []
        for customer in customers:
            invoices = [schemas.CustomerInvoice.model_validate(i) for i in customer.invoices]
            totals = summarize_invoice_totals(i.model_dump() for i in invoices)
            table.append(
                schemas.FormattedCustomersTable(
                    id=customer.id,
                    name=customer.name,
                    email=customer.email,
                    image_url=customer.image_url,
                    invoices=invoices,
                    total_pending=format_currency(totals["pending"]),
                    total_paid=format_currency(totals["paid"]),
                )
            )
        return table

    @handle_db_errors("Failed to fetch user.")
    async def get_user(self, email: str) -> Optional[schemas.User]:
        """Look up a user by email. Returns None if there is no such user."""
        logger.info("Fetching user...")
        async with self.db.session() as session:
            user = await session.scalar(select(User).where(User.email == email))
        if user is None:
            return None
        return schemas.User.model_validate(user)
