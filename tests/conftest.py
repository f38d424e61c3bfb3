import uuid
from datetime import date, timedelta

import pytest
import pytest_asyncio

from dashboard import QueryService
from db.database import Database
from db.model import Customer, Invoice, Revenue, User


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh on-disk SQLite database with the schema created."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'dashboard_test.db'}")
    database.init()
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def empty_db(tmp_path):
    """Initialised database with no tables, so every read fails."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'no_schema.db'}")
    database.init()
    yield database
    await database.dispose()


@pytest.fixture
def service(db):
    return QueryService(db)


@pytest.fixture
def add_rows(db):
    """Insert ORM rows and commit."""
    async def _add_rows(*rows):
        async with db.session() as session:
            session.add_all(rows)
            await session.commit()
        return rows
    return _add_rows


def make_customer(name='Alice Smith', email='alice@example.com', **kwargs):
    return Customer(
        id=kwargs.pop('id', str(uuid.uuid4())),
        name=name,
        email=email,
        image_url=kwargs.pop('image_url', f"/customers/{name.lower().replace(' ', '-')}.png"),
        **kwargs
    )


def make_invoice(customer, amount=1000, status='paid', on=date(2023, 1, 1), **kwargs):
    return Invoice(
        id=kwargs.pop('id', str(uuid.uuid4())),
        customer_id=customer.id,
        amount=amount,
        status=status,
        date=on,
        **kwargs
    )


def make_invoices(customer, count, start=date(2023, 1, 1), **kwargs):
    """``count`` invoices on consecutive days starting at ``start``."""
    return [
        make_invoice(customer, amount=100 * (i + 1), on=start + timedelta(days=i), **kwargs)
        for i in range(count)
    ]


def make_revenue(period, amount):
    return Revenue(period=period, amount=amount)


def make_user(email='user@nextmail.com', name='User', password='hashed'):
    return User(id=str(uuid.uuid4()), name=name, email=email, password=password)
