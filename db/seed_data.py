# db/seed_data.py
"""Create the dashboard schema and load placeholder data.

Run with ``python -m db.seed_data``. Rows that already exist are left alone,
so running it twice is harmless.
"""
import asyncio
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Dict, Optional

import bcrypt
import pandas as pd
from sqlalchemy import select

from config import configure_logging, settings

from . import placeholder_data
from .database import Database
from .model import Customer, Invoice, Revenue, User

logger = logging.getLogger(__name__)

REVENUE_CSV = Path(__file__).with_name("revenue_data.csv")

# Stable ids so re-seeding recognises invoices it already inserted
INVOICE_NAMESPACE = uuid.UUID("5b1f2d3e-9a47-4c55-8f0e-6a0d2b7c1e94")


def invoice_id(record: Dict) -> str:
    key = f"{record['customer_id']}:{record['date']}:{record['amount']}"
    return str(uuid.uuid5(INVOICE_NAMESPACE, key))


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode(), bcrypt.gensalt()).decode()


async def seed(db: Database, revenue_csv: Optional[Path] = None) -> Dict[str, int]:
    """Insert placeholder rows that are not present yet.

    Returns:
        Number of rows inserted per table.
    """
    await db.create_all()
    inserted = {"users": 0, "customers": 0, "invoices": 0, "revenue": 0}

    # Read CSV
    df = pd.read_csv(revenue_csv or REVENUE_CSV)

    async with db.session() as session:
        for record in placeholder_data.users:
            existing = await session.scalar(select(User).where(User.email == record["email"]))
            if existing is not None:
                continue
            session.add(User(
                id=record["id"],
                name=record["name"],
                email=record["email"],
                password=hash_password(record["password"]),
            ))
            inserted["users"] += 1

        for record in placeholder_data.customers:
            if await session.get(Customer, record["id"]) is not None:
                continue
            session.add(Customer(**record))
            inserted["customers"] += 1

        # Customers must exist before their invoices
        await session.flush()

        for record in placeholder_data.invoices:
            record_id = invoice_id(record)
            if await session.get(Invoice, record_id) is not None:
                continue
            session.add(Invoice(
                id=record_id,
                customer_id=record["customer_id"],
                amount=record["amount"],
                status=record["status"],
                date=date.fromisoformat(record["date"]),
            ))
            inserted["invoices"] += 1

        for _, row in df.iterrows():
            period = str(row["Month"])
            if await session.get(Revenue, period) is not None:
                continue
            session.add(Revenue(period=period, amount=int(row["Revenue"])))
            inserted["revenue"] += 1

        await session.commit()

    logger.info(f"Seeded rows: {inserted}")
    return inserted


async def main() -> None:
    async with Database.from_settings(settings) as db:
        await seed(db)


if __name__ == "__main__":
    configure_logging(settings)
    asyncio.run(main())
    print("✅ Data seeded successfully!")
