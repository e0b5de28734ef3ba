#!/usr/bin/env python3
# src/billdash/cli.py
from __future__ import annotations

import asyncio
import datetime as dt

import click
import sqlalchemy as sa
from rich.console import Console
from rich.table import Table

from billdash.db.base import Base
from billdash.db.models import Customer, Invoice
from billdash.db.session import get_engine, get_sessionmaker
from billdash.services.queries import fetch_filtered_customers

console = Console()

DEMO_CUSTOMERS = [
    {"name": "Evil Rabbit", "email": "evil@rabbit.com", "image_url": "/customers/evil-rabbit.png"},
    {"name": "Delba de Oliveira", "email": "delba@oliveira.com", "image_url": "/customers/delba-de-oliveira.png"},
    {"name": "Lee Robinson", "email": "lee@robinson.com", "image_url": "/customers/lee-robinson.png"},
    {"name": "Michael Novotny", "email": "michael@novotny.com", "image_url": "/customers/michael-novotny.png"},
    {"name": "Amy Burns", "email": "amy@burns.com", "image_url": "/customers/amy-burns.png"},
    {"name": "Balazs Orban", "email": "balazs@orban.com", "image_url": "/customers/balazs-orban.png"},
]

# (customer index, cents, status, days ago)
DEMO_INVOICES = [
    (0, 15795, "pending", 3),
    (1, 20348, "pending", 5),
    (4, 3040, "paid", 40),
    (3, 44800, "paid", 60),
    (5, 34577, "pending", 75),
    (2, 54246, "pending", 90),
    (0, 666, "pending", 120),
    (3, 32545, "paid", 150),
    (4, 1250, "paid", 180),
]


async def _create_tables() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _seed() -> tuple[int, int]:
    async with get_sessionmaker()() as session:
        existing = (await session.execute(sa.select(sa.func.count(Customer.id)))).scalar_one()
        if existing:
            return 0, 0
        customers = [Customer(**c) for c in DEMO_CUSTOMERS]
        session.add_all(customers)
        await session.flush()
        today = dt.date.today()
        session.add_all(
            Invoice(
                customer_id=customers[idx].id,
                amount=cents,
                status=status,
                date=today - dt.timedelta(days=days),
            )
            for idx, cents, status, days in DEMO_INVOICES
        )
        await session.commit()
    return len(DEMO_CUSTOMERS), len(DEMO_INVOICES)


async def _list_customers(query: str):
    async with get_sessionmaker()() as session:
        return await fetch_filtered_customers(session, query)


@click.group()
def cli():
    """billdash admin commands."""


@cli.command("init-db")
def init_db():
    """Create the customers and invoices tables (use Alembic in production)."""
    asyncio.run(_create_tables())
    console.print("[green]Tables created.[/green]")


@cli.command()
def seed():
    """Insert demo customers and invoices into an empty database."""
    n_customers, n_invoices = asyncio.run(_seed())
    if not n_customers:
        console.print("[yellow]Customers already present; nothing seeded.[/yellow]")
        return
    console.print(f"[green]Seeded {n_customers} customers and {n_invoices} invoices.[/green]")


@cli.command()
@click.option("--query", "-q", default="", help="Filter by name or email.")
def customers(query: str):
    """Print customers with invoice totals."""
    rows = asyncio.run(_list_customers(query))
    table = Table(title="Customers")
    for col in ("Name", "Email", "Invoices", "Pending", "Paid"):
        table.add_column(col)
    for r in rows:
        table.add_row(r.name, r.email, str(r.total_invoices), r.total_pending, r.total_paid)
    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the dashboard with uvicorn."""
    import uvicorn

    uvicorn.run("billdash.main:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
