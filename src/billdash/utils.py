# src/billdash/utils.py
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import List, Union

# Avatar assets offered by the customer forms (served from /static/customers).
CUSTOMER_IMAGES = [
    "/customers/amy-burns.png",
    "/customers/balazs-orban.png",
    "/customers/delba-de-oliveira.png",
    "/customers/evil-rabbit.png",
    "/customers/lee-robinson.png",
    "/customers/michael-novotny.png",
]


def format_currency(cents: int | None) -> str:
    """Render an amount in cents as US dollars, e.g. 123456 -> "$1,234.56"."""
    value = Decimal(cents or 0) / 100
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def cents_to_dollars(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def format_date_to_local(value: Union[dt.date, str]) -> str:
    if isinstance(value, str):
        value = dt.date.fromisoformat(value)
    return f"{value:%b} {value.day}, {value.year}"


def generate_pagination(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """Page links for a listing; "..." marks a gap."""
    if total_pages <= 7:
        return list(range(1, total_pages + 1))
    if current_page <= 3:
        return [1, 2, 3, "...", total_pages - 1, total_pages]
    if current_page >= total_pages - 2:
        return [1, 2, "...", total_pages - 2, total_pages - 1, total_pages]
    return [1, "...", current_page - 1, current_page, current_page + 1, "...", total_pages]
