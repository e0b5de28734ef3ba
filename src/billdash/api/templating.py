from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates

from billdash.utils import CUSTOMER_IMAGES, format_currency, format_date_to_local

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["currency"] = format_currency
templates.env.filters["local_date"] = format_date_to_local
templates.env.globals["customer_images"] = CUSTOMER_IMAGES
