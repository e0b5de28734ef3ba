# src/billdash/db/base.py
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# -----------------------------------------------------------------------------
# Declarative Base with naming conventions (great for Alembic autogenerate)
# -----------------------------------------------------------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base for all models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def generate_uuid_str() -> str:
    return str(uuid.uuid4())


class UUIDMixin:
    """Opaque string primary key, assigned on insert."""
    id: Mapped[str] = mapped_column(
        sa.String(36), primary_key=True, default=generate_uuid_str, nullable=False
    )


__all__ = ["Base", "UUIDMixin", "generate_uuid_str", "NAMING_CONVENTION"]
