# src/billdash/services/results.py
"""Result variants shared by every mutation.

A mutation returns exactly one of:

- ``Saved``: row written; ``redirect_to`` is the listing the caller moves to.
- ``Deleted``: row removed; the caller stays where it is.
- ``Invalid``: the form failed validation; nothing was written.
- ``Failed``: the database rejected the statement.

``state()`` gives the payload a form is re-rendered with.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Saved:
    id: str
    redirect_to: str
    ok: bool = field(default=True, init=False)

    def state(self) -> dict[str, Any]:
        return {"message": None}


@dataclass(frozen=True)
class Deleted:
    id: str
    message: str
    ok: bool = field(default=True, init=False)

    def state(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class Invalid:
    errors: dict[str, list[str]]
    message: str
    ok: bool = field(default=False, init=False)

    def state(self) -> dict[str, Any]:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class Failed:
    message: str
    ok: bool = field(default=False, init=False)

    def state(self) -> dict[str, Any]:
        # no "errors" key: persistence failures carry no field detail
        return {"message": self.message}


MutationResult = Union[Saved, Deleted, Invalid, Failed]
