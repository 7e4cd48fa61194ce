"""
Shared SQLModel base and column defaults for Herit entities.

Timestamps are stored as naive UTC so SQLite and Postgres round-trip them
identically; ids are UUID4 strings.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())
