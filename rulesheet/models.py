from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


LIST_ID_MAX_LENGTH = 64
LIST_NAME_MAX_LENGTH = 120


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


def touch_timestamps(mapper, connection, target) -> None:  # pragma: no cover - SQLAlchemy hook
    now = datetime.utcnow()
    if getattr(target, "created_at", None) is None:
        target.created_at = now
    target.updated_at = now


class ArmyList(TimestampMixin, Base):
    """A stored army list; the roster itself lives in ``data_json``."""

    __tablename__ = "army_lists"

    id: Mapped[str] = mapped_column(String(LIST_ID_MAX_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(LIST_NAME_MAX_LENGTH), nullable=False)
    game: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    data_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")


event.listen(ArmyList, "before_insert", touch_timestamps)
event.listen(ArmyList, "before_update", touch_timestamps)
