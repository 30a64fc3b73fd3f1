from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base

REPEAT_MAX_LENGTH = 128


class Task(Base):
    __tablename__ = "scheduler"
    __table_args__ = (
        CheckConstraint(f"length(repeat) <= {REPEAT_MAX_LENGTH}", name="ck_scheduler_repeat_length"),
        Index("ix_scheduler_date", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(8), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    comment: Mapped[str] = mapped_column(Text, default="")
    repeat: Mapped[str] = mapped_column(String(REPEAT_MAX_LENGTH), default="")

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, date={self.date!r}, title={self.title!r}, repeat={self.repeat!r})"
