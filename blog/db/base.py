"""Declarative base shared by the blog models."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Every table gets an integer surrogate key; models name their own tables."""

    id: Mapped[int] = mapped_column(primary_key=True)


__all__ = ["Base"]
