#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the auth API.

- Integer autoincrement primary key
- created_at / updated_at timestamps stored as naive UTC

Notes:
- Timestamps are set Python-side (utcnow) so they are populated on the
  instance right after flush, even with expire_on_commit=False.
- Naive UTC is what SQLite hands back, so comparisons stay consistent
  across SQLite and Postgres.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """Base mixin for persistent entities with a numeric identity."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
