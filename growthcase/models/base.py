"""Shared helpers for domain models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    """Opaque record identifier."""
    return uuid.uuid4().hex
