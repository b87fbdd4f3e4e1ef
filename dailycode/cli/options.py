"""Parsing of CLI option values."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

import typer


def parse_date(value: Optional[str]) -> Optional[date]:
    """YYYY-MM-DD to a date; None passes through."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


def parse_user_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise typer.BadParameter(f"Not a user id: {value!r}") from None
