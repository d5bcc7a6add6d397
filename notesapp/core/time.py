"""
Helpers de fecha/hora: ahora en UTC, ISO-8601 y etiqueta corta para listas.
"""
from __future__ import annotations

from datetime import datetime, timezone


MONTHS_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # Asegura timezone-aware en UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    return as_utc(dt).isoformat()


def parse_iso(value: str | datetime) -> datetime:
    """Acepta ISO-8601 con 'Z' o con offset (formato de PostgREST)."""
    if isinstance(value, datetime):
        return as_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def date_label(dt: datetime) -> str:
    """Fecha corta para tarjetas de nota, p.ej. 'Jan 5, 2025'."""
    d = as_utc(dt)
    return f"{MONTHS_SHORT[d.month - 1]} {d.day}, {d.year}"
