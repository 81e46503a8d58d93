"""Utilidades para mapear valores de inventario y compras hacia/desde SQLite."""

from __future__ import annotations

from datetime import date, datetime

from parametros import DATE_FORMAT
from shared.errors import ServiceError


def format_fecha(value: date) -> str:
    """Serializa una fecha como texto ``yyyy-MM-dd``."""
    return value.strftime(DATE_FORMAT)


def format_fecha_opcional(value: date | None) -> str | None:
    """Serializa una fecha opcional; ``None`` se persiste como NULL."""
    if value is None:
        return None
    return format_fecha(value)


def parse_fecha(value: str) -> date:
    """Convierte texto ``yyyy-MM-dd`` (con o sin hora) en fecha."""
    text = value.strip()
    try:
        return datetime.strptime(text[:10], DATE_FORMAT).date()
    except ValueError as exc:
        raise ServiceError(f"Fecha invalida almacenada en base de datos: {value!r}") from exc


def parse_fecha_opcional(value: str | None) -> date | None:
    """Convierte texto de fecha opcional; vacio o NULL retorna ``None``."""
    if value is None or not value.strip():
        return None
    return parse_fecha(value)


def bool_to_int(value: bool) -> int:
    """Mapea un booleano a la representacion entera 0/1 de SQLite."""
    return 1 if value else 0


def int_to_bool(value: int | None) -> bool:
    """Mapea la columna entera 0/1 a booleano."""
    return value == 1


def compute_total(cantidad: int, precio_unitario: float) -> float:
    """Calcula el total de una compra redondeado a centavos."""
    return round(cantidad * precio_unitario, 2)


def format_monto(amount: float) -> str:
    """Formatea un monto con separador de miles y dos decimales."""
    return f"${amount:,.2f}"


def clean_optional_text(value: str | None) -> str | None:
    """Normaliza texto opcional: vacio o solo espacios se guarda como NULL."""
    if value is None:
        return None
    text = value.strip()
    return text or None
