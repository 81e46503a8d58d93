"""Modelos de dominio de inventario y compras."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(slots=True)
class ItemInventario:
    """Representa una linea de stock en inventario."""

    id: int
    codigo: str
    producto: str
    unidades: int
    kilos: float
    fecha_mas_antigua: date
    fecha_mas_nueva: date
    fecha_vencimiento: date | None = None
    categoria: str | None = None
    subcategoria: str | None = None


@dataclass(slots=True)
class CompraRegistro:
    """Representa un registro de compra pendiente o ya procesado a inventario."""

    proveedor: str
    producto: str
    cantidad: int
    precio_unitario: float
    total: float
    fecha_compra: date
    observaciones: str | None = None
    esta_procesado: bool = False
    id: int = 0
