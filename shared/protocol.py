"""DTOs del protocolo cliente-servidor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(slots=True)
class CompraRegistroDraft:
    """DTO para capturar datos del formulario de registro de compra."""

    proveedor: str
    producto: str
    cantidad: int
    precio_unitario: float
    fecha_compra: date
    observaciones: str = ""


@dataclass(slots=True)
class IngresoInventarioDraft:
    """DTO para capturar el ingreso de una linea de stock al inventario."""

    codigo: str
    producto: str
    unidades: int
    kilos: float
    fecha_compra: date
    fecha_registro: date
    fecha_vencimiento: date | None = None
    categoria: str = ""
    subcategoria: str = ""


@dataclass(slots=True)
class VentaInventarioRequest:
    """Solicitud para descontar unidades y kilos vendidos de un codigo."""

    codigo: str
    unidades_vendidas: int
    kilos_vendidos: float
