"""Pure formatter for purchase record details text."""

from __future__ import annotations

import math
import re

from servidor.domain.models import CompraRegistro
from servidor.services.inventory_utils import format_fecha, format_monto

_SIN_OBSERVACIONES = "-"


def format_compra_details_text(registro: CompraRegistro) -> str:
    """Builds the details block as ``Campo: valor`` lines."""
    estado = "Procesado" if registro.esta_procesado else "Pendiente"
    lines = [
        f"Proveedor: {registro.proveedor.strip()}",
        f"Producto: {registro.producto.strip()}",
        f"Cantidad: {registro.cantidad}",
        f"Precio unitario: {format_monto(registro.precio_unitario)}",
        f"Total: {format_monto(registro.total)}",
        f"Fecha de compra: {format_fecha(registro.fecha_compra)}",
        f"Estado: {estado}",
        f"Observaciones: {_friendly_observations(registro.observaciones)}",
    ]
    if not total_matches(registro):
        lines.append("Advertencia: el total no coincide con cantidad x precio unitario")
    return "\n".join(lines)


def total_matches(registro: CompraRegistro) -> bool:
    """Returns True when total equals cantidad * precio_unitario (to the cent)."""
    expected = registro.cantidad * registro.precio_unitario
    return math.isclose(registro.total, expected, abs_tol=0.005)


def _friendly_observations(observaciones: str | None) -> str:
    """Collapses line breaks and whitespace of the notes into a single line."""
    text = (observaciones or "").strip()
    text = re.sub(r"[\r\n]+", ", ", text)
    text = re.sub(r"\s+", " ", text)
    text = text.strip(" ,")
    return text or _SIN_OBSERVACIONES
