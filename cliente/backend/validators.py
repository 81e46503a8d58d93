"""Validaciones para entradas del cliente."""

from __future__ import annotations

from shared.errors import ValidationError
from shared.protocol import (
    CompraRegistroDraft,
    IngresoInventarioDraft,
    VentaInventarioRequest,
)


def validate_compra_draft(draft: CompraRegistroDraft) -> None:
    """Valida los campos minimos de un registro de compra."""
    missing_fields: list[str] = []

    if not draft.proveedor.strip():
        missing_fields.append("Proveedor")
    if not draft.producto.strip():
        missing_fields.append("Producto")
    if draft.cantidad <= 0:
        missing_fields.append("Cantidad (debe ser mayor a 0)")
    if draft.precio_unitario <= 0:
        missing_fields.append("Precio unitario (debe ser mayor a 0)")

    if missing_fields:
        raise ValidationError(
            "Completa los campos obligatorios: " + ", ".join(missing_fields)
        )


def validate_ingreso_draft(draft: IngresoInventarioDraft) -> None:
    """Valida una linea de stock antes de ingresarla al inventario."""
    missing_fields: list[str] = []

    if not draft.codigo.strip():
        missing_fields.append("Codigo")
    if not draft.producto.strip():
        missing_fields.append("Producto")
    if draft.unidades < 0:
        missing_fields.append("Unidades (no puede ser negativo)")
    if draft.kilos < 0:
        missing_fields.append("Kilos (no puede ser negativo)")

    if missing_fields:
        raise ValidationError(
            "Completa los campos obligatorios: " + ", ".join(missing_fields)
        )

    if draft.fecha_registro < draft.fecha_compra:
        raise ValidationError("La fecha de registro no puede ser anterior a la fecha de compra.")

    if draft.fecha_vencimiento is not None and draft.fecha_vencimiento < draft.fecha_compra:
        raise ValidationError("La fecha de vencimiento no puede ser anterior a la fecha de compra.")


def validate_venta_request(request: VentaInventarioRequest) -> None:
    """Valida cantidades vendidas a descontar del inventario."""
    if not request.codigo.strip():
        raise ValidationError("El codigo no puede estar vacio.")

    if request.unidades_vendidas < 0 or request.kilos_vendidos < 0:
        raise ValidationError("Las cantidades vendidas no pueden ser negativas.")

    if request.unidades_vendidas == 0 and request.kilos_vendidos == 0:
        raise ValidationError("Debes indicar unidades o kilos vendidos.")
