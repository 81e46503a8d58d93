"""Controlador principal del cliente."""

from __future__ import annotations

import logging
from datetime import date

from servidor.domain.models import CompraRegistro, ItemInventario
from servidor.services.inventory_utils import clean_optional_text, compute_total
from shared.errors import ValidationError
from shared.protocol import (
    CompraRegistroDraft,
    IngresoInventarioDraft,
    VentaInventarioRequest,
)

from .compra_details_formatter import format_compra_details_text
from .gateway import ServerGateway
from .validators import (
    validate_compra_draft,
    validate_ingreso_draft,
    validate_venta_request,
)

LOGGER = logging.getLogger(__name__)


class AppController:
    """Coordina acciones de UI y servicios de inventario y compras.

    No guarda copias en memoria: cada lectura vuelve a consultar la base.
    """

    def __init__(self, gateway: ServerGateway) -> None:
        self._gateway = gateway

    # --- Registros de compra -------------------------------------------------

    async def listar_compras(self) -> list[CompraRegistro]:
        """Lista todos los registros de compra."""
        return await self._gateway.get_all_compra_registros()

    async def registrar_compra(self, draft: CompraRegistroDraft) -> None:
        """Valida el draft, calcula el total y guarda la compra como pendiente."""
        validate_compra_draft(draft)
        registro = self._build_compra_registro(draft)
        await self._gateway.add_compra_registro(registro)
        LOGGER.info(
            "Compra registrada desde UI: proveedor=%s, producto=%s, total=%s",
            registro.proveedor,
            registro.producto,
            registro.total,
        )

    async def obtener_compra(self, registro_id: int) -> CompraRegistro:
        """Obtiene un registro de compra; lanza RecordNotFoundError si no existe."""
        return await self._gateway.get_compra_registro_by_id(registro_id)

    async def actualizar_compra(self, registro_id: int, draft: CompraRegistroDraft) -> None:
        """Sobrescribe una compra existente conservando su estado de procesado."""
        validate_compra_draft(draft)
        actual = await self._gateway.get_compra_registro_by_id(registro_id)

        registro = self._build_compra_registro(draft)
        registro.id = actual.id
        registro.esta_procesado = actual.esta_procesado
        await self._gateway.update_compra_registro(registro)
        LOGGER.info("Compra actualizada desde UI: id=%s", registro_id)

    async def eliminar_compra(self, registro_id: int) -> None:
        """Elimina un registro de compra."""
        await self._gateway.delete_compra_registro(registro_id)
        LOGGER.info("Compra eliminada desde UI: id=%s", registro_id)

    async def procesar_compra(self, registro_id: int) -> CompraRegistro:
        """Marca una compra existente como procesada y retorna su estado final."""
        registro = await self._gateway.get_compra_registro_by_id(registro_id)
        if registro.esta_procesado:
            LOGGER.info("Compra ya procesada, sin cambios: id=%s", registro_id)
            return registro

        await self._gateway.procesar_compra_registro(registro_id)
        registro.esta_procesado = True
        LOGGER.info("Compra procesada desde UI: id=%s", registro_id)
        return registro

    async def describir_compra(self, registro_id: int) -> str:
        """Retorna el detalle de una compra como texto ``Campo: valor``."""
        registro = await self._gateway.get_compra_registro_by_id(registro_id)
        return format_compra_details_text(registro)

    @staticmethod
    def calcular_total_preview(cantidad: int, precio_unitario: float) -> float:
        """Calcula el total para mostrarlo en el formulario antes de guardar."""
        if cantidad <= 0 or precio_unitario <= 0:
            return 0.0
        return compute_total(cantidad, precio_unitario)

    # --- Inventario ----------------------------------------------------------

    async def listar_inventario(self) -> list[ItemInventario]:
        """Lista todas las lineas de inventario."""
        return await self._gateway.get_inventario()

    async def buscar_por_codigo(self, codigo: str) -> list[ItemInventario]:
        """Busca lineas de inventario por codigo de producto."""
        codigo_limpio = codigo.strip()
        if not codigo_limpio:
            raise ValidationError("El codigo no puede estar vacio.")
        return await self._gateway.get_inventario_por_codigo(codigo_limpio)

    async def ingresar_producto(self, draft: IngresoInventarioDraft) -> bool:
        """Valida e ingresa una linea de stock al inventario."""
        validate_ingreso_draft(draft)
        agregado = await self._gateway.add_producto(
            codigo=draft.codigo.strip(),
            producto=draft.producto.strip(),
            unidades=draft.unidades,
            kilos=draft.kilos,
            fecha_compra=draft.fecha_compra,
            fecha_registro=draft.fecha_registro,
            fecha_vencimiento=draft.fecha_vencimiento,
            categoria=clean_optional_text(draft.categoria),
            subcategoria=clean_optional_text(draft.subcategoria),
        )
        LOGGER.info("Producto ingresado desde UI: codigo=%s", draft.codigo.strip())
        return agregado

    async def registrar_venta(self, codigo: str, unidades: int, kilos: float) -> bool:
        """Descuenta una venta del inventario; retorna False si el codigo no existe."""
        request = VentaInventarioRequest(
            codigo=codigo.strip(),
            unidades_vendidas=unidades,
            kilos_vendidos=kilos,
        )
        validate_venta_request(request)
        actualizado = await self._gateway.actualizar_inventario(
            request.codigo,
            request.unidades_vendidas,
            request.kilos_vendidos,
        )
        if not actualizado:
            LOGGER.warning("Venta sin efecto, codigo inexistente: %s", request.codigo)
        return actualizado

    async def listar_categorias(self) -> list[str]:
        """Lista categorias disponibles en inventario."""
        return await self._gateway.get_categorias()

    async def listar_subcategorias(self, categoria: str) -> list[str]:
        """Lista subcategorias de una categoria; vacia si no se indica categoria."""
        categoria_limpia = categoria.strip()
        if not categoria_limpia:
            return []
        return await self._gateway.get_subcategorias(categoria_limpia)

    async def registrar_ingreso_fecha(self, codigo: str, fecha: date) -> bool:
        """Registra una fecha de ingreso ampliando el rango de fechas del codigo."""
        codigo_limpio = codigo.strip()
        if not codigo_limpio:
            raise ValidationError("El codigo no puede estar vacio.")
        return await self._gateway.actualizar_fechas_inventario(codigo_limpio, fecha)

    @staticmethod
    def _build_compra_registro(draft: CompraRegistroDraft) -> CompraRegistro:
        """Construye el registro a persistir desde el draft del formulario."""
        return CompraRegistro(
            proveedor=draft.proveedor.strip(),
            producto=draft.producto.strip(),
            cantidad=draft.cantidad,
            precio_unitario=draft.precio_unitario,
            total=compute_total(draft.cantidad, draft.precio_unitario),
            fecha_compra=draft.fecha_compra,
            observaciones=clean_optional_text(draft.observaciones),
        )
