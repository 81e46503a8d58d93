"""Gateway de comunicacion cliente-servidor."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from datetime import date
from typing import Protocol, TypeVar

from servidor.domain.models import CompraRegistro, ItemInventario
from servidor.services.inventario_database import InventarioDatabaseService
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ServerGateway(Protocol):
    """Interfaz de acceso del cliente a servicios del servidor."""

    async def get_all_compra_registros(self) -> list[CompraRegistro]:
        """Solicita todos los registros de compra."""

    async def add_compra_registro(self, registro: CompraRegistro) -> None:
        """Solicita insertar un registro de compra."""

    async def get_compra_registro_by_id(self, registro_id: int) -> CompraRegistro:
        """Solicita un registro de compra por Id."""

    async def update_compra_registro(self, registro: CompraRegistro) -> None:
        """Solicita sobrescribir un registro de compra."""

    async def delete_compra_registro(self, registro_id: int) -> None:
        """Solicita eliminar un registro de compra."""

    async def procesar_compra_registro(self, registro_id: int) -> None:
        """Solicita marcar un registro de compra como procesado."""

    async def add_producto(
        self,
        codigo: str,
        producto: str,
        unidades: int,
        kilos: float,
        fecha_compra: date,
        fecha_registro: date,
        fecha_vencimiento: date | None,
        categoria: str | None = None,
        subcategoria: str | None = None,
    ) -> bool:
        """Solicita ingresar una linea de inventario."""

    async def actualizar_inventario(
        self,
        codigo: str,
        unidades_vendidas: int,
        kilos_vendidos: float,
    ) -> bool:
        """Solicita descontar una venta del inventario."""

    async def get_categorias(self) -> list[str]:
        """Solicita categorias de inventario."""

    async def get_subcategorias(self, categoria: str) -> list[str]:
        """Solicita subcategorias de una categoria."""

    async def get_inventario(self) -> list[ItemInventario]:
        """Solicita todas las lineas de inventario."""

    async def get_inventario_por_codigo(self, codigo: str) -> list[ItemInventario]:
        """Solicita lineas de inventario de un codigo."""

    async def actualizar_fechas_inventario(self, codigo: str, fecha_ingresada: date) -> bool:
        """Solicita ampliar el rango de fechas de un codigo."""


class LocalServerGateway:
    """Implementacion local del gateway usando el servicio SQLite en proceso."""

    def __init__(
        self,
        database_service: InventarioDatabaseService | None = None,
    ) -> None:
        self._database_service = database_service or InventarioDatabaseService()

    async def get_all_compra_registros(self) -> list[CompraRegistro]:
        """Lista registros de compra delegando en el servicio."""
        return await self._call(
            self._database_service.get_all_compra_registros(),
            "No fue posible obtener los registros de compra.",
        )

    async def add_compra_registro(self, registro: CompraRegistro) -> None:
        """Agrega un registro de compra."""
        await self._call(
            self._database_service.add_compra_registro(registro),
            "No fue posible guardar el registro de compra.",
        )

    async def get_compra_registro_by_id(self, registro_id: int) -> CompraRegistro:
        """Obtiene un registro de compra; RecordNotFoundError se propaga tal cual."""
        return await self._call(
            self._database_service.get_compra_registro_by_id(registro_id),
            "No fue posible obtener el registro de compra.",
        )

    async def update_compra_registro(self, registro: CompraRegistro) -> None:
        """Actualiza un registro de compra."""
        await self._call(
            self._database_service.update_compra_registro(registro),
            "No fue posible actualizar el registro de compra.",
        )

    async def delete_compra_registro(self, registro_id: int) -> None:
        """Elimina un registro de compra."""
        await self._call(
            self._database_service.delete_compra_registro(registro_id),
            "No fue posible eliminar el registro de compra.",
        )

    async def procesar_compra_registro(self, registro_id: int) -> None:
        """Marca un registro de compra como procesado."""
        await self._call(
            self._database_service.procesar_compra_registro(registro_id),
            "No fue posible procesar el registro de compra.",
        )

    async def add_producto(
        self,
        codigo: str,
        producto: str,
        unidades: int,
        kilos: float,
        fecha_compra: date,
        fecha_registro: date,
        fecha_vencimiento: date | None,
        categoria: str | None = None,
        subcategoria: str | None = None,
    ) -> bool:
        """Ingresa una linea al inventario."""
        return await self._call(
            self._database_service.add_producto(
                codigo=codigo,
                producto=producto,
                unidades=unidades,
                kilos=kilos,
                fecha_compra=fecha_compra,
                fecha_registro=fecha_registro,
                fecha_vencimiento=fecha_vencimiento,
                categoria=categoria,
                subcategoria=subcategoria,
            ),
            "No fue posible agregar el producto al inventario.",
        )

    async def actualizar_inventario(
        self,
        codigo: str,
        unidades_vendidas: int,
        kilos_vendidos: float,
    ) -> bool:
        """Descuenta una venta del inventario."""
        return await self._call(
            self._database_service.actualizar_inventario(
                codigo, unidades_vendidas, kilos_vendidos
            ),
            "No fue posible actualizar el inventario.",
        )

    async def get_categorias(self) -> list[str]:
        """Lista categorias de inventario."""
        return await self._call(
            self._database_service.get_categorias(),
            "No fue posible obtener las categorias.",
        )

    async def get_subcategorias(self, categoria: str) -> list[str]:
        """Lista subcategorias de una categoria."""
        return await self._call(
            self._database_service.get_subcategorias(categoria),
            "No fue posible obtener las subcategorias.",
        )

    async def get_inventario(self) -> list[ItemInventario]:
        """Lista todas las lineas de inventario."""
        return await self._call(
            self._database_service.get_inventario(),
            "No fue posible obtener el inventario.",
        )

    async def get_inventario_por_codigo(self, codigo: str) -> list[ItemInventario]:
        """Busca lineas de inventario por codigo."""
        return await self._call(
            self._database_service.get_inventario_por_codigo(codigo),
            "No fue posible buscar el codigo en inventario.",
        )

    async def actualizar_fechas_inventario(self, codigo: str, fecha_ingresada: date) -> bool:
        """Actualiza el rango de fechas de un codigo."""
        return await self._call(
            self._database_service.actualizar_fechas_inventario(codigo, fecha_ingresada),
            "No fue posible actualizar las fechas del inventario.",
        )

    @staticmethod
    async def _call(operation: Awaitable[T], error_message: str) -> T:
        """Espera la operacion y traduce fallos inesperados a ServiceError."""
        try:
            return await operation
        except ServiceError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado en gateway: %s", error_message)
            raise ServiceError(error_message) from exc
