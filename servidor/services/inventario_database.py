"""Servicio de acceso a datos de inventario y registros de compra."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from parametros import DATABASE_PATH
from servidor.domain.models import CompraRegistro, ItemInventario
from servidor.services.inventory_utils import (
    bool_to_int,
    clean_optional_text,
    format_fecha,
    format_fecha_opcional,
    int_to_bool,
    parse_fecha,
    parse_fecha_opcional,
)
from shared.db_schema import (
    COMPRA_REGISTROS_COLUMNS,
    COMPRA_REGISTROS_TABLE,
    CREATE_TABLES_SQL,
    INVENTARIO_COLUMNS,
    INVENTARIO_TABLE,
    build_column_list,
    build_named_params,
)
from shared.errors import RecordNotFoundError, ServiceError

LOGGER = logging.getLogger(__name__)

_SELECT_COMPRAS_SQL = (
    f"SELECT {build_column_list(COMPRA_REGISTROS_COLUMNS)} FROM {COMPRA_REGISTROS_TABLE}"
)
_SELECT_COMPRA_BY_ID_SQL = f"{_SELECT_COMPRAS_SQL} WHERE Id = :Id"
_INSERT_COMPRA_SQL = (
    f"INSERT INTO {COMPRA_REGISTROS_TABLE} "
    f"({build_column_list(COMPRA_REGISTROS_COLUMNS, include_id=False)}) "
    f"VALUES ({build_named_params(COMPRA_REGISTROS_COLUMNS)})"
)
_UPDATE_COMPRA_SQL = f"""
    UPDATE {COMPRA_REGISTROS_TABLE}
    SET Proveedor = :Proveedor, Producto = :Producto, Cantidad = :Cantidad,
        PrecioUnitario = :PrecioUnitario, Total = :Total, Observaciones = :Observaciones,
        FechaCompra = :FechaCompra, EstaProcesado = :EstaProcesado
    WHERE Id = :Id
"""
_DELETE_COMPRA_SQL = f"DELETE FROM {COMPRA_REGISTROS_TABLE} WHERE Id = :Id"
_PROCESAR_COMPRA_SQL = f"UPDATE {COMPRA_REGISTROS_TABLE} SET EstaProcesado = 1 WHERE Id = :Id"

_SELECT_INVENTARIO_SQL = (
    f"SELECT {build_column_list(INVENTARIO_COLUMNS)} FROM {INVENTARIO_TABLE}"
)
_SELECT_INVENTARIO_BY_CODIGO_SQL = f"{_SELECT_INVENTARIO_SQL} WHERE Codigo = :Codigo"
_INSERT_INVENTARIO_SQL = (
    f"INSERT INTO {INVENTARIO_TABLE} "
    f"({build_column_list(INVENTARIO_COLUMNS, include_id=False)}) "
    f"VALUES ({build_named_params(INVENTARIO_COLUMNS)})"
)
_DESCONTAR_INVENTARIO_SQL = f"""
    UPDATE {INVENTARIO_TABLE}
    SET Unidades = Unidades - :Unidades, Kilos = Kilos - :Kilos
    WHERE Codigo = :Codigo
"""
# min/max escalares de SQLite; las fechas ISO se ordenan como texto.
_ACTUALIZAR_FECHAS_SQL = f"""
    UPDATE {INVENTARIO_TABLE}
    SET FechaMasAntigua = MIN(FechaMasAntigua, :Fecha),
        FechaMasNueva = MAX(FechaMasNueva, :Fecha)
    WHERE Codigo = :Codigo
"""
_SELECT_CATEGORIAS_SQL = f"""
    SELECT DISTINCT Categoria FROM {INVENTARIO_TABLE}
    WHERE Categoria IS NOT NULL AND TRIM(Categoria) <> ''
    ORDER BY Categoria
"""
_SELECT_SUBCATEGORIAS_SQL = f"""
    SELECT DISTINCT SubCategoria FROM {INVENTARIO_TABLE}
    WHERE Categoria = :Categoria AND SubCategoria IS NOT NULL AND TRIM(SubCategoria) <> ''
    ORDER BY SubCategoria
"""


class InventarioDatabaseService:
    """Traduce llamadas tipadas a sentencias SQL parametrizadas sobre SQLite.

    Cada operacion abre su propia conexion (``NullPool``), ejecuta una sola
    sentencia y la cierra. No hay transacciones que abarquen varias
    operaciones ni bloqueos adicionales a los del motor.
    """

    def __init__(self, database_path: Path = DATABASE_PATH) -> None:
        self._database_path = database_path
        self._engine: AsyncEngine = create_async_engine(
            URL.create("sqlite+aiosqlite", database=str(database_path)),
            poolclass=NullPool,
        )
        self._ensure_tables_exist()

    @property
    def database_path(self) -> Path:
        """Ruta del archivo SQLite usado por el servicio."""
        return self._database_path

    async def dispose(self) -> None:
        """Libera recursos del engine asincrono."""
        await self._engine.dispose()

    def _ensure_tables_exist(self) -> None:
        """Crea las tablas si no existen (idempotente, sin migraciones)."""
        try:
            self._database_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ServiceError(
                f"No se pudo crear/acceder al directorio de la base de datos: "
                f"{self._database_path.parent}"
            ) from exc

        engine = create_engine(
            URL.create("sqlite", database=str(self._database_path)),
            poolclass=NullPool,
        )
        try:
            with engine.begin() as connection:
                for statement in CREATE_TABLES_SQL:
                    connection.execute(text(statement))
        finally:
            engine.dispose()

        LOGGER.info("Tablas de inventario verificadas en: %s", self._database_path)

    # --- Registros de compra -------------------------------------------------

    async def get_all_compra_registros(self) -> list[CompraRegistro]:
        """Retorna todos los registros de compra, sin orden garantizado."""
        rows = await self._fetch_all(_SELECT_COMPRAS_SQL)
        LOGGER.debug("Registros de compra leidos: %d", len(rows))
        return [self._row_to_compra_registro(row) for row in rows]

    async def add_compra_registro(self, registro: CompraRegistro) -> None:
        """Inserta un registro de compra; el Id lo asigna la base de datos."""
        await self._execute(_INSERT_COMPRA_SQL, self._compra_registro_params(registro))
        LOGGER.info(
            "Registro de compra agregado: proveedor=%s, producto=%s",
            registro.proveedor,
            registro.producto,
        )

    async def get_compra_registro_by_id(self, registro_id: int) -> CompraRegistro:
        """Retorna un registro de compra por Id o lanza RecordNotFoundError."""
        rows = await self._fetch_all(_SELECT_COMPRA_BY_ID_SQL, {"Id": registro_id})
        if not rows:
            raise RecordNotFoundError("Registro no encontrado")
        return self._row_to_compra_registro(rows[0])

    async def update_compra_registro(self, registro: CompraRegistro) -> None:
        """Sobrescribe la fila completa del registro; sin efecto si el Id no existe."""
        params = self._compra_registro_params(registro)
        params["Id"] = registro.id
        rowcount = await self._execute(_UPDATE_COMPRA_SQL, params)
        LOGGER.info("Registro de compra actualizado: id=%s, filas=%d", registro.id, rowcount)

    async def delete_compra_registro(self, registro_id: int) -> None:
        """Elimina el registro de compra; sin efecto si el Id no existe."""
        rowcount = await self._execute(_DELETE_COMPRA_SQL, {"Id": registro_id})
        LOGGER.info("Registro de compra eliminado: id=%s, filas=%d", registro_id, rowcount)

    async def procesar_compra_registro(self, registro_id: int) -> None:
        """Marca el registro como procesado; idempotente y sin efecto si no existe."""
        rowcount = await self._execute(_PROCESAR_COMPRA_SQL, {"Id": registro_id})
        LOGGER.info("Registro de compra procesado: id=%s, filas=%d", registro_id, rowcount)

    # --- Inventario ----------------------------------------------------------

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
        """Inserta una linea de inventario y retorna True si se agrego la fila."""
        params = {
            "Codigo": codigo,
            "Producto": producto,
            "Unidades": unidades,
            "Kilos": kilos,
            "FechaMasAntigua": format_fecha(fecha_compra),
            "FechaMasNueva": format_fecha(fecha_registro),
            "FechaVencimiento": format_fecha_opcional(fecha_vencimiento),
            "Categoria": clean_optional_text(categoria),
            "SubCategoria": clean_optional_text(subcategoria),
        }
        rowcount = await self._execute(_INSERT_INVENTARIO_SQL, params)
        LOGGER.info("Producto agregado a inventario: codigo=%s, unidades=%d", codigo, unidades)
        return rowcount == 1

    async def actualizar_inventario(
        self,
        codigo: str,
        unidades_vendidas: int,
        kilos_vendidos: float,
    ) -> bool:
        """Descuenta unidades y kilos vendidos de las lineas del codigo."""
        rowcount = await self._execute(
            _DESCONTAR_INVENTARIO_SQL,
            {"Codigo": codigo, "Unidades": unidades_vendidas, "Kilos": kilos_vendidos},
        )
        LOGGER.info(
            "Inventario descontado: codigo=%s, unidades=%d, kilos=%s, filas=%d",
            codigo,
            unidades_vendidas,
            kilos_vendidos,
            rowcount,
        )
        return rowcount > 0

    async def get_categorias(self) -> list[str]:
        """Retorna categorias distintas registradas en inventario."""
        rows = await self._fetch_all(_SELECT_CATEGORIAS_SQL)
        return [row["Categoria"] for row in rows]

    async def get_subcategorias(self, categoria: str) -> list[str]:
        """Retorna subcategorias distintas de una categoria."""
        rows = await self._fetch_all(_SELECT_SUBCATEGORIAS_SQL, {"Categoria": categoria})
        return [row["SubCategoria"] for row in rows]

    async def get_inventario(self) -> list[ItemInventario]:
        """Retorna todas las lineas de inventario, sin orden garantizado."""
        rows = await self._fetch_all(_SELECT_INVENTARIO_SQL)
        LOGGER.debug("Lineas de inventario leidas: %d", len(rows))
        return [self._row_to_item_inventario(row) for row in rows]

    async def get_inventario_por_codigo(self, codigo: str) -> list[ItemInventario]:
        """Retorna las lineas de inventario de un codigo de producto."""
        rows = await self._fetch_all(_SELECT_INVENTARIO_BY_CODIGO_SQL, {"Codigo": codigo})
        return [self._row_to_item_inventario(row) for row in rows]

    async def actualizar_fechas_inventario(self, codigo: str, fecha_ingresada: date) -> bool:
        """Amplia el rango de fechas mas antigua/nueva para incluir la fecha ingresada."""
        rowcount = await self._execute(
            _ACTUALIZAR_FECHAS_SQL,
            {"Codigo": codigo, "Fecha": format_fecha(fecha_ingresada)},
        )
        LOGGER.info(
            "Fechas de inventario actualizadas: codigo=%s, fecha=%s, filas=%d",
            codigo,
            fecha_ingresada,
            rowcount,
        )
        return rowcount > 0

    # --- Helpers -------------------------------------------------------------

    async def _fetch_all(
        self,
        statement: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[Mapping[str, Any]]:
        """Ejecuta una consulta en una conexion nueva y retorna las filas."""
        async with self._engine.connect() as connection:
            result = await connection.execute(text(statement), dict(params or {}))
            return list(result.mappings().all())

    async def _execute(self, statement: str, params: Mapping[str, Any]) -> int:
        """Ejecuta una sentencia de escritura con commit y retorna filas afectadas."""
        async with self._engine.begin() as connection:
            result = await connection.execute(text(statement), dict(params))
            return result.rowcount

    @staticmethod
    def _compra_registro_params(registro: CompraRegistro) -> dict[str, Any]:
        """Mapea un registro de compra a parametros nombrados."""
        return {
            "Proveedor": registro.proveedor,
            "Producto": registro.producto,
            "Cantidad": registro.cantidad,
            "PrecioUnitario": registro.precio_unitario,
            "Total": registro.total,
            "Observaciones": registro.observaciones,
            "FechaCompra": format_fecha(registro.fecha_compra),
            "EstaProcesado": bool_to_int(registro.esta_procesado),
        }

    @staticmethod
    def _row_to_compra_registro(row: Mapping[str, Any]) -> CompraRegistro:
        """Construye un CompraRegistro desde una fila de CompraRegistros."""
        return CompraRegistro(
            id=row["Id"],
            proveedor=row["Proveedor"],
            producto=row["Producto"],
            cantidad=row["Cantidad"],
            precio_unitario=float(row["PrecioUnitario"]),
            total=float(row["Total"]),
            observaciones=row["Observaciones"],
            fecha_compra=parse_fecha(row["FechaCompra"]),
            esta_procesado=int_to_bool(row["EstaProcesado"]),
        )

    @staticmethod
    def _row_to_item_inventario(row: Mapping[str, Any]) -> ItemInventario:
        """Construye un ItemInventario desde una fila de Inventario."""
        return ItemInventario(
            id=row["Id"],
            codigo=row["Codigo"],
            producto=row["Producto"],
            unidades=row["Unidades"],
            kilos=float(row["Kilos"]),
            fecha_mas_antigua=parse_fecha(row["FechaMasAntigua"]),
            fecha_mas_nueva=parse_fecha(row["FechaMasNueva"]),
            fecha_vencimiento=parse_fecha_opcional(row["FechaVencimiento"]),
            categoria=row["Categoria"],
            subcategoria=row["SubCategoria"],
        )
