"""Esquema canonico de tablas SQLite compartido por cliente/servidor."""

from __future__ import annotations

INVENTARIO_TABLE = "Inventario"
COMPRA_REGISTROS_TABLE = "CompraRegistros"

INVENTARIO_COLUMNS: tuple[str, ...] = (
    "Id",
    "Codigo",
    "Producto",
    "Unidades",
    "Kilos",
    "FechaMasAntigua",
    "FechaMasNueva",
    "FechaVencimiento",
    "Categoria",
    "SubCategoria",
)

COMPRA_REGISTROS_COLUMNS: tuple[str, ...] = (
    "Id",
    "Proveedor",
    "Producto",
    "Cantidad",
    "PrecioUnitario",
    "Total",
    "Observaciones",
    "FechaCompra",
    "EstaProcesado",
)

CREATE_INVENTARIO_SQL = """
CREATE TABLE IF NOT EXISTS Inventario (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Codigo TEXT NOT NULL,
    Producto TEXT NOT NULL,
    Unidades INTEGER NOT NULL,
    Kilos REAL NOT NULL,
    FechaMasAntigua TEXT NOT NULL,
    FechaMasNueva TEXT NOT NULL,
    FechaVencimiento TEXT,
    Categoria TEXT,
    SubCategoria TEXT
)
"""

CREATE_COMPRA_REGISTROS_SQL = """
CREATE TABLE IF NOT EXISTS CompraRegistros (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Proveedor TEXT NOT NULL,
    Producto TEXT NOT NULL,
    Cantidad INTEGER NOT NULL,
    PrecioUnitario REAL NOT NULL,
    Total REAL NOT NULL,
    Observaciones TEXT,
    FechaCompra TEXT NOT NULL,
    EstaProcesado INTEGER NOT NULL DEFAULT 0
)
"""

# SQLite ejecuta una sola sentencia por llamada.
CREATE_TABLES_SQL: tuple[str, ...] = (
    CREATE_INVENTARIO_SQL,
    CREATE_COMPRA_REGISTROS_SQL,
)


def build_column_list(columns: tuple[str, ...], include_id: bool = True) -> str:
    """Construye la lista de columnas separada por comas para sentencias SQL."""
    selected = columns if include_id else tuple(name for name in columns if name != "Id")
    return ", ".join(selected)


def build_named_params(columns: tuple[str, ...]) -> str:
    """Construye parametros nombrados (``:Columna``) para ``sqlalchemy.text``."""
    return ", ".join(f":{name}" for name in columns if name != "Id")
