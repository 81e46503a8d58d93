"""Tests de acciones de AppController sobre una base SQLite temporal."""

from __future__ import annotations

import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest import mock

from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalServerGateway
from servidor.services.inventario_database import InventarioDatabaseService
from shared.errors import RecordNotFoundError, ValidationError
from shared.protocol import CompraRegistroDraft, IngresoInventarioDraft


class AppControllerTests(unittest.IsolatedAsyncioTestCase):
    """Valida el flujo de compras e inventario desde el controlador."""

    async def asyncSetUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.service = InventarioDatabaseService(
            database_path=Path(temp_dir.name) / "AdminSERMAC.db"
        )
        self.addAsyncCleanup(self.service.dispose)
        self.gateway = LocalServerGateway(database_service=self.service)
        self.controller = AppController(gateway=self.gateway)

    async def test_registrar_compra_calcula_total_y_queda_pendiente(self) -> None:
        """Debe guardar la compra con total calculado y sin procesar."""
        await self.controller.registrar_compra(self._build_draft(observaciones="   "))

        registros = await self.controller.listar_compras()

        self.assertEqual(len(registros), 1)
        self.assertEqual(registros[0].total, 25.0)
        self.assertIsNone(registros[0].observaciones)
        self.assertFalse(registros[0].esta_procesado)

    async def test_registrar_compra_invalida_no_llega_al_gateway(self) -> None:
        """Un draft invalido debe fallar antes de escribir."""
        draft = self._build_draft(proveedor=" ", cantidad=0)

        with mock.patch.object(self.gateway, "add_compra_registro") as spy:
            with self.assertRaises(ValidationError) as context:
                await self.controller.registrar_compra(draft)

        spy.assert_not_called()
        self.assertIn("Proveedor", str(context.exception))
        self.assertIn("Cantidad", str(context.exception))

    async def test_procesar_compra_marca_y_es_idempotente(self) -> None:
        """Procesar dos veces deja la compra procesada sin escribir de nuevo."""
        await self.controller.registrar_compra(self._build_draft())
        registro_id = (await self.controller.listar_compras())[0].id

        procesado = await self.controller.procesar_compra(registro_id)
        with mock.patch.object(
            self.gateway,
            "procesar_compra_registro",
            wraps=self.gateway.procesar_compra_registro,
        ) as spy:
            again = await self.controller.procesar_compra(registro_id)

        self.assertTrue(procesado.esta_procesado)
        self.assertTrue(again.esta_procesado)
        self.assertEqual(spy.call_count, 0)
        self.assertTrue((await self.controller.obtener_compra(registro_id)).esta_procesado)

    async def test_procesar_compra_inexistente(self) -> None:
        """El controlador reporta RecordNotFoundError para Ids inexistentes."""
        with self.assertRaises(RecordNotFoundError):
            await self.controller.procesar_compra(404)

    async def test_actualizar_compra_conserva_estado_procesado(self) -> None:
        """Editar una compra procesada no debe revertir su estado."""
        await self.controller.registrar_compra(self._build_draft())
        registro_id = (await self.controller.listar_compras())[0].id
        await self.controller.procesar_compra(registro_id)

        await self.controller.actualizar_compra(
            registro_id,
            self._build_draft(cantidad=4, precio_unitario=3.0),
        )

        registro = await self.controller.obtener_compra(registro_id)
        self.assertEqual(registro.cantidad, 4)
        self.assertEqual(registro.total, 12.0)
        self.assertTrue(registro.esta_procesado)

    async def test_actualizar_compra_inexistente(self) -> None:
        """Editar un Id inexistente reporta RecordNotFoundError sin escribir."""
        with mock.patch.object(self.gateway, "update_compra_registro") as spy:
            with self.assertRaises(RecordNotFoundError):
                await self.controller.actualizar_compra(9, self._build_draft())

        spy.assert_not_called()
        self.assertEqual(await self.controller.listar_compras(), [])

    async def test_eliminar_compra(self) -> None:
        """Tras eliminar, obtener debe lanzar RecordNotFoundError."""
        await self.controller.registrar_compra(self._build_draft())
        registro_id = (await self.controller.listar_compras())[0].id

        await self.controller.eliminar_compra(registro_id)

        with self.assertRaises(RecordNotFoundError):
            await self.controller.obtener_compra(registro_id)

    async def test_describir_compra(self) -> None:
        """Debe retornar el detalle en formato Campo: valor."""
        await self.controller.registrar_compra(self._build_draft())
        registro_id = (await self.controller.listar_compras())[0].id

        text = await self.controller.describir_compra(registro_id)

        self.assertTrue(text.startswith("Proveedor: ACME\n"))
        self.assertIn("Estado: Pendiente", text)

    def test_calcular_total_preview(self) -> None:
        """Debe retornar 0 con valores incompletos y el producto en otro caso."""
        self.assertEqual(AppController.calcular_total_preview(0, 2.5), 0.0)
        self.assertEqual(AppController.calcular_total_preview(10, 2.5), 25.0)

    async def test_ingresar_producto_y_registrar_venta(self) -> None:
        """Debe ingresar stock, descontar ventas y listar categorias."""
        agregado = await self.controller.ingresar_producto(
            IngresoInventarioDraft(
                codigo=" 1001 ",
                producto="Posta negra",
                unidades=20,
                kilos=45.5,
                fecha_compra=date(2024, 1, 10),
                fecha_registro=date(2024, 1, 12),
                categoria="Vacuno",
                subcategoria="",
            )
        )
        vendido = await self.controller.registrar_venta("1001", 2, 4.5)
        sin_codigo = await self.controller.registrar_venta("9999", 1, 0)

        items = await self.controller.buscar_por_codigo("1001")
        self.assertTrue(agregado)
        self.assertTrue(vendido)
        self.assertFalse(sin_codigo)
        self.assertEqual(items[0].unidades, 18)
        self.assertEqual(items[0].kilos, 41.0)
        self.assertIsNone(items[0].subcategoria)
        self.assertEqual(await self.controller.listar_categorias(), ["Vacuno"])
        self.assertEqual(await self.controller.listar_subcategorias(" "), [])

    async def test_ingresar_producto_vencimiento_anterior_a_compra(self) -> None:
        """La fecha de vencimiento no puede ser anterior a la compra."""
        with self.assertRaises(ValidationError):
            await self.controller.ingresar_producto(
                IngresoInventarioDraft(
                    codigo="1001",
                    producto="Posta negra",
                    unidades=1,
                    kilos=1.0,
                    fecha_compra=date(2024, 1, 10),
                    fecha_registro=date(2024, 1, 10),
                    fecha_vencimiento=date(2024, 1, 1),
                )
            )

    async def test_ingresar_producto_registro_anterior_a_compra(self) -> None:
        """La fecha de registro no puede ser anterior a la compra."""
        with self.assertRaises(ValidationError) as context:
            await self.controller.ingresar_producto(
                self._build_ingreso(fecha_registro=date(2024, 1, 9))
            )

        self.assertIn("fecha de registro", str(context.exception))
        self.assertEqual(await self.controller.listar_inventario(), [])

    async def test_ingresar_producto_cantidades_negativas(self) -> None:
        """Unidades o kilos negativos se rechazan indicando el campo."""
        with self.assertRaises(ValidationError) as context:
            await self.controller.ingresar_producto(self._build_ingreso(unidades=-1))
        self.assertIn("Unidades", str(context.exception))

        with self.assertRaises(ValidationError) as context:
            await self.controller.ingresar_producto(self._build_ingreso(kilos=-0.5))
        self.assertIn("Kilos", str(context.exception))

        self.assertEqual(await self.controller.listar_inventario(), [])

    async def test_registrar_venta_sin_cantidades(self) -> None:
        """Una venta sin unidades ni kilos es invalida."""
        with self.assertRaises(ValidationError):
            await self.controller.registrar_venta("1001", 0, 0)

    async def test_registrar_venta_cantidades_negativas(self) -> None:
        """Una venta con unidades o kilos negativos es invalida."""
        with mock.patch.object(self.gateway, "actualizar_inventario") as spy:
            with self.assertRaises(ValidationError):
                await self.controller.registrar_venta("1001", -1, 0)
            with self.assertRaises(ValidationError):
                await self.controller.registrar_venta("1001", 1, -2.0)

        spy.assert_not_called()

    async def test_registrar_ingreso_fecha(self) -> None:
        """Debe ampliar el rango de fechas del codigo."""
        await self.controller.ingresar_producto(
            IngresoInventarioDraft(
                codigo="1001",
                producto="Posta negra",
                unidades=1,
                kilos=1.0,
                fecha_compra=date(2024, 1, 10),
                fecha_registro=date(2024, 1, 10),
            )
        )

        actualizado = await self.controller.registrar_ingreso_fecha("1001", date(2024, 3, 1))

        item = (await self.controller.buscar_por_codigo("1001"))[0]
        self.assertTrue(actualizado)
        self.assertEqual(item.fecha_mas_antigua, date(2024, 1, 10))
        self.assertEqual(item.fecha_mas_nueva, date(2024, 3, 1))

    @staticmethod
    def _build_ingreso(
        unidades: int = 1,
        kilos: float = 1.0,
        fecha_registro: date = date(2024, 1, 10),
    ) -> IngresoInventarioDraft:
        return IngresoInventarioDraft(
            codigo="1001",
            producto="Posta negra",
            unidades=unidades,
            kilos=kilos,
            fecha_compra=date(2024, 1, 10),
            fecha_registro=fecha_registro,
        )

    @staticmethod
    def _build_draft(
        proveedor: str = "ACME",
        cantidad: int = 10,
        precio_unitario: float = 2.5,
        observaciones: str = "",
    ) -> CompraRegistroDraft:
        return CompraRegistroDraft(
            proveedor=proveedor,
            producto="Widget",
            cantidad=cantidad,
            precio_unitario=precio_unitario,
            fecha_compra=date(2024, 3, 15),
            observaciones=observaciones,
        )


if __name__ == "__main__":
    unittest.main()
