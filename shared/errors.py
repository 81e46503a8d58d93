"""Excepciones compartidas del proyecto."""

from __future__ import annotations


class ValidationError(Exception):
    """Error de validacion de datos de entrada."""


class ServiceError(Exception):
    """Error en la ejecucion de servicios."""


class RecordNotFoundError(ServiceError, LookupError):
    """No existe un registro para el identificador solicitado."""
