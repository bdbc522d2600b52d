# custom_fields/domain/errors.py
"""
Errores del motor de campos personalizados.

Todos son condiciones locales y corregibles por el usuario: nunca se reintentan
y nunca mutan estado.
"""
from typing import Optional


class CustomFieldError(Exception):
    """Base de los rechazos visibles para el usuario."""

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_name = field_name


class ValidationRejected(CustomFieldError):
    """Entrada inválida (ej: clave duplicada en un campo libre, clave de ajuste desconocida)."""


class GuardRejected(CustomFieldError):
    """Se intentó borrar el valor de un slot que está habilitado en el esquema."""
