"""
mop_gen_core.errors
===================

Taxonomía de errores del core.

- `NotFound` / `InvalidInput`: terminales, se reportan sin reintento.
- `StorageError` / `UpstreamError`: el llamador puede reintentar; el core
  no reintenta internamente.
- `RenderError`: falla de generación de un formato concreto.

La capa HTTP (`api/main.py`) traduce cada clase a un status code.
Datos faltantes o vendor desconocido dentro de la síntesis NO son errores.
"""

from __future__ import annotations


class MopGenError(Exception):
    """Base de todos los errores de dominio."""

    retryable: bool = False


class NotFound(MopGenError):
    """MOP, documento o review inexistente."""


class InvalidInput(MopGenError):
    """Campo requerido ausente, formato no soportado o documento sin procesar."""


class RenderError(MopGenError):
    """Falla al generar un formato (PDF, DOCX, HTML, TXT)."""


class StorageError(MopGenError):
    """Falla de subida o de generación de link en el object storage."""

    retryable = True


class UpstreamError(MopGenError):
    """El servicio de extracción no respondió o devolvió un payload inválido."""

    retryable = True
