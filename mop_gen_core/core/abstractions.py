"""
Abstracciones (Protocols) del core de generación de MOPs.

Estos protocols definen las costuras del sistema:

- `VendorCommandStrategy`: cómo cada familia de fabricante traduce cada tipo
  de operación a texto de comandos (ida y rollback).
- `DocumentRenderer`: cómo se codifica una MOP en un formato descargable.
- `ObjectStorage`: el colaborador externo donde se publican los exports.

El core trabaja solo contra estas interfaces; las implementaciones concretas
viven en `synthesis/vendors.py`, `export/` y `storage.py`.
"""

from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Protocol, Sequence

from ..domain_models import ExtractedData, MopRecord, ProcedureStep, ReviewRecord


class VendorCommandStrategy(Protocol):
    """
    Generador de comandos para una familia de fabricantes.

    Cada operación tiene su función de rollback dedicada: el rollback NUNCA se
    deriva invirtiendo el texto de ida.

    Todas las funciones son puras y deben devolver texto no vacío.
    """

    name: str

    def connect(self, data: ExtractedData, ip: str) -> str:
        """Comando para abrir sesión contra el equipo en `ip`."""
        ...

    def connect_rollback(self, data: ExtractedData) -> str:
        ...

    def privileged(self, data: ExtractedData) -> str:
        ...

    def privileged_rollback(self, data: ExtractedData) -> str:
        ...

    def config_mode(self, data: ExtractedData) -> str:
        ...

    def config_mode_rollback(self, data: ExtractedData) -> str:
        ...

    def interfaces(self, data: ExtractedData) -> str:
        ...

    def interfaces_rollback(self, data: ExtractedData) -> str:
        ...

    def routing(self, data: ExtractedData) -> str:
        ...

    def routing_rollback(self, data: ExtractedData) -> str:
        ...

    def vlans(self, data: ExtractedData) -> str:
        ...

    def vlans_rollback(self, data: ExtractedData) -> str:
        ...

    def save(self, data: ExtractedData) -> str:
        ...

    def save_rollback(self, data: ExtractedData) -> str:
        ...

    def verify(self, data: ExtractedData, included: AbstractSet[str]) -> str:
        """
        Comandos de verificación final.

        Args:
            data: Datos del equipo.
            included: Operaciones condicionales que efectivamente se incluyeron
                en la MOP ("interfaces", "routing", "vlans"). Solo se verifica
                lo que se configuró.
        """
        ...

    def verify_rollback(self, data: ExtractedData) -> str:
        ...


class DocumentRenderer(Protocol):
    """
    Interfaz para codificar una MOP en un formato concreto.

    Todas las codificaciones comparten estructura: título, descripción, bloque de
    metadata, una sección por paso y, si hay reviews, una sección de reviews.
    """

    format: str
    content_type: str

    def render(
        self,
        mop: MopRecord,
        steps: Sequence[ProcedureStep],
        reviews: Sequence[ReviewRecord],
    ) -> bytes:
        """Devuelve el documento completo como bytes."""
        ...


class ObjectStorage(Protocol):
    """Object storage externo (S3 / MinIO)."""

    def upload_file(self, path: Path, object_name: str, content_type: str) -> None:
        ...

    def presigned_url(self, object_name: str, expires_seconds: int) -> str:
        ...

    def delete_object(self, object_name: str) -> None:
        ...
