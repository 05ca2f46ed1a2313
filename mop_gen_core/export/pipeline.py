"""
mop_gen_core.export.pipeline
============================

Exportación de una MOP a un archivo descargable.

Flujo (`export_mop`):
1. Validar formato (antes de tocar DB, disco o storage).
2. Cargar MOP, documento y reviews.
3. Recalcular pasos y renderizar a bytes.
4. Escribir el archivo en un directorio temporal propio de la llamada.
5. Subirlo al object storage como `<mop_id>-<epoch_ms>.<fmt>`.
6. Devolver un link prefirmado (24 h por defecto).

El directorio temporal se elimina en cualquier salida (éxito, error o
cancelación): vive dentro de un `with`.
"""

from __future__ import annotations

import logging
import re
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.abstractions import ObjectStorage
from ..db.helpers import get_mop, list_reviews, steps_for_mop, to_mop_record, to_review_record
from . import get_renderer, normalize_format, render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    """Archivo renderizado; solo existe dentro de una llamada a `export_mop`."""
    mop_id: str
    format: str
    temp_path: Path
    content_type: str


@dataclass(frozen=True)
class ExportResult:
    url: str
    format: str
    filename: str
    content_type: str
    object_name: str

    def to_dict(self) -> dict:
        return {"url": self.url, "format": self.format, "filename": self.filename}


def download_filename(title: str, fmt: str) -> str:
    """Título con todo carácter no alfanumérico reemplazado por `_`, más extensión."""
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', title)}.{fmt}"


def object_name_for(mop_id: str, fmt: str, now: Optional[float] = None) -> str:
    epoch_ms = int((time.time() if now is None else now) * 1000)
    return f"{mop_id}-{epoch_ms}.{fmt}"


@contextmanager
def scoped_export_dir(root: Optional[Path] = None) -> Iterator[Path]:
    """Directorio temporal que se borra al salir del bloque."""
    with tempfile.TemporaryDirectory(prefix="mop-export-", dir=root) as tmp:
        yield Path(tmp)


def export_mop(
    session: Session,
    mop_id: str,
    fmt: str,
    storage: ObjectStorage,
    settings: Settings | None = None,
    temp_root: Optional[Path] = None,
) -> ExportResult:
    """
    Renderiza, sube y devuelve el link de descarga de una MOP.

    Args:
        session: Sesión de base de datos
        mop_id: MOP a exportar
        fmt: pdf | docx | html | txt (case-insensitive)
        storage: Object storage destino
        settings: Override de configuración (expiración del link)
        temp_root: Directorio padre para el temporal (default: el del sistema)

    Raises:
        InvalidInput: formato no soportado.
        NotFound: MOP o documento inexistente.
        RenderError: falló el renderer.
        StorageError: falló la subida o el link.
    """
    renderer = get_renderer(fmt)
    fmt = normalize_format(fmt)
    settings = settings or get_settings()

    mop = get_mop(session, mop_id)
    steps = steps_for_mop(session, mop)
    reviews = [to_review_record(r) for r in list_reviews(session, mop_id)]
    record = to_mop_record(mop)

    with scoped_export_dir(temp_root) as tmp:
        data = render(record, steps, reviews, fmt)

        artifact = ExportArtifact(
            mop_id=mop.id,
            format=fmt,
            temp_path=tmp / f"{mop.id}.{fmt}",
            content_type=renderer.content_type,
        )
        artifact.temp_path.write_bytes(data)

        object_name = object_name_for(mop.id, fmt)
        storage.upload_file(artifact.temp_path, object_name, artifact.content_type)
        url = storage.presigned_url(object_name, settings.export_url_expiry_seconds)

    logger.info(f"MOP {mop.id} exportada como {fmt} ({len(data)} bytes) -> {object_name}")

    return ExportResult(
        url=url,
        format=fmt,
        filename=download_filename(mop.title, fmt),
        content_type=artifact.content_type,
        object_name=object_name,
    )
