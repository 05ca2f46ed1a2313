"""
Modelos ORM de mop-gen-core.

- `Document`: documento de especificación subido + resultado del servicio
  de extracción (JSON en `extracted_data_json`).
- `Mop`: Method of Procedure generada desde un documento. Los pasos NO se
  guardan: se recalculan desde los datos extraídos en cada lectura.
- `Review`: historial append-only de revisiones de una MOP.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    # Naive UTC, igual que lo que devuelve SQLite al leer
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Document(Base):
    """
    Documento de especificación de equipamiento de red.

    El binario vive en el object storage (`file_path` es la clave del objeto);
    acá solo se guarda su estado de procesamiento y los datos extraídos.
    """
    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    filename: Mapped[str] = mapped_column(String(255))
    file_path: Mapped[str] = mapped_column(String(500), default="")

    # Estado del procesamiento externo
    status: Mapped[str] = mapped_column(String(20), default="processing")  # processing|completed|failed

    # Resultado del servicio de extracción (dict snake_case: vendor, device_type, ...)
    extracted_data_json: Mapped[str] = mapped_column(Text, default="{}")

    # Metadata libre del archivo (tamaño, mime type, fecha de subida)
    metadata_json: Mapped[str] = mapped_column(Text, default="{}")

    uploaded_by: Mapped[str] = mapped_column(String(64), default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    # Relaciones
    mops: Mapped[list["Mop"]] = relationship(back_populates="document")

    @property
    def extracted_data(self) -> Dict[str, Any]:
        return json.loads(self.extracted_data_json or "{}")

    @property
    def file_metadata(self) -> Dict[str, Any]:
        return json.loads(self.metadata_json or "{}")


class Mop(Base):
    """
    Method of Procedure.

    `status` es un espejo del workflow de reviews (ver `mop_gen_core.workflow`):
    solo lo modifican la creación de reviews y el update explícito de la API.
    """
    __tablename__ = "mops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    document_id: Mapped[str] = mapped_column(String(36), ForeignKey("documents.id"), index=True)

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft|pending|approved|rejected

    created_by: Mapped[str] = mapped_column(String(64), default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    # Relaciones
    document: Mapped["Document"] = relationship(back_populates="mops")
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="mop",
        cascade="all, delete-orphan",
        order_by="[Review.created_at.desc(), Review.id.desc()]",
    )


class Review(Base):
    """
    Revisión de una MOP.

    Append-only: una review terminal (approved/rejected) no cambia más de estado.
    """
    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    mop_id: Mapped[str] = mapped_column(String(36), ForeignKey("mops.id", ondelete="CASCADE"), index=True)

    reviewer_id: Mapped[str] = mapped_column(String(64), default="admin")
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending|approved|rejected
    comments: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    # Relaciones
    mop: Mapped["Mop"] = relationship(back_populates="reviews")
