"""
Funciones helper para trabajar con los modelos Document / Mop / Review.

Estas funciones facilitan:
- Registrar documentos y actualizar el resultado de la extracción
- Crear MOPs desde un documento procesado (con título/descripción por defecto)
- Registrar reviews y reflejar su efecto en el estado de la MOP
- Convertir modelos ORM a snapshots de dominio para síntesis y render

Todas reciben la `Session` abierta por el llamador (ver `get_db_session`) y
lanzan errores de `mop_gen_core.errors`; nunca hacen commit por su cuenta.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..config import get_settings
from ..domain_models import ExtractedData, MopRecord, ProcedureStep, ReviewRecord, parse_extracted_data
from ..errors import InvalidInput, NotFound
from ..synthesis import synthesize
from ..workflow import (
    DEFAULT_COMMENTS,
    is_terminal,
    next_mop_status,
    validate_mop_status,
    validate_review_status,
)
from .models import Document, Mop, Review

logger = logging.getLogger(__name__)

DOCUMENT_STATUSES = ("processing", "completed", "failed")


# ============================================================
# Documentos
# ============================================================

def create_document(
    session: Session,
    filename: str,
    file_path: str = "",
    uploaded_by: str = "admin",
    metadata: Dict[str, Any] | None = None,
) -> Document:
    """
    Registra un documento subido, en estado `processing`.

    Args:
        session: Sesión de base de datos
        filename: Nombre original del archivo
        file_path: Clave del objeto en el storage
        uploaded_by: Usuario que sube el documento
        metadata: Metadata libre (tamaño, mime type, ...)

    Returns:
        Document creado
    """
    if not filename:
        raise InvalidInput("filename es requerido")

    document = Document(
        filename=filename,
        file_path=file_path,
        status="processing",
        uploaded_by=uploaded_by,
        metadata_json=json.dumps(metadata or {}),
        extracted_data_json="{}",
    )
    session.add(document)
    session.flush()
    logger.info(f"Documento registrado: {document.id} ({filename})")
    return document


def get_document(session: Session, document_id: str) -> Document:
    document = session.query(Document).filter_by(id=document_id).first()
    if not document:
        raise NotFound(f"Documento {document_id} no encontrado")
    return document


def list_documents(session: Session) -> list[Document]:
    return session.query(Document).order_by(Document.created_at.desc(), Document.id.desc()).all()


def update_extraction(
    session: Session,
    document_id: str,
    status: str,
    extracted_data: Dict[str, Any] | None = None,
) -> Document:
    """
    Actualiza el estado de procesamiento y, si vienen, los datos extraídos.

    Los datos se validan (forma) antes de guardarse: un payload mal formado
    lanza `UpstreamError` y no se persiste nada.
    """
    if status not in DOCUMENT_STATUSES:
        raise InvalidInput(
            f"Estado de documento inválido: '{status}'. Valores permitidos: {', '.join(DOCUMENT_STATUSES)}"
        )

    document = get_document(session, document_id)

    if extracted_data is not None:
        normalized = parse_extracted_data(extracted_data)
        # Un payload vacío se guarda vacío: create_mop lo rechaza
        document.extracted_data_json = json.dumps(normalized.to_payload()) if extracted_data else "{}"

    if document.status != status:
        logger.info(f"Documento {document_id}: {document.status} -> {status}")
    document.status = status
    session.flush()
    return document


def delete_document(session: Session, document_id: str) -> Document:
    """
    Elimina un documento que no tenga MOPs.

    Las MOPs derivan sus pasos del documento: borrarlo dejaría MOPs sin
    datos, así que primero hay que eliminar esas MOPs.

    Returns:
        El Document eliminado (el llamador lo usa para limpiar el storage).

    Raises:
        NotFound: documento inexistente.
        InvalidInput: hay MOPs generadas desde el documento.
    """
    document = get_document(session, document_id)
    mop_count = session.query(Mop).filter_by(document_id=document_id).count()
    if mop_count:
        raise InvalidInput(
            f"El documento {document_id} tiene {mop_count} MOP(s); eliminalas antes de borrar el documento"
        )

    session.delete(document)
    session.flush()
    logger.info(f"Documento eliminado: {document_id} ({document.filename})")
    return document


def load_extracted_data(document: Document) -> ExtractedData:
    return parse_extracted_data(document.extracted_data)


# ============================================================
# MOPs
# ============================================================

def _default_title(data: ExtractedData) -> str:
    return f"{data.vendor or 'Network'} {data.device_type or 'Device'} Configuration MOP"


def _default_description(data: ExtractedData) -> str:
    parts = [data.vendor, data.model, data.device_type or "device"]
    return "Method of Procedure for configuring " + " ".join(p for p in parts if p)


def create_mop(
    session: Session,
    document_id: str,
    title: str | None = None,
    description: str | None = None,
    created_by: str = "admin",
) -> Mop:
    """
    Crea una MOP en `draft` a partir de un documento ya procesado.

    Args:
        session: Sesión de base de datos
        document_id: Documento de origen
        title: Título; si falta se arma desde vendor/device_type
        description: Descripción; si falta se arma desde vendor/model/device_type
        created_by: Usuario creador

    Raises:
        NotFound: el documento no existe.
        InvalidInput: el documento no terminó de procesarse o no tiene datos.
    """
    document = get_document(session, document_id)

    if document.status != "completed":
        raise InvalidInput(
            f"Document processing is not complete (status: {document.status})"
        )
    if not document.extracted_data:
        raise InvalidInput("No extracted data available for MOP generation")

    data = load_extracted_data(document)

    mop = Mop(
        document_id=document.id,
        title=title or _default_title(data),
        description=description or _default_description(data),
        status="draft",
        created_by=created_by,
    )
    session.add(mop)
    session.flush()
    logger.info(f"MOP creada: {mop.id} desde documento {document.id}")
    return mop


def get_mop(session: Session, mop_id: str) -> Mop:
    mop = session.query(Mop).filter_by(id=mop_id).first()
    if not mop:
        raise NotFound(f"MOP {mop_id} no encontrada")
    return mop


def list_mops(session: Session) -> list[Mop]:
    return session.query(Mop).order_by(Mop.created_at.desc(), Mop.id.desc()).all()


def update_mop(
    session: Session,
    mop_id: str,
    title: str | None = None,
    description: str | None = None,
    status: str | None = None,
) -> Mop:
    """Actualización parcial: solo se tocan los campos que vienen."""
    mop = get_mop(session, mop_id)

    if title is not None:
        if not title.strip():
            raise InvalidInput("title no puede ser vacío")
        mop.title = title
    if description is not None:
        mop.description = description
    if status is not None and status != mop.status:
        validate_mop_status(status)
        # approved / rejected solo se alcanzan con una review
        if is_terminal(status):
            raise InvalidInput(f"El estado '{status}' se asigna creando una review, no editando la MOP")
        if is_terminal(mop.status) and get_settings().lock_terminal_status:
            raise InvalidInput(f"La MOP ya está {mop.status} y no se puede reabrir")
        logger.info(f"MOP {mop.id}: {mop.status} -> {status} (edición)")
        mop.status = status

    session.flush()
    return mop


def delete_mop(session: Session, mop_id: str) -> None:
    """Elimina la MOP y sus reviews (cascade)."""
    mop = get_mop(session, mop_id)
    session.delete(mop)
    session.flush()
    logger.info(f"MOP eliminada: {mop_id}")


def steps_for_mop(session: Session, mop: Mop) -> List[ProcedureStep]:
    """Recalcula los pasos de la MOP desde los datos extraídos del documento."""
    document = get_document(session, mop.document_id)
    return synthesize(load_extracted_data(document))


# ============================================================
# Reviews
# ============================================================

def create_review(
    session: Session,
    mop_id: str,
    reviewer_id: str = "admin",
    status: str | None = None,
    comments: str | None = None,
) -> Review:
    """
    Registra una review y aplica su efecto sobre el estado de la MOP.

    Raises:
        NotFound: la MOP no existe.
        InvalidInput: estado inválido, o MOP terminal con
            `MOP_LOCK_TERMINAL_STATUS` activo.
    """
    status = validate_review_status(status or "pending")
    mop = get_mop(session, mop_id)

    new_status = next_mop_status(mop.status, status, lock_terminal=get_settings().lock_terminal_status)

    review = Review(
        mop_id=mop.id,
        reviewer_id=reviewer_id,
        status=status,
        comments=comments or "",
    )
    session.add(review)

    if new_status != mop.status:
        logger.info(f"MOP {mop.id}: {mop.status} -> {new_status} (review {status})")
        mop.status = new_status

    session.flush()
    return review


def approve_mop(session: Session, mop_id: str, reviewer_id: str = "admin", comments: str | None = None) -> Review:
    return create_review(
        session,
        mop_id,
        reviewer_id=reviewer_id,
        status="approved",
        comments=comments or DEFAULT_COMMENTS["approved"],
    )


def reject_mop(session: Session, mop_id: str, reviewer_id: str = "admin", comments: str | None = None) -> Review:
    return create_review(
        session,
        mop_id,
        reviewer_id=reviewer_id,
        status="rejected",
        comments=comments or DEFAULT_COMMENTS["rejected"],
    )


def get_review(session: Session, review_id: str) -> Review:
    review = session.query(Review).filter_by(id=review_id).first()
    if not review:
        raise NotFound(f"Review {review_id} no encontrada")
    return review


def list_reviews(session: Session, mop_id: str) -> list[Review]:
    """Reviews de una MOP, más nuevas primero."""
    get_mop(session, mop_id)
    return (
        session.query(Review)
        .filter_by(mop_id=mop_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def list_pending_reviews(session: Session) -> list[Review]:
    """Todas las reviews en `pending`, sin importar el estado de su MOP."""
    return (
        session.query(Review)
        .filter_by(status="pending")
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def update_review(
    session: Session,
    review_id: str,
    comments: str | None = None,
    status: str | None = None,
) -> Review:
    """
    Edita una review.

    Los comentarios se pueden editar siempre; el estado solo mientras la
    review sigue en `pending`. Pasarla a approved/rejected se refleja en la MOP.
    """
    review = get_review(session, review_id)

    if comments is not None:
        review.comments = comments

    if status is not None and status != review.status:
        validate_review_status(status)
        if review.status != "pending":
            raise InvalidInput(f"La review {review_id} ya está {review.status} y no cambia de estado")

        mop = get_mop(session, review.mop_id)
        new_status = next_mop_status(mop.status, status, lock_terminal=get_settings().lock_terminal_status)
        review.status = status
        if new_status != mop.status:
            logger.info(f"MOP {mop.id}: {mop.status} -> {new_status} (review {review_id} {status})")
            mop.status = new_status

    session.flush()
    return review


# ============================================================
# Snapshots para render
# ============================================================

def to_mop_record(mop: Mop) -> MopRecord:
    return MopRecord(
        id=mop.id,
        document_id=mop.document_id,
        title=mop.title,
        description=mop.description or "",
        status=mop.status,
        created_at=mop.created_at,
        created_by=mop.created_by or "",
    )


def to_review_record(review: Review) -> ReviewRecord:
    return ReviewRecord(
        id=review.id,
        mop_id=review.mop_id,
        reviewer_id=review.reviewer_id,
        status=review.status,
        comments=review.comments or "",
        created_at=review.created_at,
    )
