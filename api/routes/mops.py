"""
Endpoints para gestionar MOPs (Methods of Procedure).

Este módulo maneja:
- POST   /api/v1/mops                   - Generar una MOP desde un documento procesado
- GET    /api/v1/mops                   - Listar MOPs (más nuevas primero)
- GET    /api/v1/mops/{mop_id}          - Obtener una MOP con sus pasos
- PUT    /api/v1/mops/{mop_id}          - Actualización parcial
- DELETE /api/v1/mops/{mop_id}          - Eliminar MOP y reviews
- POST   /api/v1/mops/{mop_id}/approve  - Aprobar (crea review approved)
- POST   /api/v1/mops/{mop_id}/reject   - Rechazar (crea review rejected)
- GET    /api/v1/mops/{mop_id}/reviews  - Historial de reviews
- GET    /api/v1/mops/{mop_id}/export   - Exportar a pdf|docx|html|txt

Los pasos no se guardan: se recalculan en cada lectura desde los datos
extraídos del documento.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from mop_gen_core.core.abstractions import ObjectStorage
from mop_gen_core.db.database import get_db_session
from mop_gen_core.db.helpers import (
    approve_mop,
    create_mop,
    delete_mop,
    get_mop,
    list_mops,
    list_reviews,
    reject_mop,
    steps_for_mop,
    update_mop,
)
from mop_gen_core.db.models import Mop, Review
from mop_gen_core.export.pipeline import export_mop

from ..dependencies import get_current_user_id, get_storage
from ..models.requests import (
    ExportResponse,
    MessageResponse,
    MopCreateRequest,
    MopEnvelope,
    MopResponse,
    MopUpdateRequest,
    ReviewDecisionRequest,
    ReviewDecisionResponse,
    ReviewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mops", tags=["mops"])


# ============================================================
# Serialización
# ============================================================

def mop_response(session: Session, mop: Mop, with_steps: bool = True) -> MopResponse:
    steps = [s.to_dict() for s in steps_for_mop(session, mop)] if with_steps else []
    return MopResponse(
        id=mop.id,
        document_id=mop.document_id,
        title=mop.title,
        description=mop.description or "",
        status=mop.status,
        created_by=mop.created_by or "",
        created_at=mop.created_at.isoformat(),
        updated_at=mop.updated_at.isoformat(),
        steps=steps,
    )


def review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        mop_id=review.mop_id,
        reviewer_id=review.reviewer_id,
        status=review.status,
        comments=review.comments or "",
        created_at=review.created_at.isoformat(),
    )


# ============================================================
# Endpoints
# ============================================================

@router.post("", response_model=MopEnvelope)
async def create_mop_endpoint(
    request: MopCreateRequest,
    user_id: str = Depends(get_current_user_id),
):
    """
    Genera una MOP en `draft` desde un documento con extracción completa.

    Errores: 404 si el documento no existe, 400 si no terminó de procesarse
    o no tiene datos extraídos.
    """
    with get_db_session() as session:
        mop = create_mop(
            session,
            document_id=request.document_id,
            title=request.title,
            description=request.description,
            created_by=user_id,
        )
        return MopEnvelope(mop=mop_response(session, mop))


@router.get("", response_model=list[MopResponse])
async def list_mops_endpoint():
    """Lista todas las MOPs, sin pasos."""
    with get_db_session() as session:
        return [mop_response(session, m, with_steps=False) for m in list_mops(session)]


@router.get("/{mop_id}", response_model=MopEnvelope)
async def get_mop_endpoint(mop_id: str):
    with get_db_session() as session:
        mop = get_mop(session, mop_id)
        return MopEnvelope(mop=mop_response(session, mop))


@router.put("/{mop_id}", response_model=MopEnvelope)
async def update_mop_endpoint(mop_id: str, request: MopUpdateRequest):
    with get_db_session() as session:
        mop = update_mop(
            session,
            mop_id,
            title=request.title,
            description=request.description,
            status=request.status,
        )
        return MopEnvelope(mop=mop_response(session, mop))


@router.delete("/{mop_id}", response_model=MessageResponse)
async def delete_mop_endpoint(mop_id: str):
    with get_db_session() as session:
        delete_mop(session, mop_id)
    return MessageResponse(message="MOP deleted successfully")


@router.post("/{mop_id}/approve", response_model=ReviewDecisionResponse)
async def approve_mop_endpoint(
    mop_id: str,
    request: Optional[ReviewDecisionRequest] = Body(default=None),
    user_id: str = Depends(get_current_user_id),
):
    """Aprueba la MOP: crea una review `approved` (comentario por defecto "Approved")."""
    comments = request.comments if request else None
    with get_db_session() as session:
        review = approve_mop(session, mop_id, reviewer_id=user_id, comments=comments)
        mop = get_mop(session, mop_id)
        return ReviewDecisionResponse(
            message="MOP approved successfully",
            mop=mop_response(session, mop),
            review=review_response(review),
        )


@router.post("/{mop_id}/reject", response_model=ReviewDecisionResponse)
async def reject_mop_endpoint(
    mop_id: str,
    request: Optional[ReviewDecisionRequest] = Body(default=None),
    user_id: str = Depends(get_current_user_id),
):
    """Rechaza la MOP: crea una review `rejected` (comentario por defecto "Rejected")."""
    comments = request.comments if request else None
    with get_db_session() as session:
        review = reject_mop(session, mop_id, reviewer_id=user_id, comments=comments)
        mop = get_mop(session, mop_id)
        return ReviewDecisionResponse(
            message="MOP rejected successfully",
            mop=mop_response(session, mop),
            review=review_response(review),
        )


@router.get("/{mop_id}/reviews", response_model=list[ReviewResponse])
async def list_mop_reviews_endpoint(mop_id: str):
    with get_db_session() as session:
        return [review_response(r) for r in list_reviews(session, mop_id)]


@router.get("/{mop_id}/export", response_model=ExportResponse)
def export_mop_endpoint(
    mop_id: str,
    format: str = Query(default="pdf", description="pdf|docx|html|txt"),
    storage: ObjectStorage = Depends(get_storage),
):
    """
    Exporta la MOP y devuelve un link de descarga válido por 24 h.

    Errores: 400 formato no soportado, 404 MOP inexistente, 500 falla de
    render o de storage.
    """
    with get_db_session() as session:
        result = export_mop(session, mop_id, format, storage)
    return ExportResponse(**result.to_dict())
