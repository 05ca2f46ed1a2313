"""
Endpoints para gestionar reviews de MOPs.

Este módulo maneja:
- POST /api/v1/reviews               - Crear review (refleja su estado en la MOP)
- GET  /api/v1/reviews/pending       - Reviews en pending, con resumen de su MOP
- GET  /api/v1/reviews/{review_id}   - Obtener una review
- PUT  /api/v1/reviews/{review_id}   - Editar comentarios / resolver una review pending

Las reviews no se eliminan: el historial es append-only.
"""

from fastapi import APIRouter, Depends

from mop_gen_core.db.database import get_db_session
from mop_gen_core.db.helpers import create_review, get_review, list_pending_reviews, update_review

from ..dependencies import get_current_user_id
from ..models.requests import (
    MopSummary,
    PendingReviewResponse,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)
from .mops import review_response

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review_endpoint(
    request: ReviewCreateRequest,
    user_id: str = Depends(get_current_user_id),
):
    """
    Crea una review. `approved` / `rejected` llevan la MOP a ese estado;
    `pending` pasa una MOP `draft` a `pending`.
    """
    with get_db_session() as session:
        review = create_review(
            session,
            mop_id=request.mop_id,
            reviewer_id=user_id,
            status=request.status,
            comments=request.comments,
        )
        return review_response(review)


@router.get("/pending", response_model=list[PendingReviewResponse])
async def list_pending_reviews_endpoint():
    with get_db_session() as session:
        return [
            PendingReviewResponse(
                **review_response(r).model_dump(),
                mop=MopSummary(
                    id=r.mop.id,
                    document_id=r.mop.document_id,
                    title=r.mop.title,
                    status=r.mop.status,
                    created_at=r.mop.created_at.isoformat(),
                ),
            )
            for r in list_pending_reviews(session)
        ]


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review_endpoint(review_id: str):
    with get_db_session() as session:
        return review_response(get_review(session, review_id))


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review_endpoint(review_id: str, request: ReviewUpdateRequest):
    with get_db_session() as session:
        review = update_review(
            session,
            review_id,
            comments=request.comments,
            status=request.status,
        )
        return review_response(review)
