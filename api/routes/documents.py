"""
Endpoints para documentos de especificación de equipos.

Este endpoint maneja:
- POST   /api/v1/documents                          - Registrar un documento subido y enviarlo a extracción
- GET    /api/v1/documents                          - Listar documentos
- GET    /api/v1/documents/{document_id}            - Obtener un documento
- DELETE /api/v1/documents/{document_id}            - Eliminar un documento sin MOPs (y su archivo)
- GET    /api/v1/documents/{document_id}/status     - Estado de procesamiento (consulta al servicio si sigue en processing)
- PUT    /api/v1/documents/{document_id}/extraction - Callback del servicio de extracción
"""

import logging

from fastapi import APIRouter, Depends

from mop_gen_core.core.abstractions import ObjectStorage
from mop_gen_core.db.database import get_db_session
from mop_gen_core.db.helpers import (
    create_document,
    delete_document,
    get_document,
    list_documents,
    update_extraction,
)
from mop_gen_core.db.models import Document
from mop_gen_core.errors import StorageError
from mop_gen_core.extraction_client import ExtractionClient, refresh_document_status, submit_document

from ..dependencies import get_current_user_id, get_document_storage, get_extraction_client
from ..models.requests import (
    DocumentCreateRequest,
    DocumentResponse,
    DocumentStatusResponse,
    ExtractionUpdateRequest,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])


def document_response(doc: Document) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        filename=doc.filename,
        file_path=doc.file_path or "",
        status=doc.status,
        uploaded_by=doc.uploaded_by or "",
        metadata=doc.file_metadata,
        extracted_data=doc.extracted_data,
        created_at=doc.created_at.isoformat(),
    )


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document_endpoint(
    request: DocumentCreateRequest,
    user_id: str = Depends(get_current_user_id),
    client: ExtractionClient = Depends(get_extraction_client),
):
    """
    Registra el documento y lo envía al servicio de extracción.

    El registro se confirma antes del envío: el callback del servicio puede
    llegar antes de que termine este request. Si el servicio no responde el
    documento queda en `failed`.
    """
    with get_db_session() as session:
        doc = create_document(
            session,
            filename=request.filename,
            file_path=request.file_path,
            uploaded_by=user_id,
            metadata=request.metadata,
        )

    with get_db_session() as session:
        return document_response(submit_document(session, doc.id, client=client))


@router.get("", response_model=list[DocumentResponse])
async def list_documents_endpoint():
    with get_db_session() as session:
        return [document_response(d) for d in list_documents(session)]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document_endpoint(document_id: str):
    with get_db_session() as session:
        return document_response(get_document(session, document_id))


@router.get("/{document_id}/status", response_model=DocumentStatusResponse)
def get_document_status_endpoint(
    document_id: str,
    client: ExtractionClient = Depends(get_extraction_client),
):
    """
    Estado de procesamiento.

    Si el servicio de extracción no responde se informa el estado guardado;
    si responde un payload inválido → 502.
    """
    with get_db_session() as session:
        return DocumentStatusResponse(**refresh_document_status(session, document_id, client=client))


@router.put("/{document_id}/extraction", response_model=DocumentResponse)
async def update_extraction_endpoint(document_id: str, request: ExtractionUpdateRequest):
    """Entrega del resultado de la extracción (lo llama el servicio externo)."""
    with get_db_session() as session:
        doc = update_extraction(
            session,
            document_id,
            status=request.status,
            extracted_data=request.extracted_data,
        )
        return document_response(doc)


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document_endpoint(
    document_id: str,
    storage: ObjectStorage = Depends(get_document_storage),
):
    """
    Elimina el documento y su archivo en el storage.

    Un documento con MOPs no se elimina (400). Si falla el borrado del
    archivo el registro ya quedó eliminado y solo se loguea.
    """
    with get_db_session() as session:
        doc = delete_document(session, document_id)
        file_path = doc.file_path

    if file_path:
        try:
            storage.delete_object(file_path)
        except StorageError as e:
            logger.warning(f"No se pudo eliminar {file_path} del storage: {e}")

    return MessageResponse(message="Document deleted successfully")
