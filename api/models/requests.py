"""
Modelos de request / response para la API.

Estos modelos definen la estructura esperada de los requests HTTP,
validando tipos antes de pasarlos al core. Los valores de dominio (estados,
formatos) los valida el core, que responde 400 con un mensaje claro.

Los IDs de referencia aceptan camelCase (`documentId`, `mopId`) y snake_case.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Documentos
# ============================================================

class DocumentCreateRequest(BaseModel):
    """Registro de un documento ya subido al storage."""

    filename: str = Field(..., description="Nombre original del archivo")
    file_path: str = Field(default="", description="Clave del objeto en el storage")
    metadata: Optional[dict] = Field(default=None, description="Metadata libre (tamaño, mime type, ...)")


class ExtractionUpdateRequest(BaseModel):
    """Callback del servicio de extracción con el resultado del análisis."""

    status: str = Field(..., description="processing|completed|failed")
    extracted_data: Optional[dict] = Field(
        default=None,
        description="Datos del equipo: vendor, device_type, model, interfaces, routing_protocols, vlans",
    )


class DocumentResponse(BaseModel):
    id: str = Field(..., description="ID único del documento")
    filename: str
    file_path: str
    status: str = Field(..., description="Estado: processing|completed|failed")
    uploaded_by: str
    metadata: dict = Field(default_factory=dict)
    extracted_data: dict = Field(default_factory=dict)
    created_at: str = Field(..., description="Fecha de creación (ISO)")


class DocumentStatusResponse(BaseModel):
    id: str
    status: str
    progress: int = 0
    error: Optional[str] = None


# ============================================================
# MOPs
# ============================================================

class MopCreateRequest(BaseModel):
    """Request para generar una MOP desde un documento procesado."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId", description="ID del documento de origen")
    title: Optional[str] = Field(default=None, description="Título (default: derivado de vendor/device_type)")
    description: Optional[str] = Field(default=None, description="Descripción (default: derivada de vendor/model)")


class MopUpdateRequest(BaseModel):
    """Actualización parcial de una MOP."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = Field(default=None, description="draft|pending|approved|rejected")


class StepResponse(BaseModel):
    id: str
    step_number: int
    description: str
    command: str
    verification: str
    rollback: str


class MopResponse(BaseModel):
    id: str = Field(..., description="ID único de la MOP")
    document_id: str
    title: str
    description: str
    status: str = Field(..., description="Estado: draft|pending|approved|rejected")
    created_by: str
    created_at: str = Field(..., description="Fecha de creación (ISO)")
    updated_at: str = Field(..., description="Fecha de última modificación (ISO)")
    steps: List[StepResponse] = Field(default_factory=list)


class MopEnvelope(BaseModel):
    mop: MopResponse


class MopSummary(BaseModel):
    id: str
    document_id: str
    title: str
    status: str
    created_at: str


class MessageResponse(BaseModel):
    message: str


# ============================================================
# Reviews
# ============================================================

class ReviewCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mop_id: str = Field(..., alias="mopId", description="ID de la MOP revisada")
    comments: Optional[str] = Field(default=None, description="Comentarios del revisor")
    status: Optional[str] = Field(default=None, description="pending|approved|rejected (default: pending)")


class ReviewUpdateRequest(BaseModel):
    comments: Optional[str] = None
    status: Optional[str] = Field(default=None, description="Solo se puede cambiar mientras la review está pending")


class ReviewDecisionRequest(BaseModel):
    """Body de approve / reject."""

    comments: Optional[str] = Field(default=None, description="Default: 'Approved' / 'Rejected'")


class ReviewResponse(BaseModel):
    id: str
    mop_id: str
    reviewer_id: str
    status: str = Field(..., description="Estado: pending|approved|rejected")
    comments: str
    created_at: str


class PendingReviewResponse(ReviewResponse):
    mop: MopSummary


class ReviewDecisionResponse(BaseModel):
    message: str
    mop: MopResponse
    review: ReviewResponse


# ============================================================
# Export
# ============================================================

class ExportResponse(BaseModel):
    url: str = Field(..., description="Link prefirmado de descarga (24 h)")
    format: str
    filename: str
