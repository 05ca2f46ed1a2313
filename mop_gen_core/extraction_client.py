"""
mop_gen_core.extraction_client
==============================

Cliente HTTP del servicio externo de extracción (documento → datos del equipo).

El servicio expone:

- `POST /process` con `{"documentPath", "documentType", "documentId"}`: encola
  el documento. Puede responder solo un acuse o directamente el resultado.
- `GET /status/{document_id}`, que responde:

    {"status": "processing|completed|failed", "progress": 0-100,
     "extracted_data": {...}, "error": "..."}

Política de errores
-------------------
- Servicio inalcanzable / timeout / HTTP != 2xx → `ExtractionServiceUnavailable`
  (subclase de `UpstreamError`, reintentable).
- Payload con forma inválida → `UpstreamError`.

`submit_document` marca el documento como `failed` ante cualquiera de los dos.
`refresh_document_status` distingue: si el servicio no responde se informa el
estado guardado; si responde basura se propaga.
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db.helpers import DOCUMENT_STATUSES, get_document, update_extraction
from .db.models import Document
from .errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ExtractionStatus:
    status: str
    progress: int = 0
    extracted_data: Optional[Dict[str, Any]] = None
    error: str = ""

    def to_dict(self, document_id: str) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": document_id, "status": self.status, "progress": self.progress}
        if self.error:
            result["error"] = self.error
        return result


class ExtractionServiceUnavailable(UpstreamError):
    """El servicio no respondió (conexión, timeout o HTTP de error)."""


class ExtractionClient:
    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or get_settings()
        self.http = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.extraction_api_key:
            headers["X-API-Key"] = self.settings.extraction_api_key
        return headers

    def _url(self, path: str) -> str:
        return f"{self.settings.extraction_api_url.rstrip('/')}/{path}"

    def _json(self, response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("El servicio de extracción devolvió un cuerpo que no es JSON") from e

    def get_status(self, document_id: str) -> ExtractionStatus:
        try:
            response = self.http.get(
                self._url(f"status/{document_id}"),
                headers=self._headers(),
                timeout=self.settings.extraction_timeout_seconds,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ExtractionServiceUnavailable(f"Servicio de extracción no disponible: {e}") from e

        return parse_status_payload(self._json(response))

    def submit(self, document: Document) -> Optional[ExtractionStatus]:
        """
        Envía un documento a procesar.

        Returns:
            El resultado si el servicio lo devuelve en la misma respuesta
            (con `extracted_data` o `status`); None si solo acusa recibo.

        Raises:
            ExtractionServiceUnavailable: el servicio no respondió o respondió != 2xx.
            UpstreamError: el cuerpo no es JSON o tiene forma inválida.
        """
        body = {
            "documentPath": document.file_path or document.filename,
            "documentType": document_type(document),
            "documentId": document.id,
        }
        try:
            response = self.http.post(
                self._url("process"),
                json=body,
                headers=self._headers(),
                timeout=self.settings.extraction_timeout_seconds,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ExtractionServiceUnavailable(f"Servicio de extracción no disponible: {e}") from e

        if not response.content:
            return None
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise UpstreamError("Respuesta de /process inválida: se esperaba un objeto")

        if "status" in payload:
            return parse_status_payload(payload)
        if "extracted_data" in payload:
            return parse_status_payload(dict(payload, status="completed", progress=100))
        return None


def document_type(document: Document) -> str:
    """MIME type del documento: el de la metadata o, si falta, el deducido del nombre."""
    metadata = document.file_metadata
    declared = metadata.get("mime_type") or metadata.get("mimeType")
    if declared:
        return str(declared)
    guessed, _ = mimetypes.guess_type(document.filename)
    return guessed or DEFAULT_DOCUMENT_TYPE


def parse_status_payload(payload: Any) -> ExtractionStatus:
    if not isinstance(payload, dict):
        raise UpstreamError("Respuesta de estado inválida: se esperaba un objeto")

    status = payload.get("status")
    if status not in DOCUMENT_STATUSES:
        raise UpstreamError(f"Respuesta de estado inválida: status={status!r}")

    extracted = payload.get("extracted_data")
    if extracted is not None and not isinstance(extracted, dict):
        raise UpstreamError("Respuesta de estado inválida: 'extracted_data' debe ser un objeto")

    try:
        progress = int(payload.get("progress") or 0)
    except (TypeError, ValueError) as e:
        raise UpstreamError(f"Respuesta de estado inválida: progress={payload.get('progress')!r}") from e

    return ExtractionStatus(
        status=status,
        progress=progress,
        extracted_data=extracted,
        error=str(payload.get("error") or ""),
    )


def refresh_document_status(
    session: Session,
    document_id: str,
    client: ExtractionClient | None = None,
) -> Dict[str, Any]:
    """
    Estado de procesamiento de un documento.

    Si ya está `completed` / `failed` se responde desde la base. Si sigue en
    `processing` se consulta al servicio y se persiste el cambio (con los
    datos extraídos cuando llega `completed`).

    Raises:
        NotFound: documento inexistente.
        UpstreamError: el servicio respondió con un payload inválido.
    """
    document = get_document(session, document_id)

    if document.status in ("completed", "failed"):
        return {
            "id": document.id,
            "status": document.status,
            "progress": 100 if document.status == "completed" else 0,
        }

    client = client or ExtractionClient()
    try:
        remote = client.get_status(document.id)
    except ExtractionServiceUnavailable as e:
        logger.warning(f"No se pudo consultar el estado de {document.id}: {e}")
        return {"id": document.id, "status": document.status, "progress": 0}

    if remote.status != document.status:
        update_extraction(
            session,
            document.id,
            remote.status,
            extracted_data=remote.extracted_data if remote.status == "completed" else None,
        )

    return remote.to_dict(document.id)


def submit_document(
    session: Session,
    document_id: str,
    client: ExtractionClient | None = None,
) -> Document:
    """
    Envía un documento recién registrado al servicio de extracción.

    - Acuse sin resultado → el documento sigue en `processing`.
    - Resultado en la respuesta → se persiste (`completed` con datos, o `failed`).
    - Servicio caído o respuesta inválida → el documento queda en `failed`.

    Raises:
        NotFound: documento inexistente.
    """
    document = get_document(session, document_id)
    client = client or ExtractionClient()

    try:
        result = client.submit(document)
    except UpstreamError as e:
        logger.error(f"No se pudo enviar el documento {document.id} a extracción: {e}")
        return update_extraction(session, document.id, "failed")

    if result is None:
        logger.info(f"Documento {document.id} enviado a extracción")
        return document

    try:
        return update_extraction(
            session,
            document.id,
            result.status,
            extracted_data=result.extracted_data if result.status == "completed" else None,
        )
    except UpstreamError as e:
        logger.error(f"Resultado de extracción inválido para {document.id}: {e}")
        return update_extraction(session, document.id, "failed")
