"""
Dependencias de FastAPI.

Este módulo proporciona dependencias reutilizables para:
- Obtener el usuario actual desde el token JWT (o el usuario por defecto)
- Obtener el object storage de exports y el de documentos subidos
- Obtener el cliente del servicio de extracción

Los tests reemplazan storage y cliente con `app.dependency_overrides`.
"""

import logging
from functools import lru_cache
from typing import Optional

import jwt  # pyjwt
from fastapi import HTTPException, Header

from mop_gen_core.config import get_settings
from mop_gen_core.core.abstractions import ObjectStorage
from mop_gen_core.extraction_client import ExtractionClient
from mop_gen_core.storage import S3ObjectStorage

logger = logging.getLogger(__name__)


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Obtiene el ID del usuario actual desde el token JWT.

    Sin header se usa `DEFAULT_USER_ID` ("admin"). Si `JWT_SECRET` está
    configurado se verifica la firma (HS256); si no, solo se lee el `sub`.

    Raises:
        HTTPException 401: header mal formado, token inválido o sin `sub`.
    """
    settings = get_settings()

    if not authorization:
        return settings.default_user_id

    if not authorization.startswith("Bearer "):
        logger.warning("Authorization header sin formato Bearer")
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'",
        )

    token = authorization.replace("Bearer ", "", 1).strip()
    try:
        if settings.jwt_secret:
            decoded = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
        else:
            decoded = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        logger.warning(f"Token inválido: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")

    user_id = decoded.get("sub")
    if not user_id:
        logger.warning(f"Token sin 'sub'. Campos: {list(decoded.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token: no user ID found")

    return str(user_id)


@lru_cache
def _default_storage() -> S3ObjectStorage:
    return S3ObjectStorage()


def get_storage() -> ObjectStorage:
    return _default_storage()


@lru_cache
def _document_storage() -> S3ObjectStorage:
    return S3ObjectStorage(bucket=get_settings().documents_bucket)


def get_document_storage() -> ObjectStorage:
    return _document_storage()


def get_extraction_client() -> ExtractionClient:
    return ExtractionClient()
