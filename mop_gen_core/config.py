# mop_gen_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
mop_gen_core.config
===================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Objetivos de diseño
-------------------
1. **Fuente única de verdad**
   Toda la app obtiene configuración solo a través de `get_settings()`.

2. **Inmutabilidad práctica**
   `Settings` se crea una sola vez y luego se reutiliza (cache LRU).

3. **Facilidad de testing**
   En tests alcanza con setear variables de entorno y llamar
   `get_settings.cache_clear()`.

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local (MinIO en 127.0.0.1:9000,
  servicio de extracción en localhost:8000).
- Si falta una credencial, el error se lanza donde se usa, no acá.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global.

    Attributes
    ----------
    database_url:
        URL SQLAlchemy de la base de datos.
    s3_endpoint_url:
        Endpoint del object storage (S3 o MinIO). Vacío = AWS por defecto.
    s3_access_key / s3_secret_key / s3_region:
        Credenciales y región del object storage.
    export_bucket:
        Bucket donde se suben los documentos exportados.
    documents_bucket:
        Bucket de los documentos de especificación subidos (`Document.file_path`).
    export_url_expiry_seconds:
        Validez de las URLs prefirmadas de descarga (24 h por defecto).
    storage_connect_timeout / storage_read_timeout:
        Timeouts del cliente de object storage (segundos).
    extraction_api_url / extraction_api_key:
        Servicio externo que analiza documentos y devuelve datos extraídos.
    extraction_timeout_seconds:
        Timeout de las llamadas al servicio de extracción.
    default_user_id:
        Usuario asignado cuando el request no trae identidad.
    jwt_secret:
        Secreto HS256 para validar tokens. Vacío = no se verifica la firma.
    lock_terminal_status:
        Si es True, una MOP aprobada/rechazada no acepta nuevas reviews.
    """

    database_url: str = "sqlite:///data/mop_gen_core.sqlite"

    # Object storage
    s3_endpoint_url: str = "http://127.0.0.1:9000"
    s3_access_key: str = "minioadmin"
    s3_secret_key: str = "minioadmin"
    s3_region: str = "us-east-1"
    export_bucket: str = "mop-gen-exports"
    documents_bucket: str = "mop-gen-documents"
    export_url_expiry_seconds: int = 24 * 60 * 60
    storage_connect_timeout: float = 5.0
    storage_read_timeout: float = 30.0

    # Servicio de extracción
    extraction_api_url: str = "http://localhost:8000"
    extraction_api_key: str = ""
    extraction_timeout_seconds: float = 10.0

    # Identidad / workflow
    default_user_id: str = "admin"
    jwt_secret: str = ""
    lock_terminal_status: bool = False


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - DATABASE_URL
    - S3_ENDPOINT_URL, S3_ACCESS_KEY, S3_SECRET_KEY, S3_REGION
    - EXPORT_BUCKET, DOCUMENTS_BUCKET, EXPORT_URL_EXPIRY_SECONDS
    - STORAGE_CONNECT_TIMEOUT, STORAGE_READ_TIMEOUT
    - EXTRACTION_API_URL, EXTRACTION_API_KEY, EXTRACTION_TIMEOUT_SECONDS
    - DEFAULT_USER_ID, JWT_SECRET
    - MOP_LOCK_TERMINAL_STATUS
    """
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///data/mop_gen_core.sqlite"),

        s3_endpoint_url=os.getenv("S3_ENDPOINT_URL", "http://127.0.0.1:9000"),
        s3_access_key=os.getenv("S3_ACCESS_KEY", "minioadmin"),
        s3_secret_key=os.getenv("S3_SECRET_KEY", "minioadmin"),
        s3_region=os.getenv("S3_REGION", "us-east-1"),
        export_bucket=os.getenv("EXPORT_BUCKET", "mop-gen-exports"),
        documents_bucket=os.getenv("DOCUMENTS_BUCKET", "mop-gen-documents"),
        export_url_expiry_seconds=int(os.getenv("EXPORT_URL_EXPIRY_SECONDS", str(24 * 60 * 60))),
        storage_connect_timeout=float(os.getenv("STORAGE_CONNECT_TIMEOUT", "5")),
        storage_read_timeout=float(os.getenv("STORAGE_READ_TIMEOUT", "30")),

        extraction_api_url=os.getenv("EXTRACTION_API_URL", "http://localhost:8000"),
        extraction_api_key=os.getenv("EXTRACTION_API_KEY", ""),
        extraction_timeout_seconds=float(os.getenv("EXTRACTION_TIMEOUT_SECONDS", "10")),

        default_user_id=os.getenv("DEFAULT_USER_ID", "admin"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        lock_terminal_status=_env_bool("MOP_LOCK_TERMINAL_STATUS", False),
    )
