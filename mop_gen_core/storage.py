"""Object storage S3 / MinIO para los documentos exportados y los subidos.

Provee:
  - Cliente boto3 lazy construido desde settings (endpoint propio para MinIO)
  - Creación del bucket en el primer uso
  - Subida con content type
  - Links de descarga con vencimiento (GET prefirmado)
  - Borrado de objetos
"""

from __future__ import annotations

import logging
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings, get_settings
from .errors import StorageError

logger = logging.getLogger(__name__)


class S3ObjectStorage:
    """Object storage sobre un endpoint compatible con S3.

    Toda falla de boto3 / botocore se relanza como `StorageError`.
    """

    def __init__(self, bucket: str | None = None, settings: Settings | None = None):
        """Inicializa el storage.

        Args:
            bucket: Nombre del bucket (default: settings.export_bucket)
            settings: Override de configuración (default: get_settings())
        """
        self.settings = settings or get_settings()
        self.bucket = bucket or self.settings.export_bucket
        self._client = None
        self._bucket_ready = False

    @property
    def client(self):
        if self._client is None:
            s = self.settings
            logger.info(f"Connecting to object storage at {s.s3_endpoint_url or 'AWS'} (bucket: {self.bucket})")
            self._client = boto3.client(
                "s3",
                endpoint_url=s.s3_endpoint_url or None,
                aws_access_key_id=s.s3_access_key or None,
                aws_secret_access_key=s.s3_secret_key or None,
                region_name=s.s3_region,
                config=Config(
                    connect_timeout=s.storage_connect_timeout,
                    read_timeout=s.storage_read_timeout,
                    retries={"max_attempts": 1},
                    signature_version="s3v4",
                    # MinIO no resuelve buckets como subdominio
                    s3={"addressing_style": "path"},
                ),
            )
        return self._client

    def ensure_bucket(self) -> None:
        """Crea el bucket si no existe."""
        if self._bucket_ready:
            return
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code not in {"404", "NoSuchBucket", "NotFound"}:
                logger.error(f"Failed to check bucket {self.bucket}: {e}")
                raise StorageError(f"No se pudo verificar el bucket {self.bucket}: {e}") from e
            try:
                self.client.create_bucket(Bucket=self.bucket)
                logger.info(f"Bucket created: {self.bucket}")
            except (BotoCoreError, ClientError) as create_err:
                logger.error(f"Failed to create bucket {self.bucket}: {create_err}")
                raise StorageError(f"No se pudo crear el bucket {self.bucket}: {create_err}") from create_err
        except BotoCoreError as e:
            logger.error(f"Object storage unreachable: {e}")
            raise StorageError(f"Object storage no disponible: {e}") from e
        self._bucket_ready = True

    def upload_file(self, path: Path, object_name: str, content_type: str) -> None:
        """Sube un archivo local.

        Args:
            path: Ruta del archivo local
            object_name: Clave del objeto en el bucket
            content_type: MIME type guardado con el objeto
        """
        self.ensure_bucket()
        logger.info(f"Uploading {path} to s3://{self.bucket}/{object_name}")
        try:
            self.client.upload_file(
                str(path),
                self.bucket,
                object_name,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {object_name}: {e}")
            raise StorageError(f"Error subiendo {object_name}: {e}") from e

    def presigned_url(self, object_name: str, expires_seconds: int) -> str:
        """Link GET prefirmado válido por `expires_seconds`."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": object_name},
                ExpiresIn=expires_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to presign {object_name}: {e}")
            raise StorageError(f"Error generando link de descarga para {object_name}: {e}") from e

    def delete_object(self, object_name: str) -> None:
        """Elimina un objeto del bucket (S3 no falla si no existe)."""
        logger.info(f"Deleting s3://{self.bucket}/{object_name}")
        try:
            self.client.delete_object(Bucket=self.bucket, Key=object_name)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete {object_name}: {e}")
            raise StorageError(f"Error eliminando {object_name}: {e}") from e
