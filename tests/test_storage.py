"""
Tests del object storage S3 con `botocore.stub.Stubber` (sin red).
"""

import pytest
from botocore.stub import Stubber

from mop_gen_core.config import Settings
from mop_gen_core.errors import StorageError
from mop_gen_core.storage import S3ObjectStorage


@pytest.fixture
def s3():
    settings = Settings(s3_endpoint_url="http://minio.test:9000", export_bucket="exports")
    return S3ObjectStorage(settings=settings)


def test_ensure_bucket_creates_missing_bucket(s3):
    with Stubber(s3.client) as stub:
        stub.add_client_error("head_bucket", service_error_code="404", http_status_code=404,
                              expected_params={"Bucket": "exports"})
        stub.add_response("create_bucket", {}, expected_params={"Bucket": "exports"})

        s3.ensure_bucket()
        # Segunda llamada no vuelve a consultar
        s3.ensure_bucket()

        stub.assert_no_pending_responses()


def test_ensure_bucket_existing(s3):
    with Stubber(s3.client) as stub:
        stub.add_response("head_bucket", {}, expected_params={"Bucket": "exports"})
        s3.ensure_bucket()
        stub.assert_no_pending_responses()


def test_access_denied_is_storage_error(s3):
    with Stubber(s3.client) as stub:
        stub.add_client_error("head_bucket", service_error_code="403", http_status_code=403)
        with pytest.raises(StorageError):
            s3.ensure_bucket()


def test_presigned_url_uses_endpoint_and_expiry(s3):
    url = s3.presigned_url("mop-1-1700000000000.pdf", 86400)

    assert url.startswith("http://minio.test:9000/exports/mop-1-1700000000000.pdf?")
    assert "X-Amz-Expires=86400" in url


def test_delete_object(s3):
    with Stubber(s3.client) as stub:
        stub.add_response("delete_object", {}, expected_params={"Bucket": "exports", "Key": "uploads/a.pdf"})
        s3.delete_object("uploads/a.pdf")
        stub.assert_no_pending_responses()


def test_delete_object_error_is_storage_error(s3):
    with Stubber(s3.client) as stub:
        stub.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(StorageError):
            s3.delete_object("uploads/a.pdf")
