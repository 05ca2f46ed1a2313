"""
Fixtures compartidas.

Cada test corre contra una base SQLite propia en `tmp_path`: se setea
DATABASE_URL, se limpia el cache de settings y se recrea el engine.
"""

from datetime import datetime
from pathlib import Path

import pytest

from mop_gen_core.config import get_settings
from mop_gen_core.db.database import dispose_engine, get_db_session, init_db
from mop_gen_core.domain_models import MopRecord, ReviewRecord
from mop_gen_core.errors import StorageError


CISCO_ROUTER = {
    "vendor": "cisco",
    "device_type": "router",
    "model": "ISR4331",
    "interfaces": [{"name": "Gi0/0", "ip": "10.0.0.1", "subnet": "255.255.255.0"}],
    "routing_protocols": ["ospf"],
}

JUNIPER_SWITCH = {
    "vendor": "Juniper",
    "device_type": "switch",
    "model": "EX4300",
    "interfaces": [
        {"name": "ge-0/0/0", "ip": "172.16.0.1", "subnet": "255.255.0.0"},
        {"name": "ge-0/0/1"},
    ],
    "routing_protocols": ["bgp", "ospf"],
    "vlans": [{"id": "10", "name": "USERS"}, {"id": "20"}],
}


class FakeStorage:
    """Object storage en memoria: guarda bytes y content type por objeto."""

    def __init__(self):
        self.objects = {}
        self.presigned = []
        self.deleted = []

    def upload_file(self, path: Path, object_name: str, content_type: str) -> None:
        self.objects[object_name] = (Path(path).read_bytes(), content_type)

    def presigned_url(self, object_name: str, expires_seconds: int) -> str:
        self.presigned.append((object_name, expires_seconds))
        return f"https://storage.test/mop-gen-exports/{object_name}?X-Amz-Expires={expires_seconds}"

    def delete_object(self, object_name: str) -> None:
        self.deleted.append(object_name)
        self.objects.pop(object_name, None)


class FailingStorage(FakeStorage):
    def upload_file(self, path: Path, object_name: str, content_type: str) -> None:
        assert Path(path).exists()
        raise StorageError("bucket no disponible")


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    """Base SQLite limpia y settings por defecto para cada test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.sqlite'}")
    monkeypatch.delenv("MOP_LOCK_TERMINAL_STATUS", raising=False)
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    get_settings.cache_clear()
    dispose_engine()
    init_db()
    yield
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def lock_terminal(monkeypatch):
    """Activa la política estricta sobre MOPs terminales."""
    monkeypatch.setenv("MOP_LOCK_TERMINAL_STATUS", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def session():
    """Fixture que proporciona una sesión de base de datos para los tests.

    Usa get_db_session() que maneja commit/rollback automáticamente.
    """
    with get_db_session() as db_session:
        yield db_session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def mop_record():
    return MopRecord(
        id="mop-1",
        document_id="doc-1",
        title="Cisco router Configuration MOP",
        description="Method of Procedure for configuring cisco ISR4331 router",
        status="draft",
        created_at=datetime(2024, 5, 1, 12, 30, 0),
        created_by="admin",
    )


@pytest.fixture
def review_records():
    return [
        ReviewRecord(
            id="rev-2",
            mop_id="mop-1",
            reviewer_id="bob",
            status="rejected",
            comments="Falta <ventana> de mantenimiento & rollback",
            created_at=datetime(2024, 5, 3, 9, 0, 0),
        ),
        ReviewRecord(
            id="rev-1",
            mop_id="mop-1",
            reviewer_id="alice",
            status="approved",
            comments="Approved",
            created_at=datetime(2024, 5, 2, 9, 0, 0),
        ),
    ]
