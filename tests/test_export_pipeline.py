"""
Tests del pipeline de exportación (render → temporal → storage → link).

Prueba:
- Resultado completo (url, filename, object name, content type)
- Validación de formato antes de cualquier trabajo
- Limpieza del directorio temporal en éxito y en error
"""

import re

import pytest

from conftest import CISCO_ROUTER, FailingStorage
from mop_gen_core.db.helpers import approve_mop, create_document, create_mop, update_extraction
from mop_gen_core.errors import InvalidInput, NotFound, RenderError, StorageError
from mop_gen_core.export import get_renderer
from mop_gen_core.export.pipeline import download_filename, export_mop, object_name_for


@pytest.fixture
def mop(session):
    doc = create_document(session, filename="isr4331.pdf")
    update_extraction(session, doc.id, "completed", extracted_data=CISCO_ROUTER)
    return create_mop(session, doc.id, title="Core/Edge: R1 (v2)")


@pytest.fixture
def temp_root(tmp_path):
    root = tmp_path / "exports"
    root.mkdir()
    return root


def test_export_txt(session, mop, storage, temp_root):
    approve_mop(session, mop.id, reviewer_id="alice")

    result = export_mop(session, mop.id, "TXT", storage, temp_root=temp_root)

    assert result.format == "txt"
    assert result.content_type == "text/plain"
    assert result.filename == "Core_Edge__R1__v2_.txt"
    assert re.fullmatch(rf"{mop.id}-\d{{13}}\.txt", result.object_name)
    assert result.url.startswith("https://storage.test/")
    assert result.to_dict() == {"url": result.url, "format": "txt", "filename": result.filename}

    data, content_type = storage.objects[result.object_name]
    assert content_type == "text/plain"
    assert b"Reviewer: alice" in data
    assert storage.presigned == [(result.object_name, 86400)]

    assert list(temp_root.iterdir()) == []


def test_unsupported_format_fails_before_any_work(session, mop, storage, temp_root):
    with pytest.raises(InvalidInput):
        export_mop(session, mop.id, "xml", storage, temp_root=temp_root)

    assert list(temp_root.iterdir()) == []
    assert storage.objects == {}


def test_unknown_mop(session, storage, temp_root):
    with pytest.raises(NotFound):
        export_mop(session, "no-existe", "html", storage, temp_root=temp_root)
    assert list(temp_root.iterdir()) == []


def test_storage_failure_cleans_up(session, mop, temp_root):
    with pytest.raises(StorageError):
        export_mop(session, mop.id, "html", FailingStorage(), temp_root=temp_root)
    assert list(temp_root.iterdir()) == []


def test_render_failure_cleans_up(session, mop, storage, temp_root, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("sin memoria")

    monkeypatch.setattr(get_renderer("html"), "render", boom)

    with pytest.raises(RenderError):
        export_mop(session, mop.id, "html", storage, temp_root=temp_root)
    assert list(temp_root.iterdir()) == []
    assert storage.objects == {}


def test_expiry_comes_from_settings(session, mop, storage, temp_root, monkeypatch):
    from mop_gen_core.config import get_settings

    monkeypatch.setenv("EXPORT_URL_EXPIRY_SECONDS", "600")
    get_settings.cache_clear()

    result = export_mop(session, mop.id, "html", storage, temp_root=temp_root)
    assert storage.presigned == [(result.object_name, 600)]


def test_download_filename_and_object_name():
    assert download_filename("Cisco router Configuration MOP", "pdf") == "Cisco_router_Configuration_MOP.pdf"
    assert download_filename("Año 2024", "txt") == "A_o_2024.txt"
    assert object_name_for("abc", "docx", now=1700000000.5) == "abc-1700000000500.docx"
