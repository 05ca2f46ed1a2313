"""
Tests de los renderers (html, txt, docx, pdf).

Los renderers son puros: se prueban con snapshots de dominio, sin DB.
"""

import io
import sys
import types
import zipfile

import pytest
from docx import Document as DocxDocument

from conftest import CISCO_ROUTER
from mop_gen_core.domain_models import parse_extracted_data
from mop_gen_core.errors import InvalidInput, RenderError
from mop_gen_core.export import CONTENT_TYPES, get_renderer, render
from mop_gen_core.export.formatting import format_date
from mop_gen_core.synthesis import synthesize


@pytest.fixture
def steps():
    return synthesize(parse_extracted_data(CISCO_ROUTER))


def test_content_types():
    assert CONTENT_TYPES == {
        "pdf": "application/pdf",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "html": "text/html",
        "txt": "text/plain",
    }


def test_unsupported_format():
    with pytest.raises(InvalidInput):
        get_renderer("xml")


def test_format_is_case_insensitive():
    assert get_renderer("HTML").format == "html"


def test_format_date(mop_record):
    assert format_date(mop_record.created_at) == "2024-05-01 12:30:00 UTC"


def test_txt_layout(mop_record, steps, review_records):
    text = render(mop_record, steps, review_records, "txt").decode("utf-8")
    lines = text.splitlines()

    assert lines[0] == mop_record.title
    assert lines[1] == "=" * len(mop_record.title)
    assert "Status: draft" in lines
    assert "Created: 2024-05-01 12:30:00 UTC" in lines
    assert "Document ID: doc-1" in lines
    assert "PROCEDURE STEPS" in lines
    assert "STEP 4: Configure interfaces" in lines
    assert "-" * 40 in lines
    assert " ip address 10.0.0.1 255.255.255.0" in lines
    assert "REVIEWS" in lines
    assert "Review 1:" in lines and "Reviewer: bob" in lines
    assert "Date: 2024-05-03 09:00:00 UTC" in lines


def test_txt_without_reviews_has_no_review_section(mop_record, steps):
    text = render(mop_record, steps, [], "txt").decode("utf-8")
    assert "REVIEWS" not in text
    assert text.count("STEP ") == len(steps)


def test_html_is_escaped_and_classed(mop_record, steps, review_records):
    html = render(mop_record, steps, review_records, "html").decode("utf-8")

    assert html.startswith("<!DOCTYPE html>")
    assert "<style>" in html
    assert "<h2>Procedure Steps</h2>" in html
    assert "Falta &lt;ventana&gt; de mantenimiento &amp; rollback" in html
    assert "<ventana>" not in html
    assert 'class="review rejected"' in html
    assert 'class="review approved"' in html
    for step in steps:
        assert f"Step {step.step_number}: {step.description}" in html


def test_html_and_txt_are_deterministic(mop_record, steps, review_records):
    for fmt in ("html", "txt"):
        assert render(mop_record, steps, review_records, fmt) == render(mop_record, steps, review_records, fmt)


def test_docx_structure(mop_record, steps, review_records):
    data = render(mop_record, steps, review_records, "docx")
    doc = DocxDocument(io.BytesIO(data))
    paragraphs = doc.paragraphs

    headings = [(p.style.name, p.text) for p in paragraphs if p.style.name.startswith("Heading")]
    assert headings == [
        ("Heading 1", mop_record.title),
        ("Heading 2", "Procedure Steps"),
        ("Heading 2", "Reviews"),
    ]

    step_titles = [p.text for p in paragraphs if p.style.name == "Step Title"]
    assert step_titles == [f"Step {s.step_number}: {s.description}" for s in steps]

    reviews_heading = next(p for p in paragraphs if p.text == "Reviews")
    assert reviews_heading.paragraph_format.page_break_before is True

    command_runs = [r for p in paragraphs for r in p.runs if r.text.rstrip("\n") == "interface Gi0/0"]
    assert command_runs and command_runs[0].font.name == "Courier New"


def test_docx_is_deterministic(mop_record, steps, review_records):
    first = render(mop_record, steps, review_records, "docx")
    second = render(mop_record, steps, review_records, "docx")
    assert first == second
    assert zipfile.is_zipfile(io.BytesIO(first))


def test_renderer_failure_is_wrapped(mop_record, steps, monkeypatch):
    renderer = get_renderer("txt")

    def boom(*args, **kwargs):
        raise ValueError("encoding roto")

    monkeypatch.setattr(renderer, "render", boom)
    with pytest.raises(RenderError):
        render(mop_record, steps, [], "txt")


def test_pdf(mop_record, steps, review_records):
    try:
        import weasyprint  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f"WeasyPrint no disponible: {e}")

    data = render(mop_record, steps, review_records, "pdf")
    assert data.startswith(b"%PDF")


def test_pdf_html_has_print_rules(mop_record, steps, review_records, monkeypatch):
    captured = {}

    class FakeHTML:
        def __init__(self, string, base_url=None):
            captured["html"] = string

        def write_pdf(self):
            return b"%PDF-1.7 fake"

    fake_module = types.ModuleType("weasyprint")
    fake_module.HTML = FakeHTML
    monkeypatch.setitem(sys.modules, "weasyprint", fake_module)

    assert render(mop_record, steps, review_records, "pdf") == b"%PDF-1.7 fake"

    html = captured["html"]
    assert '<h2 class="reviews">Reviews</h2>' in html
    assert "h2.reviews { page-break-before: always; }" in html
    pre_rule = html.split("pre {", 1)[1].split("}", 1)[0]
    assert "monospace" in pre_rule
    assert "page-break-inside: avoid" in pre_rule
    assert "size: A4" in html
    assert "Falta &lt;ventana&gt; de mantenimiento &amp; rollback" in html


def test_pdf_without_weasyprint_is_render_error(mop_record, steps, monkeypatch):
    # None en sys.modules hace fallar el import
    monkeypatch.setitem(sys.modules, "weasyprint", None)
    with pytest.raises(RenderError):
        render(mop_record, steps, [], "pdf")


def test_pdf_is_deterministic(mop_record, steps, review_records):
    try:
        import weasyprint  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f"WeasyPrint no disponible: {e}")

    first = render(mop_record, steps, review_records, "pdf")
    assert first == render(mop_record, steps, review_records, "pdf")
