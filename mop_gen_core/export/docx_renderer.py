"""
mop_gen_core.export.docx_renderer
=================================

Renderer DOCX con python-docx.

Estructura:
- Título como Heading 1 centrado, descripción y bloque de metadata.
- "Procedure Steps" como Heading 2; cada paso con estilo "Step Title"
  (derivado de Heading 3).
- Comandos en runs monoespaciados (Courier New).
- "Reviews" como Heading 2, precedido por un salto de página.
"""

from __future__ import annotations

import zipfile
from io import BytesIO
from typing import Sequence

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from ..domain_models import MopRecord, ProcedureStep, ReviewRecord
from .formatting import format_date

STEP_TITLE_STYLE = "Step Title"
CODE_FONT = "Courier New"

# Timestamp fijo para las entradas del zip (mínimo que admite el formato)
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def _define_styles(doc) -> None:
    styles = doc.styles

    normal = styles["Normal"]
    normal.font.name = "Arial"
    normal.font.size = Pt(11)

    styles["Heading 1"].font.size = Pt(14)
    styles["Heading 2"].font.size = Pt(12)

    step_title = styles.add_style(STEP_TITLE_STYLE, WD_STYLE_TYPE.PARAGRAPH)
    step_title.base_style = styles["Heading 3"]
    step_title.font.bold = True
    step_title.font.size = Pt(10)
    step_title.paragraph_format.space_before = Pt(12)
    step_title.paragraph_format.space_after = Pt(6)


def _labeled_block(doc, label: str, text: str, code: bool = False) -> None:
    doc.add_paragraph(f"{label}:")
    p = doc.add_paragraph()
    p.paragraph_format.left_indent = Inches(0.5)
    lines = text.split("\n")
    for i, line in enumerate(lines):
        run = p.add_run(line)
        if code:
            run.font.name = CODE_FONT
            run.font.size = Pt(9)
        if i < len(lines) - 1:
            run.add_break()


class DocxRenderer:
    format = "docx"
    content_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    def render(
        self,
        mop: MopRecord,
        steps: Sequence[ProcedureStep],
        reviews: Sequence[ReviewRecord],
    ) -> bytes:
        doc = Document()
        _define_styles(doc)

        props = doc.core_properties
        props.title = mop.title
        props.subject = mop.description
        # Fecha fija: el archivo no depende del momento del render
        props.created = mop.created_at
        props.modified = mop.created_at

        title = doc.add_heading(mop.title, level=1)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER

        doc.add_paragraph(mop.description)
        doc.add_paragraph(f"Status: {mop.status}")
        doc.add_paragraph(f"Created: {format_date(mop.created_at)}")
        doc.add_paragraph(f"Document ID: {mop.document_id}")

        doc.add_heading("Procedure Steps", level=2)
        for step in steps:
            doc.add_paragraph(f"Step {step.step_number}: {step.description}", style=STEP_TITLE_STYLE)
            _labeled_block(doc, "Command", step.command, code=True)
            _labeled_block(doc, "Verification", step.verification)
            _labeled_block(doc, "Rollback", step.rollback, code=True)

        if reviews:
            heading = doc.add_heading("Reviews", level=2)
            heading.paragraph_format.page_break_before = True
            for index, review in enumerate(reviews, start=1):
                doc.add_paragraph(f"Review {index}:")
                doc.add_paragraph(f"Status: {review.status}")
                doc.add_paragraph(f"Reviewer: {review.reviewer_id}")
                doc.add_paragraph(f"Date: {format_date(review.created_at)}")
                doc.add_paragraph(f"Comments: {review.comments}")

        buffer = BytesIO()
        doc.save(buffer)
        return _normalize_zip(buffer.getvalue())


def _normalize_zip(data: bytes) -> bytes:
    """Reescribe el paquete con timestamps fijos: mismo input, mismos bytes."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(data)) as src, zipfile.ZipFile(out, "w") as dst:
        for info in src.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=_ZIP_EPOCH)
            entry.compress_type = zipfile.ZIP_DEFLATED
            dst.writestr(entry, src.read(info.filename))
    return out.getvalue()
