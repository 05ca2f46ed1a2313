"""
mop_gen_core.export.html
========================

Renderer HTML: un único documento autocontenido (estilos inline en `<style>`).

El mismo cuerpo lo reutiliza el renderer PDF (`pdf_weasyprint`), que solo
cambia la hoja de estilos. Todo texto de usuario pasa por `html.escape`.
"""

from __future__ import annotations

from html import escape
from typing import List, Sequence

from ..domain_models import MopRecord, ProcedureStep, ReviewRecord
from .formatting import format_date

HTML_CSS = """
body { font-family: Arial, sans-serif; line-height: 1.6; margin: 0; padding: 20px; color: #333; }
h1 { text-align: center; color: #2c3e50; }
h2 { color: #3498db; border-bottom: 1px solid #eee; padding-bottom: 10px; }
h3 { color: #2980b9; }
.metadata { background-color: #f8f9fa; padding: 15px; border-radius: 5px; margin-bottom: 20px; }
.step { margin-bottom: 30px; border: 1px solid #ddd; border-radius: 5px; padding: 15px; }
.command { background-color: #2c3e50; color: #fff; padding: 10px; border-radius: 5px; font-family: monospace; white-space: pre-wrap; }
.verification { background-color: #f1f8e9; padding: 10px; border-radius: 5px; margin: 10px 0; white-space: pre-wrap; }
.rollback { background-color: #ffebee; padding: 10px; border-radius: 5px; white-space: pre-wrap; }
.review { background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin-bottom: 15px; }
.approved { border-left: 5px solid #4caf50; }
.rejected { border-left: 5px solid #f44336; }
.pending { border-left: 5px solid #ff9800; }
"""

# Clases CSS válidas para un bloque de review
_REVIEW_CLASSES = {"approved", "rejected", "pending"}


def render_body(
    mop: MopRecord,
    steps: Sequence[ProcedureStep],
    reviews: Sequence[ReviewRecord],
) -> str:
    """Cuerpo HTML (sin `<html>`/`<head>`) de la MOP."""
    parts: List[str] = [
        f"<h1>{escape(mop.title)}</h1>",
        f"<p class=\"description\">{escape(mop.description)}</p>",
        "<div class=\"metadata\">",
        f"<p><strong>Status:</strong> {escape(mop.status)}</p>",
        f"<p><strong>Created:</strong> {format_date(mop.created_at)}</p>",
        f"<p><strong>Document ID:</strong> {escape(mop.document_id)}</p>",
        "</div>",
        "<h2>Procedure Steps</h2>",
    ]

    for step in steps:
        parts += [
            "<div class=\"step\">",
            f"<h3>Step {step.step_number}: {escape(step.description)}</h3>",
            "<p><strong>Command:</strong></p>",
            f"<pre class=\"command\">{escape(step.command)}</pre>",
            "<p><strong>Verification:</strong></p>",
            f"<div class=\"verification\">{escape(step.verification)}</div>",
            "<p><strong>Rollback:</strong></p>",
            f"<pre class=\"rollback\">{escape(step.rollback)}</pre>",
            "</div>",
        ]

    if reviews:
        parts.append("<h2 class=\"reviews\">Reviews</h2>")
        for index, review in enumerate(reviews, start=1):
            css_class = review.status if review.status in _REVIEW_CLASSES else "pending"
            parts += [
                f"<div class=\"review {css_class}\">",
                f"<h3>Review {index}</h3>",
                f"<p><strong>Status:</strong> {escape(review.status)}</p>",
                f"<p><strong>Reviewer:</strong> {escape(review.reviewer_id)}</p>",
                f"<p><strong>Date:</strong> {format_date(review.created_at)}</p>",
                f"<p><strong>Comments:</strong> {escape(review.comments)}</p>",
                "</div>",
            ]

    return "\n".join(parts)


def wrap_document(title: str, body: str, css: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)}</title>
<style>{css}</style>
</head>
<body>
{body}
</body>
</html>
"""


class HtmlRenderer:
    format = "html"
    content_type = "text/html"

    def render(
        self,
        mop: MopRecord,
        steps: Sequence[ProcedureStep],
        reviews: Sequence[ReviewRecord],
    ) -> bytes:
        body = render_body(mop, steps, reviews)
        return wrap_document(mop.title, body, HTML_CSS).encode("utf-8")
