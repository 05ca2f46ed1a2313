"""
mop_gen_core.export.pdf_weasyprint
==================================

Renderer HTML → PDF usando WeasyPrint.

Reutiliza el cuerpo del renderer HTML y le aplica una hoja de estilos de
impresión:
  - Páginas A4 con márgenes fijos
  - Comandos en fuente monoespaciada, sin cortar un bloque entre páginas
  - La sección de reviews empieza en una página nueva

Requisitos
----------
- weasyprint instalado en el entorno: `pip install weasyprint`
  (más las librerías nativas de Pango).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..domain_models import MopRecord, ProcedureStep, ReviewRecord
from ..errors import RenderError
from .html import render_body, wrap_document

# CSS de impresión que se inyecta al documento HTML
_PDF_CSS = """
@page {
    size: A4;
    margin: 2cm;
}

body {
    font-family: 'Helvetica Neue', Arial, sans-serif;
    font-size: 10pt;
    line-height: 1.5;
    color: #1a1a1a;
}

h1 { font-size: 20pt; font-weight: bold; text-align: center; margin: 0 0 0.6em; color: #111; }
h2 { font-size: 15pt; font-weight: bold; margin: 1em 0 0.4em; color: #222; text-decoration: underline; }
h3 { font-size: 12pt; font-weight: bold; margin: 0.8em 0 0.3em; color: #333; }

p { margin: 0.3em 0; }

.metadata { font-size: 9pt; margin-bottom: 1em; }

/* Comandos */
pre {
    font-family: 'Courier New', Courier, monospace;
    font-size: 9pt;
    white-space: pre-wrap;
    margin: 0.2em 0 0.6em 1.5em;
    page-break-inside: avoid;
}
.verification { margin: 0.2em 0 0.6em 1.5em; }

.step { page-break-inside: avoid; margin-bottom: 1em; }

/* Reviews en página nueva */
h2.reviews { page-break-before: always; }
.review { margin-bottom: 1em; }

h1, h2, h3 {
    page-break-after: avoid;
}
"""


@dataclass
class PdfWeasyprintRenderer:
    """
    Renderer PDF basado en WeasyPrint (HTML → PDF nativo).

    Atributos
    ---------
    base_url:
        URL base para resolver recursos relativos. La MOP no referencia
        recursos externos, así que normalmente queda en None.
    """

    format: str = "pdf"
    content_type: str = "application/pdf"
    base_url: str | None = None

    def render(
        self,
        mop: MopRecord,
        steps: Sequence[ProcedureStep],
        reviews: Sequence[ReviewRecord],
    ) -> bytes:
        """
        Genera el PDF completo en memoria.

        Raises
        ------
        RenderError
            Si WeasyPrint no está disponible o falla al generar el PDF.
        """
        try:
            from weasyprint import HTML
        except (ImportError, OSError) as e:
            raise RenderError(
                f"WeasyPrint no está disponible: {e}. Ejecutá: pip install weasyprint"
            ) from e

        full_html = wrap_document(mop.title, render_body(mop, steps, reviews), _PDF_CSS)

        try:
            return HTML(string=full_html, base_url=self.base_url).write_pdf()
        except Exception as e:
            raise RenderError(f"WeasyPrint falló al generar el PDF: {e}") from e
