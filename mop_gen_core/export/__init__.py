"""
Renderers de MOP y pipeline de exportación.

Formatos soportados: pdf, docx, html, txt. El formato se valida antes de
hacer cualquier trabajo (`get_renderer` lanza `InvalidInput`).
"""

from __future__ import annotations

from typing import Dict, Sequence

from ..core.abstractions import DocumentRenderer
from ..domain_models import MopRecord, ProcedureStep, ReviewRecord
from ..errors import InvalidInput, MopGenError, RenderError
from .docx_renderer import DocxRenderer
from .html import HtmlRenderer
from .pdf_weasyprint import PdfWeasyprintRenderer
from .text import TextRenderer

RENDERERS: Dict[str, DocumentRenderer] = {
    "pdf": PdfWeasyprintRenderer(),
    "docx": DocxRenderer(),
    "html": HtmlRenderer(),
    "txt": TextRenderer(),
}

SUPPORTED_FORMATS = tuple(RENDERERS)

CONTENT_TYPES: Dict[str, str] = {fmt: r.content_type for fmt, r in RENDERERS.items()}


def normalize_format(fmt: str | None) -> str:
    """Formato en minúsculas; None/"" → pdf."""
    return (fmt or "pdf").strip().lower()


def get_renderer(fmt: str | None) -> DocumentRenderer:
    key = normalize_format(fmt)
    renderer = RENDERERS.get(key)
    if renderer is None:
        raise InvalidInput(
            f"Unsupported export format '{fmt}'. Supported: {', '.join(SUPPORTED_FORMATS)}"
        )
    return renderer


def render(
    mop: MopRecord,
    steps: Sequence[ProcedureStep],
    reviews: Sequence[ReviewRecord],
    fmt: str,
) -> bytes:
    """
    Codifica la MOP en el formato pedido.

    Raises:
        InvalidInput: formato no soportado.
        RenderError: el renderer falló (cualquier excepción se envuelve).
    """
    renderer = get_renderer(fmt)
    try:
        return renderer.render(mop, steps, reviews)
    except MopGenError:
        raise
    except Exception as e:
        raise RenderError(f"Error generando {renderer.format}: {e}") from e


__all__ = [
    "CONTENT_TYPES",
    "RENDERERS",
    "SUPPORTED_FORMATS",
    "get_renderer",
    "normalize_format",
    "render",
]
