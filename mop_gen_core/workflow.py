"""
mop_gen_core.workflow
=====================

Máquina de estados del ciclo de vida de una MOP.

    draft ──► pending ──► approved
      │                ╲
      └────────────────► rejected

Reglas
------
- Una MOP nace en `draft`.
- Una review `approved` / `rejected` lleva la MOP directamente a ese estado,
  aunque sea la primera review (no hay compuerta `pending` obligatoria).
- Una review `pending` lleva una MOP `draft` a `pending`; en cualquier otro
  estado no cambia nada.
- Los estados terminales NO son inmutables por defecto: aprobar y después
  rechazar está permitido, gana la última review terminal. Con
  `lock_terminal=True` (setting `MOP_LOCK_TERMINAL_STATUS`) una MOP terminal
  no acepta más reviews.

Este módulo es puro: la persistencia del efecto la hace `db.helpers`.
"""

from __future__ import annotations

from .errors import InvalidInput

MOP_STATUSES = ("draft", "pending", "approved", "rejected")
REVIEW_STATUSES = ("pending", "approved", "rejected")
TERMINAL_STATUSES = frozenset({"approved", "rejected"})

DEFAULT_COMMENTS = {
    "approved": "Approved",
    "rejected": "Rejected",
}


def validate_mop_status(status: str) -> str:
    if status not in MOP_STATUSES:
        raise InvalidInput(
            f"Estado de MOP inválido: '{status}'. Valores permitidos: {', '.join(MOP_STATUSES)}"
        )
    return status


def validate_review_status(status: str) -> str:
    if status not in REVIEW_STATUSES:
        raise InvalidInput(
            f"Estado de review inválido: '{status}'. Valores permitidos: {', '.join(REVIEW_STATUSES)}"
        )
    return status


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def next_mop_status(current: str, review_status: str, lock_terminal: bool = False) -> str:
    """
    Estado de la MOP después de registrar una review.

    Args:
        current: Estado actual de la MOP.
        review_status: Estado de la review que se está creando.
        lock_terminal: Política estricta: rechaza reviews sobre MOPs terminales.

    Raises:
        InvalidInput: estado de review desconocido, o MOP terminal con
            `lock_terminal=True`.
    """
    validate_review_status(review_status)
    if lock_terminal and is_terminal(current):
        raise InvalidInput(f"La MOP ya está {current} y no acepta nuevas reviews")

    if is_terminal(review_status):
        return review_status
    if current == "draft":
        return "pending"
    return current
