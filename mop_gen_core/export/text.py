"""Renderer de texto plano: subrayado con `=` para título y secciones, `-` por paso."""

from __future__ import annotations

from typing import List, Sequence

from ..domain_models import MopRecord, ProcedureStep, ReviewRecord
from .formatting import format_date

STEP_RULE = "-" * 40


def _heading(text: str) -> List[str]:
    return [text, "=" * len(text), ""]


class TextRenderer:
    format = "txt"
    content_type = "text/plain"

    def render(
        self,
        mop: MopRecord,
        steps: Sequence[ProcedureStep],
        reviews: Sequence[ReviewRecord],
    ) -> bytes:
        lines: List[str] = _heading(mop.title)
        lines += [
            mop.description,
            "",
            f"Status: {mop.status}",
            f"Created: {format_date(mop.created_at)}",
            f"Document ID: {mop.document_id}",
            "",
        ]
        lines += _heading("PROCEDURE STEPS")

        for step in steps:
            lines += [
                f"STEP {step.step_number}: {step.description}",
                STEP_RULE,
                "",
                "Command:",
                step.command,
                "",
                "Verification:",
                step.verification,
                "",
                "Rollback:",
                step.rollback,
                "",
            ]

        if reviews:
            lines += _heading("REVIEWS")
            for index, review in enumerate(reviews, start=1):
                lines += [
                    f"Review {index}:",
                    f"Status: {review.status}",
                    f"Reviewer: {review.reviewer_id}",
                    f"Date: {format_date(review.created_at)}",
                    f"Comments: {review.comments}",
                    "",
                ]

        return ("\n".join(lines) + "\n").encode("utf-8")
