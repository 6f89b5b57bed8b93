"""Signed job paperwork rendered to PDF with reportlab."""
from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from ..core.enums import DocumentType

MARGIN = 0.75 * inch
BODY_FONT = ("Helvetica", 10)
LINE_HEIGHT = 0.18 * inch


@dataclass(frozen=True)
class Section:
    heading: str
    paragraphs: Sequence[str]


@dataclass(frozen=True)
class DocumentContext:
    company_name: str
    job_number: str
    job_title: str
    customer_name: str
    address: str
    operator_name: Optional[str]
    signer_name: str
    signed_at: datetime


LIABILITY_RELEASE = (
    "Liability Release & Indemnification",
    "Required before starting work",
    [
        Section(
            "Limitation of Liability",
            [
                "Customer acknowledges that concrete cutting, coring and demolition involve inherent risks "
                "including vibration, dust, slurry and noise. The contractor is not liable for damage to "
                "concealed items that were not marked or disclosed before work began.",
            ],
        ),
        Section(
            "Underground Utilities",
            [
                "Customer is responsible for locating and marking all embedded and underground utilities, "
                "post-tension cables and reinforcing steel in the work area. The contractor is not liable for "
                "damage to unmarked utilities.",
            ],
        ),
        Section(
            "Operator Acknowledgment",
            [
                "The operator has reviewed the work area with the customer representative and confirmed the "
                "scope of work before starting.",
            ],
        ),
    ],
)

WORK_ORDER_AGREEMENT = (
    "Work Order & Service Agreement",
    "Signed before commencement of work",
    [
        Section(
            "Customer Responsibilities",
            [
                "Customer shall provide at Customer's expense: safe and adequate access to the work area, "
                "electrical power and water supply if required, parking for equipment and vehicles, "
                "protection of existing property and finishes, accurate location of all utilities and "
                "obstructions, and building access and security clearances.",
            ],
        ),
        Section(
            "Water Damage Disclaimer",
            [
                "Wet cutting produces slurry water. Customer is responsible for protecting finishes, "
                "openings and areas below the work surface from water intrusion.",
            ],
        ),
        Section(
            "Ground Penetrating Radar Limitations",
            [
                "Scanning cannot reliably detect post-tension cables or small diameter rebar, non-metallic "
                "utilities, de-energized electrical lines, low-voltage wiring or obstructions in concrete "
                "poured less than 30 days ago. Customer authorizes cutting through such items at their own risk.",
            ],
        ),
        Section(
            "Agreement Acceptance",
            ["This agreement was electronically signed and is legally binding."],
        ),
    ],
)

TEMPLATES = {
    DocumentType.LIABILITY_RELEASE: LIABILITY_RELEASE,
    DocumentType.WORK_ORDER_AGREEMENT: WORK_ORDER_AGREEMENT,
}


class _Writer:
    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.width, self.height = LETTER
        self.y = self.height - MARGIN

    def _ensure_room(self, needed: float) -> None:
        if self.y - needed < MARGIN:
            self.c.showPage()
            self.y = self.height - MARGIN

    def text(self, value: str, *, font: tuple[str, float] = BODY_FONT, gap: float = LINE_HEIGHT) -> None:
        name, size = font
        for line in simpleSplit(value, name, size, self.width - 2 * MARGIN) or [""]:
            self._ensure_room(gap)
            self.c.setFont(name, size)
            self.c.drawString(MARGIN, self.y, line)
            self.y -= gap

    def space(self, amount: float = LINE_HEIGHT) -> None:
        self.y -= amount


def render_document(doc_type: DocumentType, ctx: DocumentContext) -> bytes:
    title, subtitle, sections = TEMPLATES[doc_type]
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    c.setTitle(f"{title} - {ctx.job_number}")
    w = _Writer(c)

    w.text(ctx.company_name, font=("Helvetica-Bold", 16), gap=0.3 * inch)
    w.text(title, font=("Helvetica-Bold", 14), gap=0.24 * inch)
    w.text(subtitle, font=("Helvetica-Oblique", 10))
    w.space()

    for label, value in (
        ("Job number", ctx.job_number),
        ("Job", ctx.job_title),
        ("Customer", ctx.customer_name),
        ("Address", ctx.address),
        ("Operator", ctx.operator_name or "Unassigned"),
    ):
        w.text(f"{label}: {value}")
    w.space()

    for section in sections:
        w.text(section.heading, font=("Helvetica-Bold", 11), gap=0.22 * inch)
        for paragraph in section.paragraphs:
            w.text(paragraph)
        w.space(0.1 * inch)

    w.space()
    w.text("Electronic Signature", font=("Helvetica-Bold", 11), gap=0.22 * inch)
    w.text(f"Signed by: {ctx.signer_name}")
    w.text(f"Signed at: {ctx.signed_at.strftime('%Y-%m-%d %H:%M')}")

    c.showPage()
    c.save()
    return buf.getvalue()


def file_name_for(doc_type: DocumentType, job_number: str) -> str:
    return f"{doc_type.value}_{job_number}.pdf"
