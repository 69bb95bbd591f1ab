from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A5
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from utils.constants import PaymentType, StudentClass
from utils.money import to_float
from utils.records import Payment, Student

logger = logging.getLogger(__name__)

BRAND_GREEN = colors.HexColor("#064e3b")
MUTED = colors.HexColor("#64748b")
LIGHT_BG = colors.HexColor("#ecfdf5")


def _fonts(font_path: Optional[str]):
    """Regular/bold font names; a TTF (e.g. a Bengali face) replaces Helvetica when given."""
    if font_path and os.path.exists(font_path):
        try:
            pdfmetrics.registerFont(TTFont("ReceiptFont", font_path))
            return "ReceiptFont", "ReceiptFont"
        except Exception:
            logger.exception("Could not load receipt font %s", font_path)
    return "Helvetica", "Helvetica-Bold"


def _latin(text: str, fallback: str) -> str:
    """``text`` when the built-in fonts can draw it, else ``fallback``."""
    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        return fallback
    return text


def _enum_label(value: str, enum_cls) -> str:
    member = enum_cls.parse(value)
    if member is None:
        return "-"
    return member.name.replace("_", " ").title()


def receipt_lines(payment: Payment, student: Optional[Student], unicode_font: bool = True) -> List[Tuple[str, str]]:
    """Label/value rows printed under the amount.

    Without a Unicode font Helvetica cannot draw Bengali, so known tags fall
    back to their English enum names and other text to an ASCII stand-in.
    """
    def show(text, fallback):
        text = text or ""
        return text if unicode_font else _latin(text, fallback)

    lines = [
        ("Receipt No.", f"#{payment.id}"),
        ("Date", payment.date or "N/A"),
        ("Student", show(student.name, student.id) if student else payment.student_id),
    ]
    if student:
        lines.append(("Class / Roll", f"{show(student.class_name, _enum_label(student.class_name, StudentClass))} / {student.roll}"))
    lines.append(("Fee Type", show(payment.payment_type, _enum_label(payment.payment_type, PaymentType))))
    if payment.month:
        lines.append(("Month", show(payment.month, "-")))
    if payment.exam_name:
        lines.append(("Exam", show(payment.exam_name, "-")))
    lines.append(("Received By", show(payment.received_by, "-") or "N/A"))
    return lines


def render_receipt(
    payment: Payment,
    student: Optional[Student],
    school_name: str,
    currency: str = "BDT",
    font_path: Optional[str] = None,
    latin_school_name: str = "",
) -> bytes:
    """Money receipt for one payment as PDF bytes.

    ``latin_school_name`` heads the page when no Unicode ``font_path`` is
    available and ``school_name`` cannot be drawn with Helvetica.
    """
    regular, bold = _fonts(font_path)
    unicode_font = regular != "Helvetica"
    if not unicode_font:
        school_name = _latin(school_name, latin_school_name or "School")

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A5)
    width, height = A5
    x_margin = 14 * mm

    # Header bar
    header_h = 24 * mm
    c.setFillColor(BRAND_GREEN)
    c.rect(0, height - header_h, width, header_h, fill=1, stroke=0)
    c.setFillColor(colors.white)
    c.setFont(bold, 14)
    c.drawCentredString(width / 2, height - 11 * mm, school_name)
    c.setFont(regular, 9)
    c.drawCentredString(width / 2, height - 17 * mm, "Money Receipt")

    # Amount card
    y = height - header_h - 8 * mm
    card_h = 14 * mm
    card_y = y - card_h
    c.setFillColor(LIGHT_BG)
    c.roundRect(x_margin, card_y, width - 2 * x_margin, card_h, 3 * mm, fill=1, stroke=0)
    c.setFillColor(MUTED)
    c.setFont(regular, 9)
    c.drawCentredString(width / 2, card_y + card_h - 5 * mm, "Amount Paid")
    c.setFillColor(BRAND_GREEN)
    c.setFont(bold, 16)
    c.drawCentredString(width / 2, card_y + 4 * mm, f"{currency} {to_float(payment.amount):,.2f}")
    y = card_y - 10 * mm

    def draw_kv(label: str, value: str):
        nonlocal y
        c.setFont(regular, 9)
        c.setFillColor(MUTED)
        c.drawString(x_margin, y, label)
        c.setFillColor(colors.black)
        c.setFont(bold, 10)
        c.drawRightString(width - x_margin, y, value)
        y -= 7 * mm

    for label, value in receipt_lines(payment, student, unicode_font):
        draw_kv(label, value)

    c.setStrokeColor(colors.lightgrey)
    c.setDash(1, 2)
    c.line(x_margin, y, width - x_margin, y)
    c.setDash()

    c.setFillColor(MUTED)
    c.setFont(regular, 9)
    c.drawCentredString(width / 2, max(y - 10 * mm, 18 * mm), "Thank you for your payment.")

    c.showPage()
    c.save()
    return buf.getvalue()
