from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from utils.constants import ALL_CLASSES, PaymentType
from utils.ledger import date_key
from utils.liability import monthly_charge
from utils.money import ZERO
from utils.records import ClassConfig, ExamFeeConfig, Payment, Student


def _matches(student: Student, term: str) -> bool:
    return (
        term in student.name.lower()
        or term in student.id.lower()
        or term in str(student.roll).lower()
    )


def filter_students(
    students: Sequence[Student],
    term: str = "",
    class_name: Optional[str] = None,
) -> List[Student]:
    """Case-insensitive match on name, id or roll, optionally within one class."""
    needle = (term or "").strip().lower()
    wanted = (class_name or "").strip()
    out = []
    for s in students:
        if wanted and wanted != ALL_CLASSES and s.class_name != wanted:
            continue
        if needle and not _matches(s, needle):
            continue
        out.append(s)
    return out


def quick_lookup(students: Sequence[Student], term: str, limit: int = 6) -> List[Student]:
    """Typeahead for payment entry; nothing is suggested until something is typed."""
    needle = (term or "").strip().lower()
    if not needle:
        return []
    return [s for s in students if _matches(s, needle)][:limit]


def student_history(student_id: str, payments: Sequence[Payment]) -> List[Payment]:
    own = [p for p in payments if p.student_id == student_id]
    return sorted(own, key=lambda p: date_key(p.date), reverse=True)


def suggest_payment_amount(
    student: Student,
    payment_type,
    class_configs: Sequence[ClassConfig],
    exam_fee_configs: Sequence[ExamFeeConfig],
    exam_name: Optional[str] = None,
) -> Decimal:
    kind = PaymentType.parse(payment_type)
    if kind is PaymentType.TUITION:
        return monthly_charge(student, class_configs)
    if kind is PaymentType.EXAM and exam_name:
        for exam in exam_fee_configs:
            if exam.exam_name == exam_name:
                return exam.fee_for(student.class_name)
    return ZERO
