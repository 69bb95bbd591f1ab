"""Database-backed collections for the accounts desk.

Routes read everything through :func:`load_snapshot` and hand the resulting
records to the pure helpers in ``utils.liability`` / ``utils.search`` /
``utils.ledger``; writes go through the ``add_*`` and ``replace_*`` helpers.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from extensions import db
import models
from utils import AccountsError
from utils.constants import (
    DEFAULT_NOTER,
    DEFAULT_RECEIVER,
    ExpenseCategory,
    FinanceType,
    PaymentType,
)
from utils.money import ZERO, to_cents
from utils.records import ClassConfig, ExamFeeConfig, FinanceRecord, Payment, Student, Teacher
from utils.sheets import SheetSyncError

logger = logging.getLogger(__name__)


class ValidationError(AccountsError, ValueError):
    """Raised when an entry form is missing required data."""

    status_code = 400


@dataclass(frozen=True)
class Snapshot:
    students: List[Student]
    class_configs: List[ClassConfig]
    exam_fee_configs: List[ExamFeeConfig]
    payments: List[Payment]
    finance_records: List[FinanceRecord]
    teachers: List[Teacher]

    def student(self, student_id: str) -> Optional[Student]:
        for s in self.students:
            if s.id == student_id:
                return s
        return None


def _millis() -> int:
    return int(time.time() * 1000)


def _today() -> str:
    return date.today().isoformat()


def _unique_id(model, candidate: str) -> str:
    # Millisecond ids collide when two entries land in the same tick
    ident, n = candidate, 1
    while model.query.filter_by(id=ident).first() is not None:
        ident = f"{candidate}-{n}"
        n += 1
    return ident


def load_snapshot() -> Snapshot:
    return Snapshot(
        students=[r.to_record() for r in models.Student.query.order_by(models.Student.pk).all()],
        class_configs=[r.to_record() for r in models.ClassConfig.query.order_by(models.ClassConfig.id).all()],
        exam_fee_configs=[r.to_record() for r in models.ExamFeeConfig.query.order_by(models.ExamFeeConfig.id).all()],
        payments=[r.to_record() for r in models.Payment.query.order_by(models.Payment.pk).all()],
        finance_records=[r.to_record() for r in models.FinanceRecord.query.order_by(models.FinanceRecord.pk).all()],
        teachers=[r.to_record() for r in models.Teacher.query.order_by(models.Teacher.id).all()],
    )


# --------------------------
# Base data (sheet refresh)
# --------------------------

BASE_COLLECTIONS = ("students", "configs", "examFees", "teachers")


def _rows(value: List[Any]) -> List[Mapping[str, Any]]:
    return [item for item in value if isinstance(item, Mapping)]


def _stored_student(rec: Student) -> Student:
    return replace(
        rec,
        transport_fee=None if rec.transport_fee is None else to_cents(rec.transport_fee),
        total_paid=to_cents(rec.total_paid),
    )


def replace_base_data(data: Mapping[str, Any]) -> Dict[str, int]:
    """Swap in students / configs / exam fees / teachers from a sheet payload.

    Only collections present in ``data`` are replaced; the others are left
    untouched. A present collection that is not a list (a sheet error object,
    say) aborts the refresh with :class:`SheetSyncError` before anything is
    deleted. Returns the number of rows written per collection.
    """
    present = {key: data[key] for key in BASE_COLLECTIONS if data.get(key) is not None}
    malformed = sorted(key for key, value in present.items() if not isinstance(value, list))
    if malformed:
        logger.error("Sheet payload has non-list collections %s; nothing replaced", malformed)
        raise SheetSyncError(f"Sheet returned malformed data for: {', '.join(malformed)}")

    counts: Dict[str, int] = {}

    if "students" in present:
        seen = set()
        models.Student.query.delete()
        for item in _rows(present["students"]):
            rec = Student.from_dict(item)
            if not rec.id:
                logger.warning("Skipping student row without an id: %r", item.get("name"))
                continue
            if rec.id in seen:
                logger.warning("Duplicate student id %s in sheet; keeping the first row", rec.id)
                continue
            seen.add(rec.id)
            db.session.add(models.Student.from_record(_stored_student(rec)))
        counts["students"] = len(seen)

    if "configs" in present:
        models.ClassConfig.query.delete()
        rows = [ClassConfig.from_dict(item) for item in _rows(present["configs"])]
        for rec in rows:
            db.session.add(models.ClassConfig(class_name=rec.class_name, monthly_fee=to_cents(rec.monthly_fee)))
        counts["configs"] = len(rows)

    if "examFees" in present:
        models.ExamFeeConfig.query.delete()
        rows = [ExamFeeConfig.from_dict(item) for item in _rows(present["examFees"])]
        for rec in rows:
            fees = {k: str(v) for k, v in rec.fees.items()}
            db.session.add(models.ExamFeeConfig(exam_name=rec.exam_name, fees=fees))
        counts["examFees"] = len(rows)

    if "teachers" in present:
        models.Teacher.query.delete()
        rows = [Teacher.from_dict(item) for item in _rows(present["teachers"])]
        for rec in rows:
            db.session.add(models.Teacher(name=rec.name, status=rec.status))
        counts["teachers"] = len(rows)

    db.session.commit()
    logger.info("Base data replaced: %s", counts)
    return counts


# --------------------------
# Entries
# --------------------------

def add_student(data: Mapping[str, Any]) -> Student:
    rec = _stored_student(Student.from_dict(data))
    if not rec.name or not rec.roll:
        raise ValidationError("name and roll are required")
    if not rec.id:
        rec = replace(rec, id=_unique_id(models.Student, f"S{str(_millis())[-6:]}"))
    if models.Student.query.filter_by(id=rec.id).first() is not None:
        raise ValidationError(f"student {rec.id} already exists")
    if not rec.admission_date:
        rec = replace(rec, admission_date=_today())
    db.session.add(models.Student.from_record(rec))
    db.session.commit()
    return rec


def add_payment(data: Mapping[str, Any]) -> Payment:
    rec = Payment.from_dict(data)
    rec = replace(rec, amount=to_cents(rec.amount))
    if not rec.student_id or rec.amount <= ZERO:
        raise ValidationError("studentId and a positive amount are required")
    kind = PaymentType.parse(rec.payment_type) or PaymentType.TUITION
    rec = replace(
        rec,
        id=_unique_id(models.Payment, rec.id or f"PAY-{_millis()}"),
        payment_type=kind.value,
        date=rec.date or _today(),
        # month belongs to tuition, exam name to exam fees
        month=rec.month if kind is PaymentType.TUITION else None,
        exam_name=rec.exam_name if kind is PaymentType.EXAM else None,
        received_by=rec.received_by or DEFAULT_RECEIVER,
    )
    db.session.add(models.Payment(
        id=rec.id,
        student_id=rec.student_id,
        amount=rec.amount,
        payment_type=rec.payment_type,
        date=rec.date,
        month=rec.month,
        exam_name=rec.exam_name,
        received_by=rec.received_by,
    ))
    db.session.commit()
    logger.info("Payment %s recorded for %s (%s)", rec.id, rec.student_id, rec.amount)
    return rec


def add_finance_record(data: Mapping[str, Any]) -> FinanceRecord:
    rec = FinanceRecord.from_dict(data)
    rec = replace(rec, amount=to_cents(rec.amount))
    if not rec.title or rec.amount <= ZERO:
        raise ValidationError("title and a positive amount are required")
    kind = FinanceType.parse(rec.record_type) or FinanceType.INCOME
    category = rec.category or ExpenseCategory.OTHERS.value
    if kind is FinanceType.EXPENSE:
        known = {c.value for c in ExpenseCategory}
        if category not in known:
            parsed = ExpenseCategory.__members__.get(category.upper())
            if parsed is None:
                raise ValidationError(f"unknown expense category: {category}")
            category = parsed.value
    rec = replace(
        rec,
        id=rec.id or f"F{_millis()}",
        record_type=kind.value,
        category=category,
        date=rec.date or _today(),
        noted_by=rec.noted_by or DEFAULT_NOTER,
    )
    return save_finance_record(rec)


def save_finance_record(rec: FinanceRecord) -> FinanceRecord:
    amount = to_cents(rec.amount)
    if amount <= ZERO:
        raise ValidationError("a positive amount is required")
    rec = replace(rec, id=_unique_id(models.FinanceRecord, rec.id), amount=amount)
    db.session.add(models.FinanceRecord(
        id=rec.id,
        title=rec.title,
        amount=rec.amount,
        record_type=rec.record_type,
        category=rec.category,
        date=rec.date,
        noted_by=rec.noted_by,
    ))
    db.session.commit()
    logger.info("Finance record %s saved (%s %s)", rec.id, rec.record_type, rec.amount)
    return rec
