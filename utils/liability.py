"""Fee liability aggregation.

Pure functions over in-memory records: what each student still owes for
tuition and exams, and the school-wide headline figures. Nothing here touches
the database, the clock (beyond :func:`current_month_index`) or the network,
so every caller gets a fresh result computed from the collections it passes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence

from utils.constants import FinanceType, PaymentType
from utils.money import ZERO, clamp, to_amount, to_float
from utils.records import ClassConfig, ExamFeeConfig, FinanceRecord, Payment, Student

logger = logging.getLogger(__name__)


def _camel(name: str) -> str:
    # JSON keys follow the camelCase used by the record dicts
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class StudentLiability:
    tuition_due: Decimal = ZERO
    exam_due: Decimal = ZERO
    total_due: Decimal = ZERO
    expected_tuition: Decimal = ZERO
    expected_exam: Decimal = ZERO
    paid_tuition: Decimal = ZERO
    paid_exam: Decimal = ZERO
    monthly_fee: Decimal = ZERO
    transport_fee: Decimal = ZERO

    @property
    def is_paid(self) -> bool:
        return self.total_due <= ZERO

    def as_dict(self) -> Dict[str, float]:
        return {_camel(k): to_float(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class SchoolStats:
    total_collection: Decimal
    total_expense: Decimal
    total_due: Decimal
    student_fees: Decimal
    other_income: Decimal
    student_count: int
    active_student_count: int
    balance: Decimal
    orphan_payments: Decimal

    def as_dict(self) -> Dict[str, float]:
        out = {}
        for key, value in asdict(self).items():
            out[_camel(key)] = value if isinstance(value, int) else to_float(value)
        return out


def current_month_index(today: Optional[date] = None) -> int:
    """1-based month of ``today`` (January is 1): the tuition accrual multiplier."""
    return (today or date.today()).month


def find_class_config(class_name: str, class_configs: Iterable[ClassConfig]) -> Optional[ClassConfig]:
    # First match wins when a class is configured twice
    for config in class_configs:
        if config.class_name == class_name:
            return config
    return None


def monthly_charge(student: Student, class_configs: Iterable[ClassConfig]) -> Decimal:
    """Tuition plus transport owed by ``student`` for one month."""
    config = find_class_config(student.class_name, class_configs)
    monthly_fee = config.monthly_fee if config else ZERO
    return monthly_fee + clamp(to_amount(student.transport_fee))


def expected_exam_fees(class_name: str, exam_fee_configs: Iterable[ExamFeeConfig]) -> Decimal:
    return sum((exam.fee_for(class_name) for exam in exam_fee_configs), ZERO)


def paid_by(student_id: str, payments: Iterable[Payment], payment_type: PaymentType) -> Decimal:
    return sum(
        (p.amount for p in payments if p.student_id == student_id and p.payment_type == payment_type),
        ZERO,
    )


def compute_student_liability(
    student: Student,
    class_configs: Sequence[ClassConfig],
    exam_fee_configs: Sequence[ExamFeeConfig],
    payments: Sequence[Payment],
    months_passed: Optional[int] = None,
) -> StudentLiability:
    if student.is_inactive:
        return StudentLiability()
    if months_passed is None:
        months_passed = current_month_index()

    config = find_class_config(student.class_name, class_configs)
    monthly_fee = config.monthly_fee if config else ZERO
    transport_fee = clamp(to_amount(student.transport_fee))
    expected_tuition = Decimal(months_passed) * (monthly_fee + transport_fee)
    paid_tuition = paid_by(student.id, payments, PaymentType.TUITION)
    tuition_due = clamp(expected_tuition - paid_tuition)

    expected_exam = expected_exam_fees(student.class_name, exam_fee_configs)
    paid_exam = paid_by(student.id, payments, PaymentType.EXAM)
    exam_due = clamp(expected_exam - paid_exam)

    return StudentLiability(
        tuition_due=tuition_due,
        exam_due=exam_due,
        total_due=tuition_due + exam_due,
        expected_tuition=expected_tuition,
        expected_exam=expected_exam,
        paid_tuition=paid_tuition,
        paid_exam=paid_exam,
        monthly_fee=monthly_fee,
        transport_fee=transport_fee,
    )


def compute_school_stats(
    students: Sequence[Student],
    payments: Sequence[Payment],
    finance_records: Sequence[FinanceRecord],
    class_configs: Sequence[ClassConfig],
    exam_fee_configs: Sequence[ExamFeeConfig],
    months_passed: Optional[int] = None,
) -> SchoolStats:
    if months_passed is None:
        months_passed = current_month_index()

    # Every payment counts as collection, including ones whose student is gone
    student_fees = sum((p.amount for p in payments), ZERO)
    known_ids = {s.id for s in students}
    orphan_payments = sum((p.amount for p in payments if p.student_id not in known_ids), ZERO)
    if orphan_payments:
        logger.info("Collection includes %s from payments with no matching student", orphan_payments)

    other_income = sum(
        (r.amount for r in finance_records if r.record_type == FinanceType.INCOME), ZERO
    )
    total_expense = sum(
        (r.amount for r in finance_records if r.record_type == FinanceType.EXPENSE), ZERO
    )
    total_collection = student_fees + other_income

    active = [s for s in students if not s.is_inactive]
    total_due = sum(
        (
            compute_student_liability(s, class_configs, exam_fee_configs, payments, months_passed).total_due
            for s in active
        ),
        ZERO,
    )

    return SchoolStats(
        total_collection=total_collection,
        total_expense=total_expense,
        total_due=total_due,
        student_fees=student_fees,
        other_income=other_income,
        student_count=len(students),
        active_student_count=len(active),
        balance=total_collection - total_expense,
        orphan_payments=orphan_payments,
    )
