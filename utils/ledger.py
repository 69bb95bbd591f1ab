from __future__ import annotations

import time
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from utils.constants import (
    CURRENT_MONTH_LABEL,
    DEFAULT_RECEIVER,
    STATUS_INACTIVE,
    UNKNOWN_STUDENT,
    ExpenseCategory,
    FinanceType,
)
from utils.money import to_float
from utils.records import FinanceRecord, Payment, Student, Teacher

INCOME = "INCOME"
EXPENSE = "EXPENSE"
STUDENT_FEE = "Student Fee"


def date_key(value: Optional[str]) -> datetime:
    """Sort key for stored dates; unparseable dates sort as the oldest."""
    text = (value or "").strip()
    if text:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            pass
    return datetime.min


def transaction_history(
    payments: Sequence[Payment],
    finance_records: Sequence[FinanceRecord],
    students: Sequence[Student],
) -> List[Dict[str, Any]]:
    """Student payments and finance records merged into one ledger, newest first."""
    names = {}
    for s in students:
        names.setdefault(s.id, s.name)

    rows: List[Dict[str, Any]] = []
    for p in payments:
        subtitle = p.payment_type + (f" ({p.month})" if p.month else "")
        rows.append({
            "id": p.id,
            "date": p.date,
            "amount": to_float(p.amount),
            "title": names.get(p.student_id) or UNKNOWN_STUDENT,
            "subtitle": subtitle,
            "category": STUDENT_FEE,
            "type": INCOME,
        })
    for r in finance_records:
        rows.append({
            "id": r.id,
            "date": r.date,
            "amount": to_float(r.amount),
            "title": r.title,
            "subtitle": r.category,
            "category": r.category,
            "type": INCOME if r.record_type == FinanceType.INCOME else EXPENSE,
        })
    rows.sort(key=lambda row: date_key(row["date"]), reverse=True)
    return rows


def recent_expenses(finance_records: Sequence[FinanceRecord], limit: int = 5) -> List[FinanceRecord]:
    # Entry order, latest entered first
    expenses = [r for r in finance_records if r.record_type == FinanceType.EXPENSE]
    return list(reversed(expenses[-limit:])) if limit > 0 else []


# --------------------------
# Teachers & salaries
# --------------------------

def _name_match(teacher: Teacher, term: str) -> bool:
    return term.lower() in teacher.name.lower()


def running_teachers(teachers: Sequence[Teacher], term: str = "") -> List[Teacher]:
    return [t for t in teachers if not t.status and _name_match(t, term)]


def former_teachers(teachers: Sequence[Teacher], term: str = "") -> List[Teacher]:
    return [t for t in teachers if t.status == STATUS_INACTIVE and _name_match(t, term)]


def salary_history(name: str, finance_records: Sequence[FinanceRecord]) -> List[FinanceRecord]:
    paid = [
        r for r in finance_records
        if r.record_type == FinanceType.EXPENSE
        and r.category == ExpenseCategory.STAFF_SALARY
        and name in r.title
    ]
    return sorted(paid, key=lambda r: date_key(r.date), reverse=True)


def build_salary_record(
    teacher: Teacher,
    amount: Decimal,
    month: Optional[str] = None,
    noted_by: str = DEFAULT_RECEIVER,
    today: Optional[date] = None,
) -> FinanceRecord:
    return FinanceRecord(
        id=f"T-SAL-{int(time.time() * 1000)}",
        title=f"{teacher.name} - বেতন ({month or CURRENT_MONTH_LABEL})",
        amount=amount,
        record_type=FinanceType.EXPENSE.value,
        category=ExpenseCategory.STAFF_SALARY.value,
        date=(today or date.today()).isoformat(),
        noted_by=noted_by,
    )
