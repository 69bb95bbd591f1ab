"""Immutable value records shared by the store, the aggregator and the API.

Records are built from loosely-typed dicts (sheet payloads, JSON bodies) via
``from_dict``; amounts are coerced with :func:`utils.money.to_amount` so a
malformed cell never breaks aggregation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from utils.constants import STATUS_INACTIVE
from utils.money import to_amount, to_float


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _opt_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    # Sheet payloads use camelCase, the API accepts snake_case too
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Student:
    id: str
    roll: str = ""
    name: str = ""
    class_name: str = ""
    transport_fee: Optional[Decimal] = None
    status: Optional[str] = None
    father_name: str = ""
    phone: str = ""
    admission_date: Optional[str] = None
    total_paid: Decimal = Decimal("0")

    @property
    def is_inactive(self) -> bool:
        return self.status == STATUS_INACTIVE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        transport = _pick(data, "transportFee", "transport_fee")
        return cls(
            id=_text(_pick(data, "id")),
            roll=_text(_pick(data, "roll")),
            name=_text(_pick(data, "name")),
            class_name=_text(_pick(data, "className", "class_name")),
            transport_fee=None if transport in (None, "") else to_amount(transport),
            status=_opt_text(_pick(data, "status")),
            father_name=_text(_pick(data, "fatherName", "father_name")),
            phone=_text(_pick(data, "phone")),
            admission_date=_opt_text(_pick(data, "admissionDate", "admission_date")),
            total_paid=to_amount(_pick(data, "totalPaid", "total_paid")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "roll": self.roll,
            "name": self.name,
            "className": self.class_name,
            "fatherName": self.father_name,
            "phone": self.phone,
            "admissionDate": self.admission_date,
            "transportFee": None if self.transport_fee is None else to_float(self.transport_fee),
            "totalPaid": to_float(self.total_paid),
            "status": self.status,
        }


@dataclass(frozen=True)
class ClassConfig:
    class_name: str
    monthly_fee: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassConfig":
        return cls(
            class_name=_text(_pick(data, "className", "class_name")),
            monthly_fee=to_amount(_pick(data, "monthlyFee", "monthly_fee")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"className": self.class_name, "monthlyFee": to_float(self.monthly_fee)}


@dataclass(frozen=True)
class ExamFeeConfig:
    exam_name: str
    fees: Mapping[str, Decimal] = field(default_factory=dict)

    def fee_for(self, class_name: str) -> Decimal:
        return self.fees.get(class_name, Decimal("0"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExamFeeConfig":
        raw = _pick(data, "fees", default={}) or {}
        if not isinstance(raw, Mapping):
            raw = {}
        return cls(
            exam_name=_text(_pick(data, "examName", "exam_name")),
            fees={_text(k): to_amount(v) for k, v in raw.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "examName": self.exam_name,
            "fees": {k: to_float(v) for k, v in self.fees.items()},
        }


@dataclass(frozen=True)
class Payment:
    id: str
    student_id: str
    amount: Decimal
    payment_type: str
    date: str = ""
    month: Optional[str] = None
    exam_name: Optional[str] = None
    received_by: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Payment":
        return cls(
            id=_text(_pick(data, "id")),
            student_id=_text(_pick(data, "studentId", "student_id")),
            amount=to_amount(_pick(data, "amount")),
            payment_type=_text(_pick(data, "type", "payment_type")),
            date=_text(_pick(data, "date")),
            month=_opt_text(_pick(data, "month")),
            exam_name=_opt_text(_pick(data, "examName", "exam_name")),
            received_by=_text(_pick(data, "receivedBy", "received_by")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "amount": to_float(self.amount),
            "type": self.payment_type,
            "date": self.date,
            "month": self.month,
            "examName": self.exam_name,
            "receivedBy": self.received_by,
        }


@dataclass(frozen=True)
class FinanceRecord:
    id: str
    title: str
    amount: Decimal
    record_type: str
    category: str = ""
    date: str = ""
    noted_by: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FinanceRecord":
        return cls(
            id=_text(_pick(data, "id")),
            title=_text(_pick(data, "title")),
            amount=to_amount(_pick(data, "amount")),
            record_type=_text(_pick(data, "type", "record_type")),
            category=_text(_pick(data, "category")),
            date=_text(_pick(data, "date")),
            noted_by=_text(_pick(data, "notedBy", "noted_by")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "amount": to_float(self.amount),
            "type": self.record_type,
            "category": self.category,
            "date": self.date,
            "notedBy": self.noted_by,
        }


@dataclass(frozen=True)
class Teacher:
    name: str
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Teacher":
        return cls(name=_text(_pick(data, "name")), status=_opt_text(_pick(data, "status")))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status}
