from __future__ import annotations

from enum import Enum
from typing import Optional


class StudentClass(str, Enum):
    PLAY = "প্লে"
    NURSERY = "নার্সারি"
    ONE = "প্রথম"
    TWO = "দ্বিতীয়"
    THREE = "তৃতীয়"
    FOUR = "চতুর্থ"
    FIVE = "পঞ্চম"

    @classmethod
    def parse(cls, value) -> Optional["StudentClass"]:
        return _parse(cls, value)


class PaymentType(str, Enum):
    TUITION = "বেতন (Tuition)"
    SESSION = "সেশন ফি"
    EXAM = "পরিক্ষার ফি"
    BOOKS = "বইয়ের টাকা"
    OTHERS = "অন্যান্য"

    @classmethod
    def parse(cls, value) -> Optional["PaymentType"]:
        """Accept either the stored tag or the enum name (``"TUITION"``)."""
        return _parse(cls, value)


class FinanceType(str, Enum):
    INCOME = "আয় (Income)"
    EXPENSE = "ব্যয় (Expense)"

    @classmethod
    def parse(cls, value) -> Optional["FinanceType"]:
        return _parse(cls, value)


class ExpenseCategory(str, Enum):
    STAFF_SALARY = "শিক্ষক-কর্মচারী বেতন"
    UTILITY = "বিদ্যুৎ/পানি বিল"
    RENT = "ভাড়া"
    STATIONARY = "স্টেশনারি"
    MAINTENANCE = "মেরামত"
    OTHERS = "অন্যান্য"


# Student / teacher status tags
STATUS_SPECIAL = "z"
STATUS_PROMOTED = "p"
STATUS_INACTIVE = "x"

# Class filter value meaning "every class"
ALL_CLASSES = "সব"

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DEFAULT_RECEIVER = "Accountant"
DEFAULT_NOTER = "Admin"
UNKNOWN_STUDENT = "Unknown Student"
CURRENT_MONTH_LABEL = "চলতি মাস"


def _parse(enum_cls, value):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return enum_cls(text)
    except ValueError:
        pass
    return enum_cls.__members__.get(text.upper())
