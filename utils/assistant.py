from __future__ import annotations

import json
import logging
from typing import Optional

import google.generativeai as genai
from flask import current_app

from utils import AccountsError
from utils.liability import compute_school_stats, current_month_index
from utils.store import Snapshot

logger = logging.getLogger(__name__)

GREETING = (
    "হ্যালো! আমি আপনার স্কুলের AI হিসাব রক্ষক সহকারী। আজ আপনাকে কোন তথ্য দিয়ে "
    "সাহায্য করতে পারি? যেমন: মোট সংগ্রহ কত? অথবা কার কত বকেয়া আছে?"
)
FALLBACK_REPLY = "দুঃখিত, আমি এই মুহূর্তে উত্তর দিতে পারছি না।"
ERROR_REPLY = "দুঃখিত, কোনো একটি সমস্যা হয়েছে। দয়া করে আবার চেষ্টা করুন।"

# Only the most recent payments go into the prompt
RECENT_PAYMENTS = 50


class AssistantNotConfigured(AccountsError, RuntimeError):
    status_code = 503


def _api_key() -> str:
    return (current_app.config.get("GOOGLE_API_KEY") or "").strip()


def build_system_instruction(snapshot: Snapshot, school_name: str, month_index: Optional[int] = None) -> str:
    if month_index is None:
        month_index = current_month_index()
    stats = compute_school_stats(
        snapshot.students,
        snapshot.payments,
        snapshot.finance_records,
        snapshot.class_configs,
        snapshot.exam_fee_configs,
        month_index,
    )

    def dump(items):
        return json.dumps([i.to_dict() for i in items], ensure_ascii=False)

    active = [s for s in snapshot.students if not s.is_inactive]
    return f"""
You are a school accounting assistant for '{school_name}'.
Reference Data:
Students: {dump(active)}
Payments: {dump(snapshot.payments[-RECENT_PAYMENTS:])}
Class Tuition Fees: {dump(snapshot.class_configs)}
Exam Fees Config: {dump(snapshot.exam_fee_configs)}
Current Month Index (1-12): {month_index}
School Summary: {json.dumps(stats.as_dict(), ensure_ascii=False)}

Calculation Logic:
Debt = (Months passed * (Monthly Fee + Transport Fee)) + (All configured Exam Fees) - Total Payments.

Answer correctly in Bengali about totals, individual debts, or summaries.
""".strip()


def ask(question: str, snapshot: Snapshot) -> str:
    """Send ``question`` to Gemini with the school's figures as context."""
    api_key = _api_key()
    if not api_key:
        raise AssistantNotConfigured("GOOGLE_API_KEY not set in environment")
    genai.configure(api_key=api_key)

    cfg = current_app.config
    instruction = build_system_instruction(snapshot, cfg.get("SCHOOL_NAME", "School"))
    try:
        model = genai.GenerativeModel(
            cfg.get("GEMINI_MODEL", "gemini-1.5-flash"),
            system_instruction=instruction,
            generation_config={"temperature": float(cfg.get("GEMINI_TEMPERATURE", 0.7))},
        )
        response = model.generate_content(question)
        text = getattr(response, "text", None)
    except Exception:
        logger.exception("Gemini request failed")
        return ERROR_REPLY
    return text or FALLBACK_REPLY
