from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from utils.assistant import (
    ERROR_REPLY,
    FALLBACK_REPLY,
    AssistantNotConfigured,
    ask,
    build_system_instruction,
)
from utils.records import ClassConfig, Payment, Student
from utils.store import Snapshot


def _snapshot():
    students = [
        Student(id="S1", roll="1", name="Rahim", class_name="প্রথম"),
        Student(id="S2", roll="2", name="Hidden Kid", class_name="প্রথম", status="x"),
    ]
    payments = [
        Payment(id=f"P{i}", student_id="S1", amount=Decimal("10"), payment_type="বেতন (Tuition)")
        for i in range(60)
    ]
    return Snapshot(
        students=students,
        class_configs=[ClassConfig("প্রথম", Decimal("500"))],
        exam_fee_configs=[],
        payments=payments,
        finance_records=[],
        teachers=[],
    )


def test_system_instruction_content():
    text = build_system_instruction(_snapshot(), "আন-নূর একাডেমি", month_index=4)
    assert "আন-নূর একাডেমি" in text
    assert "Rahim" in text
    assert "Hidden Kid" not in text
    assert "Current Month Index (1-12): 4" in text
    assert '"P59"' in text
    assert '"P9"' not in text
    assert '"totalDue": 1400.0' in text


def test_system_instruction_honours_month_zero():
    text = build_system_instruction(_snapshot(), "School", month_index=0)
    assert "Current Month Index (1-12): 0" in text
    # No tuition has accrued yet, so the 600 paid leaves nothing due
    assert '"totalDue": 0.0' in text


def test_ask_requires_api_key(app):
    with pytest.raises(AssistantNotConfigured):
        ask("hello", _snapshot())


def test_ask_returns_model_text(app):
    app.config["GOOGLE_API_KEY"] = "test-key"
    model = MagicMock()
    model.generate_content.return_value = MagicMock(text="উত্তর")
    with patch("utils.assistant.genai") as mock_genai:
        mock_genai.GenerativeModel.return_value = model
        reply = ask("মোট সংগ্রহ কত?", _snapshot())
    assert reply == "উত্তর"
    mock_genai.configure.assert_called_once_with(api_key="test-key")
    kwargs = mock_genai.GenerativeModel.call_args[1]
    assert "Rahim" in kwargs["system_instruction"]
    assert kwargs["generation_config"] == {"temperature": 0.7}
    model.generate_content.assert_called_once_with("মোট সংগ্রহ কত?")


def test_ask_handles_empty_and_failed_responses(app):
    app.config["GOOGLE_API_KEY"] = "test-key"
    with patch("utils.assistant.genai") as mock_genai:
        mock_genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(text="")
        assert ask("hi", _snapshot()) == FALLBACK_REPLY
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")
        assert ask("hi", _snapshot()) == ERROR_REPLY
