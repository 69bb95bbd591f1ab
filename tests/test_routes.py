from unittest.mock import patch

from utils.constants import PaymentType
from utils.store import replace_base_data

BASE = {
    "students": [
        {"id": "S1", "roll": "1", "name": "Rahim", "className": "প্রথম"},
        {"id": "S2", "roll": "2", "name": "Karim", "className": "প্রথম", "status": "x"},
    ],
    "configs": [{"className": "প্রথম", "monthlyFee": 500}],
    "examFees": [{"examName": "প্রথম সাময়িক", "fees": {"প্রথম": 200}}],
    "teachers": [{"name": "Rafiq Sir"}, {"name": "Old Teacher", "status": "x"}],
}


def _seed():
    replace_base_data(BASE)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.headers.get("X-Request-ID")


def test_stats_end_to_end(app, client):
    _seed()
    client.post("/fees/payments", json={"studentId": "S1", "amount": 1000, "type": "TUITION"})
    client.post("/fees/payments", json={"studentId": "S1", "amount": 100, "type": "EXAM", "examName": "প্রথম সাময়িক"})
    client.post("/finance/records", json={"title": "Donation", "amount": 300, "type": "INCOME"})
    client.post("/finance/records", json={"title": "Bill", "amount": 150, "type": "EXPENSE", "category": "UTILITY"})

    r = client.get("/api/stats?month=3")
    assert r.status_code == 200
    data = r.get_json()
    stats = data["stats"]
    assert data["monthsPassed"] == 3
    assert stats["totalDue"] == 600.0
    assert stats["studentFees"] == 1100.0
    assert stats["otherIncome"] == 300.0
    assert stats["totalCollection"] == 1400.0
    assert stats["totalExpense"] == 150.0
    assert stats["balance"] == 1250.0
    assert stats["studentCount"] == 2
    assert [e["title"] for e in data["recentExpenses"]] == ["Bill"]
    assert data["sync"]["lastSync"] == "কখনো নয়"


def test_stats_rejects_bad_month(client):
    r = client.get("/api/stats?month=13")
    assert r.status_code == 400
    assert "month" in r.get_json()["error"]


def test_student_list_search_and_detail(app, client):
    _seed()
    r = client.get("/students/?q=rah&month=2")
    body = r.get_json()
    assert body["count"] == 1
    assert body["students"][0]["due"] == 1200.0
    assert body["students"][0]["isPaid"] is False

    r = client.get("/students/", query_string={"class": "প্রথম"})
    assert r.get_json()["count"] == 2

    client.post("/fees/payments", json={"studentId": "S1", "amount": 500, "type": "TUITION", "date": "2024-02-01"})
    r = client.get("/students/S1?month=1")
    detail = r.get_json()
    assert detail["liability"]["tuitionDue"] == 0.0
    assert detail["liability"]["examDue"] == 200.0
    assert len(detail["history"]) == 1

    assert client.get("/students/NOPE").status_code == 404


def test_student_lookup_and_create(app, client):
    _seed()
    assert client.get("/students/lookup?q=").get_json()["students"] == []
    assert len(client.get("/students/lookup?q=s").get_json()["students"]) == 2

    r = client.post("/students/", json={"name": "Nadia", "roll": "5", "className": "প্লে"})
    assert r.status_code == 201
    assert r.get_json()["student"]["name"] == "Nadia"
    assert client.post("/students/", json={"name": "Nadia"}).status_code == 400


def test_collection_urls_answer_without_trailing_slash(app, client):
    _seed()
    r = client.get("/students?q=rah")
    assert r.status_code == 200
    assert r.get_json()["count"] == 1

    r = client.post("/students", json={"name": "Sumi", "roll": "7", "className": "প্লে"})
    assert r.status_code == 201

    r = client.get("/teachers")
    assert r.status_code == 200
    assert [t["name"] for t in r.get_json()["running"]] == ["Rafiq Sir"]


def test_payment_pushes_to_sheet_when_configured(app, client):
    _seed()
    client.post("/sync/settings", json={"payments": "https://sheet.test/pay"})
    with patch("routes.fee_routes.push_record", return_value=True) as mock_push:
        r = client.post("/fees/payments", json={"studentId": "S1", "amount": 500})
    assert r.status_code == 201
    assert r.get_json()["synced"] is True
    url, payload = mock_push.call_args[0]
    assert url == "https://sheet.test/pay"
    assert payload["type"] == PaymentType.TUITION.value


def test_payment_validation_error(client):
    r = client.post("/fees/payments", json={"amount": 10})
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_fee_structure_and_suggestion(app, client):
    _seed()
    data = client.get("/fees/structure").get_json()
    assert data["classConfigs"] == [{"className": "প্রথম", "monthlyFee": 500.0}]
    assert data["months"][0] == "January"
    r = client.get("/fees/suggest", query_string={"student_id": "S1", "type": "EXAM", "exam_name": "প্রথম সাময়িক"})
    assert r.get_json()["amount"] == 200.0
    assert client.get("/fees/suggest?student_id=zzz").status_code == 404


def test_history_lists_everything(app, client):
    _seed()
    client.post("/fees/payments", json={"studentId": "S1", "amount": 500, "date": "2024-01-10"})
    client.post("/finance/records", json={"title": "Rent", "amount": 900, "type": "EXPENSE", "category": "RENT",
                                          "date": "2024-02-01"})
    rows = client.get("/fees/history").get_json()["transactions"]
    assert [r["title"] for r in rows] == ["Rent", "Rahim"]


def test_finance_filter(app, client):
    client.post("/finance/records", json={"title": "Gift", "amount": 50, "type": "INCOME"})
    client.post("/finance/records", json={"title": "Chalk", "amount": 20, "type": "EXPENSE", "category": "STATIONARY"})
    assert len(client.get("/finance/records?type=EXPENSE").get_json()["records"]) == 1
    assert client.get("/finance/records?type=bogus").status_code == 400


def test_teacher_salary_flow(app, client):
    _seed()
    teachers = client.get("/teachers/").get_json()
    assert [t["name"] for t in teachers["running"]] == ["Rafiq Sir"]
    assert [t["name"] for t in teachers["former"]] == ["Old Teacher"]

    r = client.post("/teachers/Rafiq%20Sir/salaries", json={"amount": 8000, "month": "January"})
    assert r.status_code == 201
    assert r.get_json()["record"]["title"] == "Rafiq Sir - বেতন (January)"
    history = client.get("/teachers/Rafiq%20Sir/salaries").get_json()["history"]
    assert len(history) == 1

    stats = client.get("/api/stats").get_json()["stats"]
    assert stats["totalExpense"] == 8000.0

    assert client.post("/teachers/Rafiq%20Sir/salaries", json={"amount": 0}).status_code == 400
    assert client.post("/teachers/Nobody/salaries", json={"amount": 10}).status_code == 404


def test_refresh_from_sheet(app, client):
    assert client.post("/sync/refresh").status_code == 502
    client.post("/sync/settings", json={"raw_students": "https://sheet.test/raw"})
    with patch("routes.sync_routes.fetch_base_data", return_value=BASE) as mock_fetch:
        r = client.post("/sync/refresh")
    assert r.status_code == 200
    mock_fetch.assert_called_once_with("https://sheet.test/raw")
    assert r.get_json()["counts"]["students"] == 2
    assert client.get("/sync/settings").get_json()["lastSync"] == r.get_json()["lastSync"]


def test_validate_link(client):
    with patch("routes.sync_routes.validate_link", return_value=(True, "ok")) as mock_validate:
        r = client.post("/sync/validate", json={"url": " https://sheet.test/x "})
    assert r.get_json() == {"success": True, "message": "ok"}
    mock_validate.assert_called_once_with("https://sheet.test/x")


def test_receipt_pdf(app, client):
    _seed()
    pid = client.post("/fees/payments", json={"studentId": "S1", "amount": 500}).get_json()["payment"]["id"]
    r = client.get(f"/students/S1/receipts/{pid}.pdf")
    assert r.status_code == 200
    assert r.mimetype == "application/pdf"
    assert r.data.startswith(b"%PDF")
    assert client.get(f"/students/S2/receipts/{pid}.pdf").status_code == 404


def test_gemini_chat_requires_message(client):
    r = client.post("/gemini/chat", json={"message": "  "})
    assert r.status_code == 400


def test_gemini_chat_without_key(client):
    r = client.post("/gemini/chat", json={"message": "মোট সংগ্রহ কত?"})
    assert r.status_code == 503


def test_gemini_chat_replies(app, client):
    with patch("routes.gemini_routes.ask", return_value="মোট সংগ্রহ ০ টাকা") as mock_ask:
        r = client.post("/gemini/chat", json={"message": "মোট সংগ্রহ কত?"})
    assert r.status_code == 200
    assert r.get_json()["reply"] == "মোট সংগ্রহ ০ টাকা"
    assert mock_ask.call_args[0][0] == "মোট সংগ্রহ কত?"


def test_refresh_keeps_roster_when_sheet_sends_error(app, client):
    _seed()
    client.post("/sync/settings", json={"raw_students": "https://sheet.test/raw"})
    with patch("routes.sync_routes.fetch_base_data", return_value={"students": {"error": "tab not found"}}):
        r = client.post("/sync/refresh")
    assert r.status_code == 502
    assert "students" in r.get_json()["error"]
    assert client.get("/students/").get_json()["count"] == 2
    assert client.get("/sync/settings").get_json()["lastSync"] == "কখনো নয়"


def test_sub_cent_salary_is_rejected(app, client):
    _seed()
    r = client.post("/teachers/Rafiq%20Sir/salaries", json={"amount": "0.004"})
    assert r.status_code == 400
    assert client.get("/teachers/Rafiq%20Sir/salaries").get_json()["history"] == []
