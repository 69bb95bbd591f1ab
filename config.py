import os
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except ValueError:
        return default


class Config:
    # --------------------------
    # 🔹 Flask Configuration
    # --------------------------
    SECRET_KEY = os.environ.get("SECRET_KEY", "secret123")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # --------------------------
    # 🔹 Database (SQLAlchemy)
    # --------------------------
    # Local SQLite file for a single-desk install; override with any SQLAlchemy URI
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(os.getcwd(), "school_accounts.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --------------------------
    # 🔹 School branding
    # --------------------------
    SCHOOL_NAME = os.environ.get("SCHOOL_NAME", "বড়বাড়িয়া আন-নূর একাডেমি")
    CURRENCY_LABEL = os.environ.get("CURRENCY_LABEL", "BDT")
    # TTF with Bengali glyphs for PDF receipts. Without it receipts use Helvetica
    # and print Latin stand-ins (enum names, SCHOOL_NAME_LATIN) for Bengali text.
    RECEIPT_FONT_PATH = os.environ.get("RECEIPT_FONT_PATH", "")
    SCHOOL_NAME_LATIN = os.environ.get("SCHOOL_NAME_LATIN", "Borobaria An-Noor Academy")

    # --------------------------
    # 🔹 Spreadsheet sync
    # --------------------------
    # Defaults only; links saved through /sync/settings take precedence
    SHEET_URL_RAW_STUDENTS = os.environ.get("SHEET_URL_RAW_STUDENTS", "")
    SHEET_URL_PAYMENTS = os.environ.get("SHEET_URL_PAYMENTS", "")
    SHEET_URL_FINANCE = os.environ.get("SHEET_URL_FINANCE", "")
    SHEET_TIMEOUT_SECONDS = _env_float("SHEET_TIMEOUT_SECONDS", 20.0)

    # --------------------------
    # 🔹 Gemini assistant
    # --------------------------
    GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_TEMPERATURE = _env_float("GEMINI_TEMPERATURE", 0.7)
    ASSISTANT_RATE_LIMIT = os.environ.get("ASSISTANT_RATE_LIMIT", "20 per minute")
    RATELIMIT_ENABLED = (os.environ.get("DISABLE_RATE_LIMITING", "0").lower() in ("0", "false", "no"))
