import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)


def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _int_list_env(name: str, default: str) -> list:
    raw = os.getenv(name, default)
    return [int(v.strip()) for v in raw.split(",") if v.strip()]


# Banco de dados
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rental_billing.db")

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = _bool_env("CORS_ALLOW_ALL", "false")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = _bool_env("ENABLE_DOCS", "true")
COMPANY_NAME = os.getenv("COMPANY_NAME", "Real Estate CRM")
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

# WhatsApp (Wasender)
WASENDER_API_KEY = os.getenv("WASENDER_API_KEY", "")
WASENDER_API_URL = os.getenv("WASENDER_API_URL", "https://wasenderapi.com/api/send-message")
WHATSAPP_TIMEOUT_SECONDS = float(os.getenv("WHATSAPP_TIMEOUT_SECONDS", 10))

# Telefones (regras da Arábia Saudita por padrão)
PHONE_COUNTRY_CODE = os.getenv("PHONE_COUNTRY_CODE", "966")
PHONE_MOBILE_LENGTH = int(os.getenv("PHONE_MOBILE_LENGTH", 9))
PHONE_MOBILE_PREFIX = os.getenv("PHONE_MOBILE_PREFIX", "5")

# Notificações
NOTIFICATION_RETRY_ATTEMPTS = int(os.getenv("NOTIFICATION_RETRY_ATTEMPTS", 3))
NOTIFICATION_BATCH_LIMIT = int(os.getenv("NOTIFICATION_BATCH_LIMIT", 100))
AUTO_PAYMENT_NOTIFICATIONS = _bool_env("AUTO_PAYMENT_NOTIFICATIONS", "true")
AUTO_MONTHLY_SUMMARY = _bool_env("AUTO_MONTHLY_SUMMARY", "true")

# Lembretes
REMINDER_CATCH_UP = _bool_env("REMINDER_CATCH_UP", "false")
REMINDER_LOOKAHEAD_DAYS = int(os.getenv("REMINDER_LOOKAHEAD_DAYS", 31))
CONTRACT_EXPIRY_NOTICE_DAYS = _int_list_env("CONTRACT_EXPIRY_NOTICE_DAYS", "60,30")

# Agendador
SCHEDULER_ENABLED = _bool_env("SCHEDULER_ENABLED", "true")
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "Asia/Riyadh")
PAYMENT_REMINDER_HOUR = int(os.getenv("PAYMENT_REMINDER_HOUR", 9))
CONTRACT_EXPIRY_HOUR = int(os.getenv("CONTRACT_EXPIRY_HOUR", 10))
MONTHLY_SUMMARY_HOUR = int(os.getenv("MONTHLY_SUMMARY_HOUR", 9))
