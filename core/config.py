# core/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# 0) .env
load_dotenv()

# 1) paths
BASE_DIR = Path(__file__).resolve().parent.parent

# 2) DB
DB = os.getenv("DB", "postgresql")
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_SERVER = os.getenv("DB_SERVER", "")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"{DB}://{DB_USER}:{DB_PASSWORD}@{DB_SERVER}:{DB_PORT}/{DB_NAME}" if all([DB_USER, DB_PASSWORD, DB_SERVER, DB_NAME]) else ""
)

# 3) identity provider / object storage (supabase)
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
IDENTITY_TIMEOUT_SECONDS = float(os.getenv("IDENTITY_TIMEOUT_SECONDS", "5"))
STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "30"))

PROOF_BUCKET = os.getenv("PROOF_BUCKET", "proofs")
AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "avatars")

# 4) uploads
IMAGE_EXTENSION = os.getenv("IMAGE_EXTENSION", ".png,.jpg,.jpeg,.webp,.gif")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024

# 5) admin override (break-glass secret, unset = disabled)
ADMIN_OVERRIDE_PASSCODE = os.getenv("ADMIN_OVERRIDE_PASSCODE") or None
ADMIN_PASSCODE_HEADER = "x-admin-passcode"

# 6) notifications
NOTIFY_WEBHOOK_URL = os.getenv("NOTIFY_WEBHOOK_URL") or None
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))

# 7) server
TIMEZONE = os.getenv("TIMEZONE") or None  # None -> process local time
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# 8) submission defaults
DEFAULT_MARKETPLACE = os.getenv("DEFAULT_MARKETPLACE", "amazon_us")
DEFAULT_REPORTING_PERIOD = os.getenv("DEFAULT_REPORTING_PERIOD", "monthly")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

PERCENT_PRECISION = 4
