"""Settings shared by every environment. Each value can be overridden from the environment."""
import os


def _flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "concrete_ops"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(7 * 24 * 3600)))

COMPANY_NAME = os.getenv("COMPANY_NAME", "Pontifex Industries")
APP_URL = os.getenv("APP_URL", "http://localhost:5000")

# Clock-in/out geofence
SHOP_LOCATION = {
    "name": os.getenv("SHOP_NAME", "Pontifex Industries Shop"),
    "latitude": float(os.getenv("SHOP_LATITUDE", "33.97121")),
    "longitude": float(os.getenv("SHOP_LONGITUDE", "-84.18066")),
}
ALLOWED_RADIUS_METERS = float(os.getenv("ALLOWED_RADIUS_METERS", "100"))
BYPASS_LOCATION_CHECK = _flag("BYPASS_LOCATION_CHECK")

SMTP = {
    "host": os.getenv("SMTP_HOST", ""),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASSWORD", ""),
    "from_email": os.getenv("SMTP_FROM_EMAIL", "no-reply@pontifex.example"),
    "use_tls": _flag("SMTP_USE_TLS", "1"),
}

TELNYX_API_KEY = os.getenv("TELNYX_API_KEY", "")
TELNYX_PHONE_NUMBER = os.getenv("TELNYX_PHONE_NUMBER", "")

AUTO_INIT_DB = _flag("AUTO_INIT_DB")
AUTO_SEED_DB = _flag("AUTO_SEED_DB")

DEBUG = False
TESTING = False
