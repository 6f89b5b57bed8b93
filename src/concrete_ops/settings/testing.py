from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

BYPASS_LOCATION_CHECK = False

SMTP = {
    "host": "",
    "port": 587,
    "user": "",
    "password": "",
    "from_email": "no-reply@test.local",
    "use_tls": False,
}
TELNYX_API_KEY = ""
TELNYX_PHONE_NUMBER = ""
