import os

from .base import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

# Never bypass the geofence in production, whatever the environment says.
BYPASS_LOCATION_CHECK = False
