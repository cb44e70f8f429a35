"""
Login Portal Configuration
Centralized settings for the login portal web application.
Every value can be overridden with an environment variable of the same name.
"""

import os
from datetime import timedelta

PACKAGE_DIR = os.path.dirname(__file__)

# Server settings
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))

# Username-only mode: accept a login that omits the password
ALLOW_USERNAME_ONLY = os.environ.get("ALLOW_USERNAME_ONLY", "").lower() == "true"

# Session settings
SECRET_KEY = os.environ.get("SESSION_SECRET", "dev-session-secret-change-me")
SESSION_LIFETIME = timedelta(hours=8)
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
# Fixed lifetime: the cookie is only re-sent when the session changes
SESSION_REFRESH_EACH_REQUEST = False

# Database settings
DB_DIR = os.path.join(PACKAGE_DIR, "data")
DATABASE_PATH = os.environ.get("DATABASE_PATH", os.path.join(DB_DIR, "users.db"))

# Initial account created on first boot when the table is empty
SEED_USERNAME = os.environ.get("SEED_USERNAME", "admin")
SEED_PASSWORD = os.environ.get("SEED_PASSWORD", "")

# Resource paths
LOGIN_PATH = "/login"
HOME_PATH = "/home"
HISTORY_PATH = "/history"
PRIVATE_PATHS = (HOME_PATH, HISTORY_PATH)

# Logging
LOG_FILE = os.environ.get("LOG_FILE")  # console only when unset
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def as_flask_config():
    """Settings in the shape ``app.config.from_mapping`` expects."""
    return {
        "SECRET_KEY": SECRET_KEY,
        "PERMANENT_SESSION_LIFETIME": SESSION_LIFETIME,
        "SESSION_COOKIE_HTTPONLY": SESSION_COOKIE_HTTPONLY,
        "SESSION_COOKIE_SAMESITE": SESSION_COOKIE_SAMESITE,
        "SESSION_REFRESH_EACH_REQUEST": SESSION_REFRESH_EACH_REQUEST,
        "ALLOW_USERNAME_ONLY": ALLOW_USERNAME_ONLY,
        "DATABASE_PATH": DATABASE_PATH,
        "SEED_USERNAME": SEED_USERNAME,
        "SEED_PASSWORD": SEED_PASSWORD,
        "LOGIN_PATH": LOGIN_PATH,
        "HOME_PATH": HOME_PATH,
        "PRIVATE_PATHS": PRIVATE_PATHS,
    }
