import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./accounts.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    APP_URL = data.get("APP_URL", "http://localhost:8000")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Signed email verification links
    VERIFICATION_SECRET = data.get(
        "VERIFICATION_SECRET", "dev-verification-secret-change-in-production"
    )
    VERIFICATION_EXPIRE_MINUTES = int(data.get("VERIFICATION_EXPIRE_MINUTES", 60))

    # Password reset
    PASSWORD_RESET_EXPIRE_MINUTES = int(data.get("PASSWORD_RESET_EXPIRE_MINUTES", 60))
    PASSWORD_RESET_THROTTLE_SECONDS = int(data.get("PASSWORD_RESET_THROTTLE_SECONDS", 60))
    PASSWORD_RESET_URL = data.get(
        "PASSWORD_RESET_URL", "http://localhost:3000/reset-password"
    )
    PASSWORD_RESET_HIDE_UNKNOWN_EMAIL = bool(
        data.get("PASSWORD_RESET_HIDE_UNKNOWN_EMAIL", False)
    )

    # Mail delivery (logs instead of sending when SMTP_HOST is empty)
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@example.com")
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "Account Service")

    # Avatar storage
    STORAGE_PATH = data.get("STORAGE_PATH", os.path.join(ROOT_PATH, "storage"))
    PUBLIC_STORAGE_URL = data.get("PUBLIC_STORAGE_URL", "http://localhost:8000/storage")
    AVATAR_MAX_BYTES = int(data.get("AVATAR_MAX_BYTES", 2 * 1024 * 1024))

    # Throttling
    RATE_LIMIT_ENABLED = bool(data.get("RATE_LIMIT_ENABLED", True))
    RATE_LIMIT_WINDOW_SECONDS = int(data.get("RATE_LIMIT_WINDOW_SECONDS", 60))
    AUTH_RATE_LIMIT = int(data.get("AUTH_RATE_LIMIT", 10))
    VERIFICATION_RATE_LIMIT = int(data.get("VERIFICATION_RATE_LIMIT", 6))
    PASSWORD_RATE_LIMIT = int(data.get("PASSWORD_RATE_LIMIT", 5))
