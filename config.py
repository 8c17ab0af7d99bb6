import os

from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", 8000))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "alternatives")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = "HS256"
TOKEN_EXPIRY_SECONDS = int(os.getenv("TOKEN_EXPIRY_SECONDS", 7 * 24 * 60 * 60))
AUTH_COOKIE_NAME = "auth_token"

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# GitHub
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN", "")
CRON_SECRET = os.getenv("CRON_SECRET", "")
GITHUB_SYNC_DELAY = float(os.getenv("GITHUB_SYNC_DELAY", 1.2))

# PayPal
PAYPAL_CLIENT_ID = os.getenv("PAYPAL_CLIENT_ID", "")
PAYPAL_CLIENT_SECRET = os.getenv("PAYPAL_CLIENT_SECRET", "")
PAYPAL_MODE = os.getenv("PAYPAL_MODE", "sandbox")
APP_URL = os.getenv("APP_URL", "http://localhost:3000")


def is_development() -> bool:
    return ENV.lower() in ("development", "dev", "local")
