"""
Configuration from environment. No hardcoded secrets or business rules.
Copy .env.example to .env at project root. Default DB is local MySQL database 'licensing'.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (parent of src)
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

PORT = int(os.environ.get("PORT", "3000"))
APP_ENV = os.environ.get("APP_ENV", "development")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Local MySQL — default database name 'licensing'
MYSQL = {
    "host": os.environ.get("MYSQL_HOST", "localhost"),
    "port": int(os.environ.get("MYSQL_PORT", "3306")),
    "user": os.environ.get("MYSQL_USER", "root"),
    "password": os.environ.get("MYSQL_PASSWORD", ""),
    "database": os.environ.get("MYSQL_DATABASE", "licensing"),
    "connect_timeout": int(os.environ.get("MYSQL_CONNECT_TIMEOUT", "5")),
}

# Bearer token for /admin/*; empty disables admin routes (they answer 500 ADMIN_TOKEN_missing)
ADMIN_TOKEN = os.environ.get("ADMIN_TOKEN", "")

CORS_ALLOW_ORIGIN = os.environ.get("CORS_ALLOW_ORIGIN", "*")

# Grant duration used when /admin/grant omits "days"
GRANT_DEFAULT_DAYS = int(os.environ.get("GRANT_DEFAULT_DAYS", "365"))
