import os
from dotenv import load_dotenv

load_dotenv()

API_NAME = os.getenv("API_NAME", "Tube API")
API_VERSION = os.getenv("API_VERSION", "1.0.0")
API_TAG = f"{API_NAME} v{API_VERSION}"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))

APP_ENV = os.getenv("APP_ENV", "production").lower()
# raw upstream error text is only exposed outside production
SHOW_ERROR_DETAILS = APP_ENV != "production"

_DEFAULT_ORIGINS = {
    "production": "https://your-frontend-domain.com",
    "development": "http://localhost:3000,http://127.0.0.1:5500",
}
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        _DEFAULT_ORIGINS["production" if APP_ENV == "production" else "development"],
    ).split(",")
    if origin.strip()
]

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 15 * 60))
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", 100))
RATE_LIMIT_STORAGE = os.getenv("RATE_LIMIT_STORAGE", "memory").lower()  # memory | redis
# only behind a reverse proxy that overwrites X-Forwarded-For
TRUST_PROXY_HEADERS = os.getenv("TRUST_PROXY_HEADERS", "false").lower() == "true"

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))

YTDLP_COOKIES_FILE = os.getenv("YTDLP_COOKIES_FILE")  # optional Netscape cookies.txt
UPSTREAM_TIMEOUT_SECONDS = int(os.getenv("UPSTREAM_TIMEOUT_SECONDS", 10))
STREAM_CHUNK_SIZE = int(os.getenv("STREAM_CHUNK_SIZE", 64 * 1024))

STATIC_DIR = os.getenv("STATIC_DIR", "public")

SEARCH_DEFAULT_LIMIT = 20
SEARCH_MAX_LIMIT = 50
SEARCH_MIN_QUERY_LENGTH = 2
DOWNLOAD_MAX_FORMATS = 10
RELATED_VIDEOS_LIMIT = 5
DESCRIPTION_PREVIEW_LENGTH = 200
