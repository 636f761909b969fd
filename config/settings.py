import os

from config.secrets_manager import get_secret

# -------------------------
# 1. Backend connections
# -------------------------
SOLR_URL = get_secret("SOLR_URL", "http://localhost:8080/solr/collection1").rstrip("/")
SOLR_TIMEOUT = int(get_secret("SOLR_TIMEOUT", "30"))

REDIS_HOST = get_secret("REDIS_HOST", "localhost")
REDIS_PORT = int(get_secret("REDIS_PORT", "6379"))
REDIS_PASSWORD = get_secret("REDIS_PASSWORD", None)

# Navigation records live as long as the session, never more than a day
NAVIGATION_TTL_HOURS = min(int(get_secret("NAVIGATION_TTL_HOURS", "2")), 24)

# -------------------------
# 2. Site configuration
# -------------------------
SEARCH_CONFIG_PATH = get_secret("SEARCH_CONFIG_PATH", "/app/config/search_config.yml")
SITE_BASE_URL = get_secret("SITE_BASE_URL", "http://localhost").rstrip("/")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# TODO : Set up configuration for front server
API_ALLOWED_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",  # React dev server (if using CRA)
]
