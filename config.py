import os


def env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./albums.db")

# "sql" talks to DATABASE_URL through SQLAlchemy, "supabase" to a hosted PostgREST project
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "dev-jwt-secret-change-me-before-deploying")
SUPABASE_TIMEOUT = float(os.getenv("SUPABASE_TIMEOUT", "10"))
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
SQL_ECHO = env_bool("SQL_ECHO", False)

API_KEY_PREFIX = os.getenv("API_KEY_PREFIX", "alb_")
API_KEY_LENGTH = int(os.getenv("API_KEY_LENGTH", "32"))
