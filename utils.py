import secrets
import string
import uuid
from datetime import datetime, timezone

import config as settings


def generate_api_key(length: int = settings.API_KEY_LENGTH) -> str:
    alphabet = string.ascii_letters + string.digits
    return settings.API_KEY_PREFIX + ''.join(secrets.choice(alphabet) for _ in range(length))


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(dt: datetime) -> str:
    """ISO-8601 with a trailing Z, the format the hosted backend emits."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
