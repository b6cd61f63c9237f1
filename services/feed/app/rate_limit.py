"""
Global slowapi rate limiter.

Imported by interactions/router.py for per-endpoint limits.  Mounted onto
app.state in main.py so slowapi middleware can find it.

Storage defaults to in-memory; point RATE_LIMIT_STORAGE_URI at Redis
(redis://...) when running more than one worker.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import Settings

_settings = Settings()

INTERACTION_LIMIT = _settings.interaction_rate_limit

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)
