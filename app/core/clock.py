"""Wall clock for persisted timestamps (naive local time in the configured timezone)."""

from datetime import datetime

import pytz

from app.config import get_settings


def now() -> datetime:
    tz = pytz.timezone(get_settings().TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)
