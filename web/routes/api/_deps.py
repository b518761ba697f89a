"""Shared dependencies for API route modules."""
import time

from slowapi import Limiter
from slowapi.util import get_remote_address

from revenue.exceptions import ValidationError
from revenue.observability import get_logger
from revenue.store import get_store
from revenue.validators import (
    validate_bucket_mode,
    validate_date_filter,
    validate_date_range,
    validate_region,
    validate_scope,
    validate_status_filter,
)
from web.config import READ_LIMIT, WRITE_LIMIT

# Shared limiter instance
limiter = Limiter(key_func=get_remote_address)

# Track startup time for uptime calculation
START_TIME = time.time()
