"""
Web API configuration.
"""
from revenue.config import config, VERSION

# Web server settings
WEB_HOST = config.web.host
WEB_PORT = config.web.port

# Rate limits per route class
READ_LIMIT = config.web.read_limit
WRITE_LIMIT = config.web.write_limit

__all__ = ["WEB_HOST", "WEB_PORT", "READ_LIMIT", "WRITE_LIMIT", "VERSION"]
