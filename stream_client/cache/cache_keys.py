"""
Cache key management.

Centralized cache key definitions to:
- Keep response keys deterministic across processes
- Document cache structure and default lifetimes
"""

import hashlib


class CacheKeys:
    """
    Centralized cache key definitions.

    Response keys are ``{prefix}{md5(url)}``, so every resolved URL
    (query string included) maps to exactly one entry.

    Examples:
        - wp_stream_5d41402abc4b2a76b9719d911017c592 -> raw GET response
    """

    PREFIX_RESPONSE = "wp_stream_"

    # TTLs (in seconds)
    TTL_DEFAULT = 60 * 5      # 5 minutes
    TTL_VALIDATE_KEY = 60 * 5
    TTL_USER = 60 * 5
    TTL_RECORD = 30
    TTL_RECORDS = 60 * 2

    @staticmethod
    def response(url: str, prefix: str = PREFIX_RESPONSE) -> str:
        """Cache key for the raw response of a GET request."""
        return f"{prefix}{hashlib.md5(url.encode('utf-8')).hexdigest()}"

    @staticmethod
    def response_pattern(prefix: str = PREFIX_RESPONSE) -> str:
        """Pattern to match every cached response."""
        return f"{prefix}*"
