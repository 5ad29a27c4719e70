"""
Stream API Client Library.

A cached, authenticated client for the Stream REST API.

Usage:
    # Client
    from stream_client.api import StreamAPI

    # Config
    from stream_client.config import get_settings, Settings

    # Logging
    from stream_client.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
