# Command-line interface for the Stream API client

from .stream_cli import main

__all__ = ["main"]
