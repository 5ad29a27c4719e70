"""
Extension points for the Stream API client.

A response filter receives the decoded response body and may return a
replacement:

    def tag_source(data, url, args):
        if isinstance(data, dict):
            data["source"] = "stream"
        return data

    client.filters.add(tag_source)

Plugins bundle one or more such registrations behind ``register(host)``.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

ResponseFilter = Callable[[Any, str, Mapping[str, Any]], Any]


def identity_filter(data: Any, url: str, args: Mapping[str, Any]) -> Any:
    return data


class ResponseFilters:
    """Priority-ordered chain of response filters; lower priority runs first."""

    def __init__(self) -> None:
        self._filters: list[tuple[int, int, ResponseFilter]] = []
        self._counter = 0

    def add(self, fn: ResponseFilter, priority: int = 10) -> None:
        self._filters.append((priority, self._counter, fn))
        self._counter += 1
        self._filters.sort(key=lambda entry: (entry[0], entry[1]))

    def remove(self, fn: ResponseFilter) -> bool:
        before = len(self._filters)
        self._filters = [entry for entry in self._filters if entry[2] is not fn]
        return len(self._filters) != before

    def __call__(self, data: Any, url: str, args: Mapping[str, Any]) -> Any:
        for _, _, fn in self._filters:
            data = fn(data, url, args)
        return data

    def __len__(self) -> int:
        return len(self._filters)


@runtime_checkable
class Plugin(Protocol):
    def register(self, host: Any) -> None:
        """Attach this plugin's filters/handlers to ``host``."""


__all__ = ["ResponseFilter", "ResponseFilters", "Plugin", "identity_filter"]
