"""
Error taxonomy and typed results for Stream API calls.

Every call resolves to ``Ok(value)`` or ``Err(kind, detail)``. The public
endpoint methods unwrap this to the decoded payload or ``False``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ErrorKind(str, Enum):
    FAST_FAILURE = "fast_failure"        # required identifier missing, no request made
    TRANSPORT_ERROR = "transport_error"  # no response received
    HTTP_ERROR = "http_error"            # status outside SUCCESS_STATUS_CODES
    API_ERROR = "api_error"              # response body carried an "error" field


SUCCESS_STATUS_CODES = frozenset({200, 201, 204})


@dataclass(frozen=True)
class Ok:
    value: Any

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str = ""
    http_code: Optional[int] = None
    api_error: Any = None

    def __bool__(self) -> bool:
        return False

    def unwrap(self) -> bool:
        return False


Result = Union[Ok, Err]


__all__ = ["ErrorKind", "SUCCESS_STATUS_CODES", "Ok", "Err", "Result"]
