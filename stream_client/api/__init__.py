# Stream REST API integration module

from .client import API_KEY_HEADER, StreamAPI
from .errors import SUCCESS_STATUS_CODES, Err, ErrorKind, Ok, Result

__all__ = [
    "StreamAPI",
    "API_KEY_HEADER",
    "SUCCESS_STATUS_CODES",
    "ErrorKind",
    "Ok",
    "Err",
    "Result",
]
