"""Stream API client with credential headers, response caching and error tracking."""

import json
from collections.abc import Iterable, Mapping
from typing import Any, Optional
from urllib.parse import quote, urlencode, urlsplit

import requests  # type: ignore[import-untyped]

from stream_client.api.errors import SUCCESS_STATUS_CODES, Err, ErrorKind, Ok, Result
from stream_client.cache import CacheKeys, CacheStore, create_cache
from stream_client.config import Settings, get_settings
from stream_client.credentials import Credentials
from stream_client.hooks import Plugin, ResponseFilter, ResponseFilters
from stream_client.logging import LogContext, get_logger
from stream_client.notices import LogNotifier, Notifier, transport_error_notice

logger = get_logger("api")

API_KEY_HEADER = "stream-api-master-key"


def _fields_args(fields: Optional[Iterable[str]]) -> dict[str, str]:
    """Build the ``fields`` query argument (comma-joined) if any were requested."""
    fields = list(fields or [])
    if not fields:
        return {}
    return {"fields": ",".join(str(field) for field in fields)}


def _coerce_id(value: Any) -> int | None:
    """Integer user ID, or None when absent or not numeric."""
    if value is None or value is False:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


class StreamAPI:
    """
    Client for the Stream REST API.

    Every endpoint method returns the decoded JSON payload on success and
    ``False`` on failure. Failure details accumulate in ``errors`` across
    calls; ``last_error`` holds the most recent failure as an ``Err``.

    Example:
        with StreamAPI() as api:
            records = api.get_records(fields=["summary", "created"])
            if records is False:
                print(api.errors)
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        cache: Optional[CacheStore] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
        response_filter: Optional[ResponseFilter] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.settings = settings or get_settings()
        self.credentials = credentials or Credentials.from_settings(self.settings)
        self.cache = cache if cache is not None else create_cache(self.settings)
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.notifier = notifier if notifier is not None else LogNotifier()

        self.filters = ResponseFilters()
        if response_filter is not None:
            self.filters.add(response_filter)

        self.errors: dict[str, Any] = {}
        self.last_error: Optional[Err] = None

    def __enter__(self) -> "StreamAPI":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def use(self, plugin: Plugin) -> "StreamAPI":
        """Let ``plugin`` attach its filters to this client."""
        plugin.register(self)
        return self

    @property
    def api_key(self) -> str:
        return self.credentials.api_key

    @property
    def site_id(self) -> str:
        return self.credentials.site_id

    # =========================================================================
    # Endpoints
    # =========================================================================

    def validate_key(
        self, allow_cache: bool = True, ttl: int = CacheKeys.TTL_VALIDATE_KEY
    ) -> Any:
        """Validate the site's API key."""
        return self._unwrap(self.request("/validate-key", allow_cache=allow_cache, ttl=ttl))

    def get_user(
        self, user_id: Any = None, allow_cache: bool = True, ttl: int = CacheKeys.TTL_USER
    ) -> Any:
        """
        Get the details for a specific user.

        Args:
            user_id: Numeric user ID (coerced to int)
            allow_cache: Allow the response to be served from / written to cache
            ttl: Cache lifetime in seconds

        Returns:
            Decoded user payload, or False
        """
        user_id = _coerce_id(user_id)
        if user_id is None:
            return self._fast_fail("user_id is required")

        return self._unwrap(self.request(f"/users/{user_id}", allow_cache=allow_cache, ttl=ttl))

    def get_record(
        self,
        record_id: Any = None,
        fields: Iterable[str] = (),
        allow_cache: bool = True,
        ttl: int = CacheKeys.TTL_RECORD,
    ) -> Any:
        """
        Get a specific record.

        Args:
            record_id: Record ID
            fields: Return the specified fields only
            allow_cache: Allow the response to be served from / written to cache
            ttl: Cache lifetime in seconds

        Returns:
            Decoded record payload, or False
        """
        if record_id is None or record_id is False or record_id == "":
            return self._fast_fail("record_id is required")
        if not self.credentials.has_site:
            return self._fast_fail("site_id is not configured")

        path = f"/sites/{self.site_id}/records/{record_id}"
        return self._unwrap(
            self.request(path, _fields_args(fields), allow_cache=allow_cache, ttl=ttl)
        )

    def get_records(
        self,
        fields: Iterable[str] = (),
        allow_cache: bool = True,
        ttl: int = CacheKeys.TTL_RECORDS,
    ) -> Any:
        """Get all records for the configured site."""
        if not self.credentials.has_site:
            return self._fast_fail("site_id is not configured")

        path = f"/sites/{self.site_id}/records"
        return self._unwrap(
            self.request(path, _fields_args(fields), allow_cache=allow_cache, ttl=ttl)
        )

    def new_record(self, record: Mapping[str, Any], fields: Iterable[str] = ()) -> Any:
        """
        Create a new record. Never cached.

        The request body is a copy of ``record`` with ``site_id`` set to the
        configured site; the caller's mapping is left untouched.
        """
        if not self.credentials.has_site:
            return self._fast_fail("site_id is not configured")
        if not isinstance(record, Mapping):
            return self._fast_fail("record must be a mapping")

        body = {**record, "site_id": self.site_id}
        path = f"/sites/{self.site_id}/records"
        return self._unwrap(
            self.request(path, _fields_args(fields), method="POST", body=body, allow_cache=False)
        )

    def clear_cache(self) -> int:
        """Drop every cached response under this client's key prefix."""
        return self.cache.clear(self.settings.cache_prefix)

    # =========================================================================
    # Request plumbing
    # =========================================================================

    def request(
        self,
        path: str,
        args: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
        body: Any = None,
        allow_cache: bool = True,
        ttl: int = CacheKeys.TTL_DEFAULT,
    ) -> Result:
        """Call ``path`` and return a typed result instead of the False sentinel."""
        url = self._request_url(path, args)
        return self._remote_request(url, method, body, allow_cache, ttl)

    def _request_url(self, path: str, args: Optional[Mapping[str, Any]] = None) -> str:
        """
        Create and escape a URL for an API request.

        Args:
            path: The endpoint path, with a starting slash
            args: Query string arguments

        Returns:
            The escaped URL, or "" when the base URL is not http(s)
        """
        url = self.settings.api_url.rstrip("/") + quote(path, safe="/")
        if args:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urlencode(args, safe=',')}"

        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            logger.warning("unsafe_request_url", scheme=parts.scheme)
            return ""
        return url

    def _remote_request(
        self,
        url: str,
        method: str = "GET",
        body: Any = None,
        allow_cache: bool = True,
        ttl: int = CacheKeys.TTL_DEFAULT,
    ) -> Result:
        """
        Perform the request, going through the response cache for GETs.

        Any failure in this call removes the URL's cache entry, so failed
        responses are never replayed.
        """
        if not url:
            return self._record_fast_failure("empty or unsafe request URL")

        args: dict[str, Any] = {
            "headers": self._headers(body),
            "method": method,
            "body": json.dumps(body) if body is not None else "",
        }
        cache_key = CacheKeys.response(url, self.settings.cache_prefix)

        with LogContext(method=method, url=url):
            if method == "GET" and allow_cache:
                raw = self.cache.get(cache_key)
                if raw is None or "status" not in raw:
                    logger.debug("cache_miss", key=cache_key)
                    raw = self._send(url, args)
                    if not isinstance(raw, Err):
                        self.cache.set(cache_key, raw, ttl)
                else:
                    logger.debug("cache_hit", key=cache_key)
            else:
                raw = self._send(url, args)

            result = raw if isinstance(raw, Err) else self._handle_response(raw, url, args)

            if isinstance(result, Err):
                self.last_error = result
                self.cache.delete(cache_key)
                logger.debug("cache_invalidated", key=cache_key)

        return result

    def _headers(self, body: Any) -> dict[str, str]:
        headers = {
            API_KEY_HEADER: self.api_key,
            "Accept": "application/json",
            "User-Agent": "StreamAPIClient/1.0",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"
        return headers

    def _send(self, url: str, args: Mapping[str, Any]) -> dict[str, Any] | Err:
        """Make the HTTP call; returns the raw response or a transport Err."""
        try:
            response = self.session.request(
                args["method"],
                url,
                headers=args["headers"],
                data=args["body"] or None,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            message = str(e) or type(e).__name__
            self.errors["transport_error"] = message
            logger.error("api_transport_error", error=message)
            self.notifier.notify(transport_error_notice(message))
            return Err(ErrorKind.TRANSPORT_ERROR, message)

        logger.info("api_request", status=response.status_code)
        return {"status": response.status_code, "body": response.text}

    def _handle_response(
        self, raw: Mapping[str, Any], url: str, args: Mapping[str, Any]
    ) -> Result:
        status = raw.get("status")
        data = self.filters(self._decode(raw.get("body")), url, args)

        if status in SUCCESS_STATUS_CODES:
            return Ok(data)

        self.errors["http_code"] = status
        logger.warning("api_http_error", status=status)

        if isinstance(data, Mapping) and data.get("error") is not None:
            api_error = data["error"]
            self.errors["api_error"] = api_error
            logger.warning("api_error", status=status, api_error=api_error)
            return Err(ErrorKind.API_ERROR, str(api_error), http_code=status, api_error=api_error)

        return Err(ErrorKind.HTTP_ERROR, f"HTTP {status}", http_code=status)

    @staticmethod
    def _decode(text: Optional[str]) -> Any:
        """Decode a JSON body; empty or non-JSON bodies decode to None."""
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            logger.debug("api_decode_failed", body_preview=text[:200])
            return None

    def _record_fast_failure(self, detail: str) -> Err:
        err = Err(ErrorKind.FAST_FAILURE, detail)
        self.last_error = err
        logger.debug("api_fast_failure", detail=detail)
        return err

    def _fast_fail(self, detail: str) -> bool:
        self._record_fast_failure(detail)
        return False

    @staticmethod
    def _unwrap(result: Result) -> Any:
        return result.value if isinstance(result, Ok) else False


__all__ = ["StreamAPI", "API_KEY_HEADER"]
