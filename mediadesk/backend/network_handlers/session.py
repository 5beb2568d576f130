from __future__ import annotations

from typing import Any, Collection, Dict, Mapping, Optional
import socket

import requests
from requests.adapters import HTTPAdapter

from mediadesk.backend.common.errors import NetworkError
from mediadesk.backend.common.logging import get_logger
from mediadesk.backend.network_handlers.url_manager import URLManager
from mediadesk.config.settings import get_settings

log = get_logger(__name__)



# ---------------- Exceptions ----------------

class NetError(NetworkError): ...
class TimeoutError(NetError): ...
class DNSFailure(NetError): ...
class ConnectionFailed(NetError): ...
class BadRequest(NetError): ...
class Unauthorized(NetError): ...
class Forbidden(NetError): ...
class NotFound(NetError): ...
class RateLimited(NetError): ...
class Upstream5xx(NetError): ...
class Client4xx(NetError): ...


def _map_http_error(status: int) -> NetError:
    if status == 400: return BadRequest("400 Bad Request")
    if status == 401: return Unauthorized("401 Unauthorized")
    if status == 403: return Forbidden("403 Forbidden")
    if status == 404: return NotFound("404 Not Found")
    if status == 429: return RateLimited("429 Too Many Requests")
    if 500 <= status < 600: return Upstream5xx(f"{status} Upstream error")

    return Client4xx(f"{status} HTTP error")


# ---------------- Main Session ----------------

class HttpSession:
    """
    Central HTTP client for the content API:
      - URL building + default headers via URLManager
      - Single attempt per request; callers own any retry policy
      - Typed error mapping
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        urlm: Optional[URLManager] = None,
        session: Optional[requests.Session] = None,
    ):
        self.urlm = urlm or URLManager()
        self.timeout = timeout if timeout is not None else get_settings().http_timeout

        self._session = session or requests.Session()
        if session is None:
            self._session.mount("http://", HTTPAdapter(pool_connections=4, pool_maxsize=8))
            self._session.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=8))

    # -------- public API --------

    def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        allowed_statuses: Optional[Collection[int]] = None,
    ) -> requests.Response:

        return self._request(
            "GET",
            path,
            params=params,
            headers=headers,
            allowed_statuses=allowed_statuses,
        )

    def get_json(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        """GET and decode a JSON body. Undecodable bodies raise :class:`NetError`."""

        resp = self.get(path, params=params)
        try:
            return resp.json()
        except ValueError as e:
            raise NetError(f"Invalid JSON from {path}: {e}") from e

    def close(self) -> None:
        self._session.close()

    # -------- internals --------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]],
        headers: Optional[Dict[str, str]] = None,
        allowed_statuses: Optional[Collection[int]] = None,
    ) -> requests.Response:

        url, base_headers = self.urlm.build(path, params)
        hdrs = dict(base_headers or {})
        if headers:
            hdrs.update(headers)

        allowed = set(allowed_statuses or ())

        try:
            resp = self._session.request(
                method=method,
                url=url,
                headers=hdrs,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise TimeoutError(str(e)) from e
        except requests.exceptions.ConnectionError as e:
            if isinstance(getattr(e, "__cause__", None), socket.gaierror):
                raise DNSFailure(str(e)) from e
            raise ConnectionFailed(str(e)) from e
        except requests.exceptions.RequestException as e:
            raise NetError(str(e)) from e

        status = resp.status_code
        log.debug("http_response", extra={"method": method, "url": url, "status": status})
        if status < 400 or status in allowed:
            return resp

        raise _map_http_error(status)
