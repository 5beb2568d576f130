from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode, urljoin

from mediadesk.config.settings import get_settings



# ----------------------------
# URL Manager
# ----------------------------

class URLManager:
    """
    Builds content API URLs and default headers without doing any network I/O.

    Query parameters follow the content API's conventions: ``None``/``False``/
    empty values are dropped, ``True`` is sent as ``"true"``.
    """

    def __init__(self, base_url: Optional[str] = None, default_headers: Optional[Mapping[str, str]] = None):
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self._default_headers: Dict[str, str] = {"Accept": "application/json"}
        if default_headers:
            self._default_headers.update(default_headers)

    # -------- Public API --------

    def build(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Tuple[str, Dict[str, str]]:
        """
        Build a full URL for a path relative to the API base.
        Returns (url, headers).
        """
        base = _ensure_trailing_slash(self.base_url)
        url = urljoin(base, path.lstrip("/"))

        query = _normalize_params(params)
        if query:
            url = f"{url}?{urlencode(query)}"

        return url, dict(self._default_headers)


# ----------------------------
# Helpers
# ----------------------------

def _ensure_trailing_slash(u: str) -> str:
    return u if u.endswith("/") else (u + "/")


def _normalize_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    query: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value is False or value == "" or value == 0:
            continue
        if value is True:
            query[key] = "true"
        else:
            query[key] = str(value)

    return query
