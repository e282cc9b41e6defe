"""HTTP plumbing shared by every part of the Styra client."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from .http_error import StyraError, new_http_error

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class APIResponse:
    """Status code and raw body of a successful call."""

    status_code: int
    body: bytes


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


def _encode_body(body: Any) -> bytes:
    """Encode a request body as compact JSON with a trailing newline."""
    try:
        text = json.dumps(
            body, default=_to_jsonable, ensure_ascii=False, separators=(",", ":")
        )
    except (TypeError, ValueError) as exc:
        raise StyraError(f"could not encode body: {exc}") from exc
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return (text + "\n").encode("utf-8")


class BaseClient:
    """Sends authenticated JSON requests to a Styra API endpoint."""

    def __init__(
        self, url: str, token: str, http_client: httpx.Client | None = None
    ) -> None:
        self.url = url
        self._token = token
        self._owns_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.Client()

    def request(self, method: str, endpoint: str, body: Any = None) -> httpx.Response:
        """Send a request to ``url + endpoint`` and return the raw response."""
        content = b"" if body is None else _encode_body(body)
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        try:
            return self.http_client.request(
                method, f"{self.url}{endpoint}", content=content, headers=headers
            )
        except httpx.HTTPError as exc:
            raise StyraError(f"could not send request: {exc}") from exc

    def _send(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        ok: Iterable[int] = (200,),
    ) -> APIResponse:
        """Send a request and raise unless the status code is in ``ok``."""
        response = self.request(method, endpoint, body)
        try:
            raw = response.read()
        except httpx.HTTPError as exc:
            raise StyraError(f"could not read body: {exc}") from exc
        if response.status_code not in tuple(ok):
            raise new_http_error(response.status_code, raw.decode("utf-8", "replace"))
        return APIResponse(status_code=response.status_code, body=raw)

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "BaseClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()