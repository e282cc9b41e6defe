"""Errors raised when talking to the Styra API."""

from __future__ import annotations

from typing import Any

import yaml


class StyraError(Exception):
    """Base class for every error raised by the Styra client."""


class HTTPError(StyraError):
    """The Styra API answered with a status code that was not expected."""

    def __init__(self, status_code: int, body: str, message: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"styra: unexpected statuscode: {self.status_code}, body: {self.body}"

    def __repr__(self) -> str:
        return (
            f"HTTPError(status_code={self.status_code!r}, body={self.body!r}, "
            f"message={self.message!r})"
        )


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise TypeError(f"cannot decode {type(value).__name__} into a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _scalar_to_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"cannot decode {value!r} into an integer")
    return value


def new_http_error(status_code: int, body: str) -> StyraError:
    """Build the exception describing a failed call to the Styra API.

    The body is read as YAML (which also covers JSON) and may supply a
    ``message``. If the body cannot be decoded, a plain :class:`StyraError`
    is returned instead of an :class:`HTTPError`.
    """
    error = HTTPError(status_code, body)
    try:
        document = yaml.safe_load(body)
        if document is None:
            return error
        if not isinstance(document, dict):
            raise TypeError(
                f"cannot decode {type(document).__name__} into an error document"
            )
        if document.get("statuscode") is not None:
            error.status_code = _scalar_to_int(document["statuscode"])
        if document.get("body") is not None:
            error.body = _scalar_to_str(document["body"])
        if document.get("message") is not None:
            error.message = _scalar_to_str(document["message"])
    except (yaml.YAMLError, TypeError) as exc:
        wrapped = StyraError(f"could not unmarshal error body: {exc}")
        wrapped.__cause__ = exc
        return wrapped
    error.args = (str(error),)
    return error