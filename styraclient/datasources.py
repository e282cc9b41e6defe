"""Datasources in the Styra API."""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass, fields
from typing import Any

from .http_error import StyraError
from .transport import APIResponse, BaseClient

ENDPOINT_V1_DATASOURCES = "/v1/datasources"


def _decode_object(body: bytes) -> dict[str, Any] | None:
    """Decode a JSON response body that must be an object or null."""
    try:
        document = json.loads(body)
    except ValueError as exc:
        raise StyraError(f"could not unmarshal body: {exc}") from exc
    if document is not None and not isinstance(document, dict):
        raise StyraError(
            f"could not unmarshal body: cannot decode {type(document).__name__} "
            "into an object"
        )
    return document


def _field(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Read ``key`` from ``data``; null or missing values give ``default``."""
    value = data.get(key)
    if value is None:
        return default
    if type(value) is not kind:
        raise TypeError(
            f"field {key!r}: cannot decode {type(value).__name__} into {kind.__name__}"
        )
    return value


def _compact(obj: Any, always: set[str]) -> dict[str, Any]:
    """The fields of a dataclass, leaving out empty ones not named in ``always``."""
    return {
        f.name: getattr(obj, f.name)
        for f in fields(obj)
        if f.name in always or getattr(obj, f.name)
    }


@dataclass
class UpsertDatasourceRequest:
    """Request body for creating or updating a datasource."""

    category: str = ""
    description: str = ""
    enabled: bool = False
    commit: str = ""
    credentials: str = ""
    reference: str = ""
    url: str = ""
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _compact(self, {"category", "enabled"})


@dataclass
class DatasourceConfig:
    """The configuration of a datasource."""

    category: str = ""
    type: str = ""
    optional: bool = False
    commit: str = ""
    credentials: str = ""
    description: str = ""
    enabled: bool = False
    id: str = ""
    path: str = ""
    reference: str = ""
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _compact(self, {"category"})


def _parse_datasource_config(value: Any) -> DatasourceConfig | None:
    """Build a :class:`DatasourceConfig` from decoded JSON, or None for null."""
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"cannot decode {type(value).__name__} into a datasource")
    return DatasourceConfig(
        **{
            f.name: _field(value, f.name, type(f.default), f.default)
            for f in fields(DatasourceConfig)
        }
    )


@dataclass
class GetDatasourceResponse:
    """A datasource as returned by the API."""

    status_code: int
    body: bytes
    datasource_config: DatasourceConfig | None = None


def _endpoint(datasource_id: str) -> str:
    return f"{ENDPOINT_V1_DATASOURCES}/{datasource_id}"


class DatasourcesAPI(BaseClient):
    """Calls to the /v1/datasources endpoints."""

    def get_datasource(self, datasource_id: str) -> GetDatasourceResponse:
        """Fetch the configuration of a datasource."""
        response = self._send("GET", posixpath.normpath(_endpoint(datasource_id)))
        document = _decode_object(response.body) or {}
        try:
            config = _parse_datasource_config(document.get("result"))
        except TypeError as exc:
            raise StyraError(f"could not unmarshal body: {exc}") from exc
        return GetDatasourceResponse(response.status_code, response.body, config)

    def upsert_datasource(
        self, datasource_id: str, request: UpsertDatasourceRequest
    ) -> APIResponse:
        """Create the datasource ``datasource_id`` or replace its configuration."""
        return self._send("PUT", _endpoint(datasource_id), request)

    def delete_datasource(self, datasource_id: str) -> APIResponse:
        """Delete a datasource; a missing datasource is not an error."""
        return self._send("DELETE", _endpoint(datasource_id), ok=(200, 404))