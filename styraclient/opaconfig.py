"""The OPA configuration asset of a Styra system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import yaml

from .http_error import StyraError, new_http_error
from .transport import BaseClient


@dataclass
class OPAConfig:
    """Connection details taken from a system's opa-config asset."""

    host_url: str = ""
    token: str = ""
    system_id: str = ""
    system_type: str = ""


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"cannot decode {type(value).__name__} into {what}")
    return value


def _string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise TypeError(f"field {key!r}: cannot decode {type(value).__name__} into a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse(text: str) -> OPAConfig:
    """Turn the YAML document of an opa-config asset into an :class:`OPAConfig`."""
    try:
        document = yaml.safe_load(text)
        if document is None:
            raise TypeError("empty document")
        root = _mapping(document, "an opa config")
        labels = _mapping(root.get("labels"), "labels")
        services = root.get("services")
        if services is not None and not isinstance(services, list):
            raise TypeError(f"cannot decode {type(services).__name__} into services")
        system_id = _string(labels, "system-id")
        system_type = _string(labels, "system-type")
        first = None
        if services:
            first = _mapping(services[0], "a service")
            credentials = _mapping(first.get("credentials"), "credentials")
            bearer = _mapping(credentials.get("bearer"), "bearer credentials")
            host_url = _string(first, "url")
            token = _string(bearer, "token")
    except (yaml.YAMLError, TypeError) as exc:
        raise StyraError(f"could not decode opa-config asset response: {exc}") from exc

    if first is None:
        raise StyraError("No services in opa config")

    return OPAConfig(
        host_url=host_url,
        token=token,
        system_id=system_id,
        system_type=system_type,
    )


class OPAConfigAPI(BaseClient):
    """Calls to the /v1/systems/{id}/assets/opa-config endpoint."""

    def get_opa_config(self, system_id: str) -> OPAConfig:
        """Fetch the OPA configuration of the system ``system_id``."""
        try:
            response = self.request("GET", f"/v1/systems/{system_id}/assets/opa-config")
        except StyraError as exc:
            raise StyraError(f"could not get opaconf file: {exc}") from exc

        try:
            raw = response.read()
        except httpx.HTTPError as exc:
            raise StyraError(f"could not read body: {exc}") from exc

        if response.status_code != 200:
            raise new_http_error(response.status_code, raw.decode("utf-8", "replace"))

        return _parse(raw.decode("utf-8", "replace"))