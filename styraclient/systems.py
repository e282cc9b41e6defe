"""Systems in the Styra API."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from .datasources import (
    DatasourceConfig,
    _decode_object,
    _field,
    _parse_datasource_config,
)
from .http_error import StyraError
from .transport import APIResponse, BaseClient

ENDPOINT_V1_SYSTEMS = "/v1/systems"


@dataclass
class GitRepoConfig:
    """A git repository configuration."""

    commit: str = ""
    credentials: str = ""
    path: str = ""
    reference: str = ""
    url: str = ""


@dataclass
class SourceControlConfig:
    """The source control configuration of a system."""

    origin: GitRepoConfig = dataclasses.field(default_factory=GitRepoConfig)


@dataclass
class DeploymentParameters:
    """Additional OPA deployment parameters for a system."""

    discovery: dict[str, Any] | None = None


@dataclass
class DecisionMappingAllowed:
    """The allow element of a decision mapping."""

    expected: Any = None
    negated: bool = False
    path: str = ""


@dataclass
class DecisionMappingColumn:
    """A column of a decision mapping."""

    key: str = ""
    path: str = ""
    type: str = ""


@dataclass
class DecisionMappingReason:
    """The reason element of a decision mapping."""

    path: str = ""


@dataclass
class DecisionMapping:
    """A decision mapping."""

    allowed: DecisionMappingAllowed | None = None
    columns: list[DecisionMappingColumn] | None = None
    reason: DecisionMappingReason | None = None


def _mapping_to_json(mapping: DecisionMapping) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if mapping.allowed is not None:
        allowed: dict[str, Any] = {}
        if mapping.allowed.expected is not None:
            allowed["expected"] = mapping.allowed.expected
        if mapping.allowed.negated:
            allowed["negated"] = True
        allowed["path"] = mapping.allowed.path
        data["allowed"] = allowed
    if mapping.columns:
        columns = []
        for column in mapping.columns:
            item = {"key": column.key, "path": column.path}
            if column.type:
                item["type"] = column.type
            columns.append(item)
        data["columns"] = columns
    if mapping.reason is not None:
        data["reason"] = {"path": mapping.reason.path}
    return data


@dataclass
class SystemConfig:
    """The configuration of a system."""

    decision_mappings: dict[str, DecisionMapping] | None = None
    description: str = ""
    name: str = ""
    read_only: bool = False
    source_control: SourceControlConfig | None = None
    type: str = ""
    id: str = ""
    datasources: list[DatasourceConfig] | None = None
    deployment_parameters: DeploymentParameters | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.decision_mappings:
            data["decision_mappings"] = {
                key: _mapping_to_json(self.decision_mappings[key])
                for key in sorted(self.decision_mappings)
            }
        if self.description:
            data["description"] = self.description
        data["name"] = self.name
        data["read_only"] = self.read_only
        if self.source_control is not None:
            data["source_control"] = {
                "origin": dataclasses.asdict(self.source_control.origin)
            }
        data["type"] = self.type
        data["id"] = self.id
        if self.datasources:
            data["datasources"] = [
                None if ds is None else ds.to_dict() for ds in self.datasources
            ]
        if self.deployment_parameters is not None:
            params: dict[str, Any] = {}
            if self.deployment_parameters.discovery is not None:
                params["discovery"] = self.deployment_parameters.discovery
            data["deployment_parameters"] = params
        return data


@dataclass
class SystemResponse:
    """A system as returned by the get, create and update calls."""

    status_code: int
    body: bytes
    system_config: SystemConfig | None = None


@dataclass
class VerifyGitConfigRequest:
    """Request body for verifying a git configuration."""

    commit: str = ""
    id: str = ""
    credentials: str = ""
    path: str = ""
    reference: str = ""
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "commit": self.commit,
            "id": self.id,
            "credentials": self.credentials,
            "path": self.path,
            "reference": self.reference,
            "url": self.url,
        }


def _object(value: Any, what: str) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"cannot decode {type(value).__name__} into {what}")
    return value


def _list(value: Any, what: str) -> list[Any] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"cannot decode {type(value).__name__} into {what}")
    return value


def _parse_git_repo(value: Any) -> GitRepoConfig:
    data = _object(value, "a git repo config") or {}
    return GitRepoConfig(
        **{
            key: _field(data, key, str, "")
            for key in ("commit", "credentials", "path", "reference", "url")
        }
    )


def _parse_column(value: Any) -> DecisionMappingColumn:
    data = _object(value, "a decision mapping column") or {}
    return DecisionMappingColumn(
        key=_field(data, "key", str, ""),
        path=_field(data, "path", str, ""),
        type=_field(data, "type", str, ""),
    )


def _parse_mapping(value: Any) -> DecisionMapping:
    data = _object(value, "a decision mapping") or {}
    allowed_data = _object(data.get("allowed"), "an allowed element")
    allowed = None
    if allowed_data is not None:
        allowed = DecisionMappingAllowed(
            expected=allowed_data.get("expected"),
            negated=_field(allowed_data, "negated", bool, False),
            path=_field(allowed_data, "path", str, ""),
        )
    columns = _list(data.get("columns"), "columns")
    reason_data = _object(data.get("reason"), "a reason element")
    return DecisionMapping(
        allowed=allowed,
        columns=None if columns is None else [_parse_column(c) for c in columns],
        reason=(
            None
            if reason_data is None
            else DecisionMappingReason(path=_field(reason_data, "path", str, ""))
        ),
    )


def _parse_system_config(value: Any) -> SystemConfig | None:
    data = _object(value, "a system")
    if data is None:
        return None
    mappings = _object(data.get("decision_mappings"), "decision mappings")
    source_control = _object(data.get("source_control"), "a source control config")
    datasources = _list(data.get("datasources"), "datasources")
    deployment = _object(data.get("deployment_parameters"), "deployment parameters")
    return SystemConfig(
        decision_mappings=(
            None
            if mappings is None
            else {key: _parse_mapping(v) for key, v in mappings.items()}
        ),
        description=_field(data, "description", str, ""),
        name=_field(data, "name", str, ""),
        read_only=_field(data, "read_only", bool, False),
        source_control=(
            None
            if source_control is None
            else SourceControlConfig(origin=_parse_git_repo(source_control.get("origin")))
        ),
        type=_field(data, "type", str, ""),
        id=_field(data, "id", str, ""),
        datasources=(
            None
            if datasources is None
            else [_parse_datasource_config(ds) for ds in datasources]
        ),
        deployment_parameters=(
            None
            if deployment is None
            else DeploymentParameters(
                discovery=_object(deployment.get("discovery"), "discovery overrides")
            )
        ),
    )


class SystemsAPI(BaseClient):
    """Calls to the /v1/systems endpoints."""

    def _system_response(self, response: APIResponse) -> SystemResponse:
        document = _decode_object(response.body) or {}
        try:
            config = _parse_system_config(document.get("result"))
        except TypeError as exc:
            raise StyraError(f"could not unmarshal body: {exc}") from exc
        return SystemResponse(
            status_code=response.status_code, body=response.body, system_config=config
        )

    def get_system(self, system_id: str) -> SystemResponse:
        """Fetch the configuration of a system."""
        return self._system_response(
            self._send("GET", f"{ENDPOINT_V1_SYSTEMS}/{system_id}")
        )

    def create_system(self, request: SystemConfig | None) -> SystemResponse:
        """Create a system from ``request``."""
        body = request if request is not None else {}
        return self._system_response(self._send("POST", ENDPOINT_V1_SYSTEMS, body))

    def update_system(
        self, system_id: str, request: SystemConfig | None
    ) -> SystemResponse:
        """Replace the configuration of a system."""
        body = request if request is not None else {}
        return self._system_response(
            self._send("PUT", f"{ENDPOINT_V1_SYSTEMS}/{system_id}", body)
        )

    def delete_system(self, system_id: str) -> APIResponse:
        """Delete a system; a missing system is not an error."""
        return self._send(
            "DELETE", f"{ENDPOINT_V1_SYSTEMS}/{system_id}", ok=(200, 404)
        )

    def verify_git_configuration(self, request: VerifyGitConfigRequest) -> APIResponse:
        """Ask the API to verify a git source control configuration."""
        return self._send(
            "POST", f"{ENDPOINT_V1_SYSTEMS}/source-control/verify-config", request
        )


def _sorted_columns(mappings: dict[str, DecisionMapping]) -> dict[str, DecisionMapping]:
    return {
        key: dataclasses.replace(
            mapping,
            columns=(
                None
                if mapping.columns is None
                else sorted(mapping.columns, key=lambda column: column.key)
            ),
        )
        for key, mapping in mappings.items()
    }


def decision_mappings_equals(
    dms1: dict[str, DecisionMapping] | None,
    dms2: dict[str, DecisionMapping] | None,
) -> bool:
    """Compare decision mappings, ignoring the order of their columns."""
    if dms1 is None and dms2 is None:
        return True
    if dms1 is None or dms2 is None:
        return False
    return _sorted_columns(dms1) == _sorted_columns(dms2)