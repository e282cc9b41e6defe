"""Role bindings in the Styra authorization API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from .http_error import StyraError
from .transport import APIResponse, BaseClient

ENDPOINT_V2_ROLEBINDINGS = "/v2/authz/rolebindings"


class Role(str, Enum):
    """A role in Styra."""

    SYSTEM_VIEWER = "SystemViewer"
    SYSTEM_POLICY_EDITOR = "SystemPolicyEditor"


class RoleBindingKind(str, Enum):
    """The kind of resource a role binding applies to."""

    SYSTEM = "system"


class SubjectKind(str, Enum):
    """The kind of a subject."""

    USER = "user"
    CLAIM = "claim"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else value


def _as_enum(enum_type: type[Enum], value: Any) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        return value


@dataclass
class ClaimConfig:
    """A claim that identifies a subject."""

    key: str = ""
    value: str = ""
    identity_provider: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.identity_provider:
            data["identity_provider"] = self.identity_provider
        data["key"] = self.key
        data["value"] = self.value
        return data


@dataclass
class Subject:
    """A user or claim that a role is bound to."""

    id: str = ""
    kind: SubjectKind | str = ""
    claim_config: ClaimConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        data["kind"] = _text(self.kind)
        if self.claim_config is not None:
            data["claim_config"] = self.claim_config.to_dict()
        return data


@dataclass
class ResourceFilter:
    """Limits which resources a role binding targets."""

    id: str = ""
    kind: RoleBindingKind | str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "kind": _text(self.kind)}


@dataclass
class RoleBindingConfig:
    """A list of subjects bound to a role."""

    id: str = ""
    subjects: list[Subject] | None = None
    role_id: Role | str = ""


@dataclass
class ListRoleBindingsV2Params:
    """Query parameters for listing role bindings; empty values are left out."""

    resource_kind: RoleBindingKind | str = ""
    resource_id: str = ""
    role_id: Role | str = ""
    subject_kind: SubjectKind | str = ""


@dataclass
class CreateRoleBindingRequest:
    """Request body for creating a role binding."""

    resource_filter: ResourceFilter | None = None
    role_id: Role | str = ""
    subjects: list[Subject] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_filter": (
                None if self.resource_filter is None else self.resource_filter.to_dict()
            ),
            "role_id": _text(self.role_id),
            "subjects": (
                None
                if self.subjects is None
                else [subject.to_dict() for subject in self.subjects]
            ),
        }


@dataclass
class UpdateRoleBindingSubjectsRequest:
    """Request body for replacing the subjects of a role binding."""

    subjects: list[Subject] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subjects": (
                None
                if self.subjects is None
                else [subject.to_dict() for subject in self.subjects]
            )
        }


@dataclass
class ListRoleBindingsV2Response:
    """Role bindings returned by the list endpoint."""

    status_code: int
    body: bytes
    rolebindings: list[RoleBindingConfig] | None = None


@dataclass
class CreateRoleBindingResponse:
    """The role binding returned after creating it."""

    status_code: int
    body: bytes
    rolebinding: RoleBindingConfig | None = None


def _object(value: Any, what: str) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"cannot decode {type(value).__name__} into {what}")
    return value


def _claim_config_from_json(value: Any) -> ClaimConfig | None:
    data = _object(value, "a claim config")
    if data is None:
        return None
    return ClaimConfig(
        key=data.get("key") or "",
        value=data.get("value") or "",
        identity_provider=data.get("identity_provider") or "",
    )


def _subject_from_json(value: Any) -> Subject | None:
    data = _object(value, "a subject")
    if data is None:
        return None
    return Subject(
        id=data.get("id") or "",
        kind=_as_enum(SubjectKind, data.get("kind") or ""),
        claim_config=_claim_config_from_json(data.get("claim_config")),
    )


def _role_binding_from_json(value: Any) -> RoleBindingConfig | None:
    data = _object(value, "a role binding")
    if data is None:
        return None
    subjects = data.get("subjects")
    if subjects is not None and not isinstance(subjects, list):
        raise TypeError("subjects must be a list")
    return RoleBindingConfig(
        id=data.get("id") or "",
        subjects=None if subjects is None else [_subject_from_json(s) for s in subjects],
        role_id=_as_enum(Role, data.get("role_id") or ""),
    )


def _decode(body: bytes) -> dict[str, Any]:
    try:
        document = json.loads(body)
        data = _object(document, "a response")
    except (ValueError, TypeError) as exc:
        raise StyraError(f"could not unmarshal body: {exc}") from exc
    return data or {}


class AuthzAPI(BaseClient):
    """Calls to the /v2/authz/rolebindings endpoints."""

    def list_role_bindings_v2(
        self, params: ListRoleBindingsV2Params
    ) -> ListRoleBindingsV2Response:
        """List the role bindings that match ``params``."""
        query = {
            "resource_kind": _text(params.resource_kind),
            "resource_id": params.resource_id,
            "role_id": _text(params.role_id),
            "subject_kind": _text(params.subject_kind),
        }
        encoded = urlencode(sorted((k, v) for k, v in query.items() if v))
        response = self._send("GET", f"{ENDPOINT_V2_ROLEBINDINGS}?{encoded}")
        data = _decode(response.body)
        try:
            bindings = data.get("rolebindings")
            if bindings is not None and not isinstance(bindings, list):
                raise TypeError("rolebindings must be a list")
            parsed = (
                None
                if bindings is None
                else [_role_binding_from_json(b) for b in bindings]
            )
        except TypeError as exc:
            raise StyraError(f"could not unmarshal body: {exc}") from exc
        return ListRoleBindingsV2Response(
            status_code=response.status_code, body=response.body, rolebindings=parsed
        )

    def create_role_binding(
        self, request: CreateRoleBindingRequest
    ) -> CreateRoleBindingResponse:
        """Create a role binding."""
        response = self._send("POST", ENDPOINT_V2_ROLEBINDINGS, request)
        data = _decode(response.body)
        try:
            binding = _role_binding_from_json(data.get("rolebinding"))
        except TypeError as exc:
            raise StyraError(f"could not unmarshal body: {exc}") from exc
        return CreateRoleBindingResponse(
            status_code=response.status_code, body=response.body, rolebinding=binding
        )

    def update_role_binding_subjects(
        self, role_binding_id: str, request: UpdateRoleBindingSubjectsRequest
    ) -> APIResponse:
        """Replace the subjects of a role binding."""
        return self._send(
            "POST", f"{ENDPOINT_V2_ROLEBINDINGS}/{role_binding_id}/subjects", request
        )

    def delete_role_binding_v2(self, role_binding_id: str) -> APIResponse:
        """Delete a role binding; a missing binding is not an error."""
        return self._send(
            "DELETE", f"{ENDPOINT_V2_ROLEBINDINGS}/{role_binding_id}", ok=(200, 404)
        )


def _same_subject(a: Subject, b: Subject) -> bool:
    if a.kind == SubjectKind.CLAIM:
        return (
            b.kind == a.kind
            and a.claim_config.identity_provider == b.claim_config.identity_provider
            and a.claim_config.key == b.claim_config.key
            and a.claim_config.value == b.claim_config.value
        )
    if a.kind == SubjectKind.USER:
        return b.kind == a.kind and a.id == b.id
    return False


def subjects_are_equal(
    as_: list[Subject] | None, bs: list[Subject] | None
) -> bool:
    """Tell whether two lists hold the same subjects, in any order."""
    as_ = as_ or []
    bs = bs or []
    if len(as_) != len(bs):
        return False
    return all(any(_same_subject(a, b) for b in bs) for a in as_)