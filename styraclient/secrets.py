"""Secrets in the Styra API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .transport import APIResponse, BaseClient

ENDPOINT_V1_SECRETS = "/v1/secrets"


@dataclass
class CreateUpdateSecretsRequest:
    """Request body for creating or updating a secret."""

    description: str = ""
    name: str = ""
    secret: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "name": self.name,
            "secret": self.secret,
        }


class SecretsAPI(BaseClient):
    """Calls to the /v1/secrets endpoints."""

    def create_update_secret(
        self, secret_id: str, request: CreateUpdateSecretsRequest
    ) -> APIResponse:
        """Create the secret ``secret_id`` or replace its value."""
        return self._send("PUT", f"{ENDPOINT_V1_SECRETS}/{secret_id}", request)