"""Invitations in the Styra API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .transport import APIResponse, BaseClient

ENDPOINT_V1_INVITATIONS = "/v1/invitations"


@dataclass
class CreateInvitationRequest:
    """Request body for inviting a user."""

    user_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"user_id": self.user_id}


class InvitationsAPI(BaseClient):
    """Calls to the /v1/invitations endpoint."""

    def create_invitation(self, email: bool, name: str) -> APIResponse:
        """Invite the user ``name``, optionally sending an e-mail."""
        flag = "true" if email else "false"
        return self._send(
            "POST",
            f"{ENDPOINT_V1_INVITATIONS}?email={flag}",
            CreateInvitationRequest(user_id=name),
        )