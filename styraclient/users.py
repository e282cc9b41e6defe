"""Users in the Styra API."""

from __future__ import annotations

from .transport import APIResponse, BaseClient

ENDPOINT_V1_USERS = "/v1/users"


class UsersAPI(BaseClient):
    """Calls to the /v1/users endpoints."""

    def get_user(self, name: str) -> APIResponse:
        """Look up a user; a missing user is returned with status 404."""
        return self._send("GET", f"{ENDPOINT_V1_USERS}/{name}", ok=(200, 404))