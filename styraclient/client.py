"""A client for the Styra APIs."""

from __future__ import annotations

from .authz import AuthzAPI
from .datasources import DatasourcesAPI
from .invitations import InvitationsAPI
from .opaconfig import OPAConfigAPI
from .secrets import SecretsAPI
from .systems import SystemsAPI
from .users import UsersAPI


class Client(
    AuthzAPI,
    UsersAPI,
    InvitationsAPI,
    SecretsAPI,
    DatasourcesAPI,
    SystemsAPI,
    OPAConfigAPI,
):
    """Client for every supported Styra API endpoint."""


def create_client(url: str, token: str) -> Client:
    """Create a client for the Styra API at ``url`` using ``token``."""
    return Client(url, token)