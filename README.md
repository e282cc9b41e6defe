# styraclient

A small, synchronous client for the Styra DAS HTTP APIs, built on `httpx`.
It covers:

- systems: get, create, update, delete, and verifying a git source-control configuration
- datasources: get, upsert and delete
- role bindings (v2 authz API): list, create, update subjects and delete
- secrets: create or update
- users: look up
- invitations: create
- the OPA configuration asset of a system

Every request is sent as JSON with an `Authorization: Bearer <token>` header.

## Installation

```
pip install styraclient
```

To run the test suite, install the `test` extra and run pytest:

```
pip install "styraclient[test]"
pytest
```

## Creating a client

`styraclient.client.create_client(url, token)` returns a
`styraclient.client.Client`, which combines every API call below. The client
is a context manager; leaving the `with` block closes the HTTP connections it
opened.

```python
from styraclient.client import create_client

with create_client("https://tenant.example.com", "token") as client:
    response = client.get_system("my-system-id")
    print(response.status_code, response.system_config.name)
```

You can also pass your own `httpx.Client` with
`Client(url, token, http_client)`. A client passed in this way is not closed
by `close()`; closing it is left to you.

## Errors

All errors derive from `styraclient.http_error.StyraError`.

When the API answers with a status code a call does not accept, the call
raises `styraclient.http_error.HTTPError`, which has `status_code`, `body`
(the response text) and `message` (taken from a `message` field in the body,
when there is one). If the error body cannot be decoded at all, a plain
`StyraError` is raised instead. Network failures, bodies that are not valid
JSON where JSON is expected, and request bodies that cannot be encoded are
also reported as `StyraError`.

```python
from styraclient.http_error import HTTPError, StyraError

try:
    client.get_system("missing")
except HTTPError as exc:
    print("Styra said", exc.status_code, exc.message)
except StyraError as exc:
    print("request failed:", exc)
```

Calls that only return a status code and body give back a
`styraclient.transport.APIResponse` with `status_code` and `body` (bytes).

## Systems (`styraclient.systems`)

- `get_system(system_id)`, `create_system(request)` and
  `update_system(system_id, request)` take and return `SystemConfig` objects;
  the result is a `SystemResponse` with `status_code`, `body` and
  `system_config`.
- `delete_system(system_id)` treats a 404 as success.
- `verify_git_configuration(request)` takes a `VerifyGitConfigRequest`.

```python
from styraclient.systems import SystemConfig

with create_client("https://tenant.example.com", "token") as client:
    created = client.create_system(SystemConfig(name="mysystem", type="custom"))
    print(created.system_config.id)
    client.delete_system(created.system_config.id)
```

`decision_mappings_equals(dms1, dms2)` compares two dictionaries of
`DecisionMapping` objects while ignoring the order of their columns. Two
`None` values are equal; `None` and a dictionary are not.

## Datasources (`styraclient.datasources`)

- `get_datasource(datasource_id)` returns a `GetDatasourceResponse` whose
  `datasource_config` is a `DatasourceConfig`.
- `upsert_datasource(datasource_id, request)` takes an
  `UpsertDatasourceRequest`.
- `delete_datasource(datasource_id)` treats a 404 as success.

```python
with create_client("https://tenant.example.com", "token") as client:
    result = client.get_datasource("global/my-library")
    print(result.datasource_config.url)
```

## Role bindings (`styraclient.authz`)

- `list_role_bindings_v2(params)` takes a `ListRoleBindingsV2Params`; empty
  fields are left out of the query string. The result has `rolebindings`, a
  list of `RoleBindingConfig`.
- `create_role_binding(request)` takes a `CreateRoleBindingRequest` and
  returns a `CreateRoleBindingResponse` with `rolebinding`.
- `update_role_binding_subjects(role_binding_id, request)` takes an
  `UpdateRoleBindingSubjectsRequest`.
- `delete_role_binding_v2(role_binding_id)` treats a 404 as success.

The enums `Role`, `RoleBindingKind` and `SubjectKind` hold the known values.
`subjects_are_equal(as_, bs)` tells whether two lists of `Subject` hold the
same users (compared by id) and claims (compared by identity provider, key
and value), in any order.

```python
from styraclient.authz import (
    ClaimConfig, CreateRoleBindingRequest, ResourceFilter, Role,
    RoleBindingKind, Subject, SubjectKind,
)

request = CreateRoleBindingRequest(
    resource_filter=ResourceFilter(id="my-system-id", kind=RoleBindingKind.SYSTEM),
    role_id=Role.SYSTEM_VIEWER,
    subjects=[
        Subject(id="alice@example.com", kind=SubjectKind.USER),
        Subject(kind=SubjectKind.CLAIM,
                claim_config=ClaimConfig(key="groups", value="viewers")),
    ],
)
with create_client("https://tenant.example.com", "token") as client:
    client.create_role_binding(request)
```

## Secrets, users and invitations

- `create_update_secret(secret_id, request)` takes a
  `styraclient.secrets.CreateUpdateSecretsRequest`.
- `get_user(name)` returns the response for a 200 or a 404, so a missing user
  can be detected from `status_code`.
- `create_invitation(email, name)` invites the user `name`; `email` says
  whether Styra should send an e-mail.

## OPA configuration (`styraclient.opaconfig`)

`get_opa_config(system_id)` reads the system's opa-config asset and returns an
`OPAConfig` with `host_url` and `token` of the first service, and
`system_id` and `system_type` from its labels. A configuration without any
services raises `StyraError`.

```python
with create_client("https://tenant.example.com", "token") as client:
    opa = client.get_opa_config("my-system-id")
    print(opa.host_url, opa.system_id, opa.system_type)
```

## What this package does not do

It is a library only: there is no command-line tool, no asynchronous client,
and no retrying of failed requests. It does not keep any state between calls
and does not reconcile systems or role bindings on its own; the comparison
helpers are there for code that does.