import httpx
import pytest

from styraclient.datasources import (
    DatasourceConfig,
    DatasourcesAPI,
    GetDatasourceResponse,
    UpsertDatasourceRequest,
)
from styraclient.http_error import HTTPError, StyraError

URL = "http://test.com/v1/datasources/"
UPSERT = UpsertDatasourceRequest(category="datasourceCategory")

HAPPY_BODY = """
{
      "result": {
          "category": "git/rego",
          "commit": "",
          "credentials": "libraries/global/test/git",
          "description": "",
          "enabled": true,
          "id": "global/test",
          "path": "",
          "reference": "refs/heads/master",
          "type": "pull",
          "url": "https://test.com/test.git"
      }
}
"""


@pytest.fixture
def serve():
    seen = []

    def build(status, body=""):
        transport = httpx.MockTransport(
            lambda request: seen.append(request)
            or httpx.Response(status, content=body.encode())
        )
        return DatasourcesAPI("http://test.com", "token", httpx.Client(transport=transport))

    build.seen = seen
    return build


def test_get_datasource_happy_path(serve):
    res = serve(200, HAPPY_BODY).get_datasource("test")
    sent = serve.seen[0]
    assert (sent.method, str(sent.url)) == ("GET", URL + "test")
    assert sent.headers["Authorization"] == "Bearer token"
    assert isinstance(res, GetDatasourceResponse)
    assert res.status_code == 200
    assert res.datasource_config == DatasourceConfig(
        category="git/rego",
        credentials="libraries/global/test/git",
        enabled=True,
        id="global/test",
        reference="refs/heads/master",
        type="pull",
        url="https://test.com/test.git",
    )


def test_get_datasource_null_result(serve):
    assert serve(200, '{"result": null}').get_datasource("test").datasource_config is None


@pytest.mark.parametrize("body", ["not json", '{"result": {"enabled": "yes"}}'])
def test_get_datasource_undecodable(serve, body):
    with pytest.raises(StyraError) as info:
        serve(200, body).get_datasource("test")
    assert not isinstance(info.value, HTTPError)


def test_get_datasource_cleans_path(serve):
    serve(200, "{}").get_datasource("global/../test")
    assert str(serve.seen[0].url) == URL + "test"


def test_upsert_datasource(serve):
    res = serve(200, "expected response from styra api").upsert_datasource(
        "datasourceID", UPSERT
    )
    sent = serve.seen[0]
    assert (sent.method, str(sent.url)) == ("PUT", URL + "datasourceID")
    assert sent.content == b'{"category":"datasourceCategory","enabled":false}\n'
    assert (res.status_code, res.body) == (200, b"expected response from styra api")


@pytest.mark.parametrize("status", [200, 404])
def test_delete_datasource(serve, status):
    res = serve(status, "expected response from styra api").delete_datasource(
        "datasourceID"
    )
    sent = serve.seen[0]
    assert (sent.method, sent.content) == ("DELETE", b"")
    assert str(sent.url) == URL + "datasourceID"
    assert (res.status_code, res.body) == (status, b"expected response from styra api")


@pytest.mark.parametrize(
    "call",
    [
        lambda api: api.get_datasource("test"),
        lambda api: api.upsert_datasource("datasourceID", UPSERT),
        lambda api: api.delete_datasource("datasourceID"),
    ],
)
def test_http_errors(serve, call):
    with pytest.raises(HTTPError) as info:
        call(serve(500))
    assert info.value.status_code == 500


@pytest.mark.parametrize(
    "value, expected",
    [
        (
            UpsertDatasourceRequest(
                category="git/rego", enabled=True, url="https://example.com/repo.git"
            ),
            {"category": "git/rego", "enabled": True, "url": "https://example.com/repo.git"},
        ),
        (
            DatasourceConfig(category="rest", id="global/x"),
            {"category": "rest", "id": "global/x"},
        ),
    ],
)
def test_to_dict_omits_empty(value, expected):
    assert value.to_dict() == expected