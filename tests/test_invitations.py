import httpx
import pytest

from styraclient.http_error import HTTPError
from styraclient.invitations import CreateInvitationRequest, InvitationsAPI

INVITE_BODY = '{"request_id": "id", "result": {"url": "url"}}'


@pytest.mark.parametrize(
    "email, status, body",
    [(False, 200, INVITE_BODY), (True, 200, INVITE_BODY), (False, 500, "")],
)
def test_create_invitation(email, status, body):
    seen = []
    transport = httpx.MockTransport(
        lambda request: seen.append(request)
        or httpx.Response(status, content=body.encode())
    )
    api = InvitationsAPI("http://test.com", "token", httpx.Client(transport=transport))
    if status == 200:
        assert api.create_invitation(email, "name").status_code == 200
    else:
        with pytest.raises(HTTPError) as info:
            api.create_invitation(email, "name")
        assert info.value.status_code == status
    sent = seen[0]
    flag = "true" if email else "false"
    assert sent.method == "POST"
    assert str(sent.url) == f"http://test.com/v1/invitations?email={flag}"
    assert sent.content == b'{"user_id":"name"}\n'


def test_request_to_dict():
    assert CreateInvitationRequest(user_id="name").to_dict() == {"user_id": "name"}