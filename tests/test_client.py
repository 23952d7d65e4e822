"""Tests for UnionCloudClient wired with the real pipeline.

Wire-level behaviour goes through ``httpx.MockTransport``; tests that must
prove no network call happened use a ``MagicMock`` transport spy instead.
"""

import hashlib
import json
from unittest.mock import MagicMock

import httpx
import pytest

from unioncloud.restapi import (
    ErrorKind,
    Failure,
    Success,
    Transport,
    UnionCloudClient,
    errors,
)

T0 = 1_700_000_000
HOST = "union.example.org"


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeService:
    """Records requests and replies with queued responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def reply(self, payload, status_code: int = 200, headers: dict | None = None):
        self.responses.append(
            httpx.Response(status_code, headers=headers, content=json.dumps(payload)),
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def client(clock: FakeClock, service: FakeService) -> UnionCloudClient:
    transport = Transport(
        http_client=httpx.Client(transport=httpx.MockTransport(service)),
    )
    return UnionCloudClient(HOST, clock=clock, transport=transport)


@pytest.fixture
def authed_client(client: UnionCloudClient) -> UnionCloudClient:
    client.set_auth_token("tok-abc", T0 + 3600)
    return client


@pytest.fixture
def spy() -> MagicMock:
    return MagicMock(spec=Transport)


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------


def test_authenticate_stores_token_and_expiry(
    client: UnionCloudClient,
    service: FakeService,
    clock: FakeClock,
):
    service.reply(
        {"result": "SUCCESS", "response": {"auth_token": "abc", "expires": 3600}},
    )

    expires_at = client.authenticate("me@union.example", "pw", "app-1", "app-pw")

    assert expires_at == T0 + 3600
    snapshot = client.get_auth_token()
    assert snapshot.token == "abc"
    assert snapshot.expires_at == T0 + 3600

    clock.now = T0 + 10
    assert client.get_auth_token().time_left == 3590


def test_authenticate_sends_signed_payload(
    client: UnionCloudClient,
    service: FakeService,
):
    service.reply(
        {"result": "SUCCESS", "response": {"auth_token": "abc", "expires": 60}},
    )

    client.authenticate("me@union.example", "pw", "app-1", "app-pw")

    request = service.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/authenticate"
    assert "auth-token" not in request.headers
    expected_hash = hashlib.sha256(
        f"me@union.examplepwapp-1{T0}app-pw".encode(),
    ).hexdigest()
    assert service.last_body == {
        "email": "me@union.example",
        "password": "pw",
        "app_id": "app-1",
        "date_stamp": str(T0),
        "hash": expected_hash,
    }


def test_authenticate_works_without_previous_token(
    client: UnionCloudClient,
    service: FakeService,
):
    assert not client.is_authenticated()
    service.reply(
        {"result": "SUCCESS", "response": {"auth_token": "abc", "expires": 60}},
    )

    client.authenticate("a", "b", "c", "d")

    assert client.is_authenticated()


def test_authenticate_without_success_returns_none(
    client: UnionCloudClient,
    service: FakeService,
):
    """A body without result == SUCCESS leaves the token untouched."""
    client.set_auth_token("old", T0 + 5)
    service.reply({"result": "PENDING"})

    assert client.authenticate("a", "b", "c", "d") is None
    assert client.get_auth_token().token == "old"


def test_authenticate_rejected_raises_service_error(
    client: UnionCloudClient,
    service: FakeService,
):
    service.reply(
        {"errors": {"error_message": "Invalid", "error_code": 401}},
        status_code=401,
    )

    with pytest.raises(errors.ServiceError) as exc_info:
        client.authenticate("a", "b", "c", "d")

    assert exc_info.value.message == "Invalid"
    assert exc_info.value.code == 401
    assert not client.is_authenticated()


def test_authenticate_success_without_token_raises_decode_error(
    client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"result": "SUCCESS", "response": {"expires": 60}})

    with pytest.raises(errors.DecodeError):
        client.authenticate("a", "b", "c", "d")


def test_authenticate_in_debug_mode(client: UnionCloudClient, service: FakeService):
    client.set_options({"include_debug_info": True})
    service.reply(
        {"result": "SUCCESS", "response": {"auth_token": "abc", "expires": 60}},
    )

    assert client.authenticate("a", "b", "c", "d") == T0 + 60


# ---------------------------------------------------------------------------
# Token expiry guard
# ---------------------------------------------------------------------------


def test_call_without_token_makes_no_network_call(clock: FakeClock, spy: MagicMock):
    client = UnionCloudClient(HOST, clock=clock, transport=spy)

    with pytest.raises(errors.AuthExpiredError) as exc_info:
        client.users()

    assert exc_info.value.code == 401
    spy.send.assert_not_called()
    assert spy.method_calls == []


def test_call_with_expired_token_makes_no_network_call(
    clock: FakeClock,
    spy: MagicMock,
):
    client = UnionCloudClient(HOST, clock=clock, transport=spy)
    client.set_auth_token("tok", T0 + 60)
    clock.now = T0 + 60

    with pytest.raises(errors.AuthExpiredError):
        client.user_get(42)

    spy.send.assert_not_called()


def test_token_expiry_is_not_refreshed_automatically(
    authed_client: UnionCloudClient,
    service: FakeService,
    clock: FakeClock,
):
    service.reply({"data": []})
    authed_client.users()

    clock.now = T0 + 3600
    with pytest.raises(errors.AuthExpiredError):
        authed_client.users()

    assert len(service.requests) == 1


def test_clients_do_not_share_token_state(clock: FakeClock, spy: MagicMock):
    first = UnionCloudClient(HOST, clock=clock, transport=spy)
    second = UnionCloudClient(HOST, clock=clock, transport=spy)

    first.set_auth_token("tok", T0 + 60)

    assert first.is_authenticated()
    assert not second.is_authenticated()


# ---------------------------------------------------------------------------
# Resource calls
# ---------------------------------------------------------------------------


def test_resource_call_sends_expected_request(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"data": [{"uid": 1}]})

    response = authed_client.user_get_group_memberships(7, page=2)

    request = service.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/users/7/user_group_memberships"
    assert request.url.params["mode"] == "standard"
    assert request.url.params["page"] == "2"
    assert request.headers["auth-token"] == "tok-abc"
    assert request.headers["accept-version"] == "v1"
    assert request.headers["content-type"] == "application/json"
    assert response.data == {"data": [{"uid": 1}]}


def test_resource_call_sends_json_body(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"data": {"ug_id": 3}})

    authed_client.usergroup_create("Chess", "Club for chess players", folder_id=4)

    assert service.requests[0].method == "POST"
    assert service.last_body == {
        "data": {
            "ug_name": "Chess",
            "ug_description": "Club for chess players",
            "folder_id": 4,
        },
    }


def test_call_by_operation_name(authed_client: UnionCloudClient, service: FakeService):
    service.reply({"data": []})

    authed_client.call("event_attendees", event_id=9)

    assert service.requests[0].url.path == "/api/events/9/attendees"


def test_call_unknown_operation_raises(authed_client: UnionCloudClient):
    with pytest.raises(ValueError, match="Unknown operation"):
        authed_client.call("teleport")


def test_service_error_on_resource_call(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"error": {"message": "Not found", "code": 404}}, status_code=404)

    with pytest.raises(errors.ServiceError) as exc_info:
        authed_client.event_get(123)

    assert exc_info.value.message == "Not found"
    assert exc_info.value.code == 404


def test_transport_failure_on_resource_call(clock: FakeClock):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    transport = Transport(
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    client = UnionCloudClient(HOST, clock=clock, transport=transport)
    client.set_auth_token("tok", T0 + 60)

    with pytest.raises(errors.TransportError):
        client.groups()


def test_corrupt_response_encoding_is_classified(clock: FakeClock):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            content=b"not gzip",
        )

    transport = Transport(
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    client = UnionCloudClient(HOST, clock=clock, transport=transport)
    client.set_auth_token("tok", T0 + 60)

    result = client.try_call("users")

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.DECODE


def test_null_file_path_is_classified(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"file_path": None})

    with pytest.raises(errors.DecodeError, match="file_path"):
        authed_client.election_voters(1)


def test_overflowing_rate_limit_header_does_not_fail_call(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({}, headers={"X-RateLimit-Remaining": "1e999"})

    response = authed_client.users()

    assert response.data == {}
    assert response.rate_limit.remaining == 0


def test_pagination_and_rate_limit_on_response(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply(
        {"data": []},
        headers={
            "total_pages": "5",
            "records_per_page": "20",
            "total_records": "97",
            "X-RateLimit-Remaining": "99",
            "X-RateLimit-Limit": "100",
            "X-RateLimit-Reset": "60",
        },
    )

    response = authed_client.users(page=2)

    assert response.pagination.model_dump() == {
        "pages": {"current": 2, "total": 5},
        "records": {"per_page": 20, "total": 97},
    }
    assert response.rate_limit.remaining == 99


# ---------------------------------------------------------------------------
# Large-payload references
# ---------------------------------------------------------------------------


def test_election_voters_resolves_local_file(
    authed_client: UnionCloudClient,
    service: FakeService,
    tmp_path,
):
    side_file = tmp_path / "voters.json"
    side_file.write_text('{"a":1}')
    service.reply({"file_path": str(side_file)})

    response = authed_client.election_voters(11)

    assert response.data == {"a": 1}
    assert service.requests[0].url.params["voter_type"] == "actual"


def test_election_voters_resolves_remote_file(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"file_path": "https://files.example.org/voters.json"})
    service.reply([{"uid": 1}, {"uid": 2}])

    response = authed_client.election_voters_demographics(11)

    assert response.data == [{"uid": 1}, {"uid": 2}]
    assert service.requests[1].url.host == "files.example.org"
    assert service.requests[1].method == "GET"


# ---------------------------------------------------------------------------
# Options and debug mode
# ---------------------------------------------------------------------------


def test_options_merge_additively(clock: FakeClock, spy: MagicMock):
    client = UnionCloudClient(HOST, {"locale": "en"}, clock=clock, transport=spy)

    client.set_options({"include_debug_info": True})

    assert client.get_options() == {"include_debug_info": True, "locale": "en"}


def test_debug_mode_merges_trace(authed_client: UnionCloudClient, service: FakeService):
    authed_client.set_options({"include_debug_info": True})
    service.reply(
        {"data": [], "request": "mine"},
        headers={"X-Request-Id": "req-9", "Status": "200 OK", "X-Runtime": "0.5"},
    )

    response = authed_client.users()

    assert response.data["request"] == "mine"
    assert response.trace.id == "req-9"
    assert response.trace.token == "tok-abc"
    assert response.trace.parameters == {"mode": "standard", "page": 1}


def test_host_can_be_changed(authed_client: UnionCloudClient, service: FakeService):
    authed_client.set_host("other.example.org")
    service.reply({})

    authed_client.eventtypes_get()

    assert authed_client.get_host() == "other.example.org"
    assert service.requests[0].url.host == "other.example.org"


# ---------------------------------------------------------------------------
# Tagged results
# ---------------------------------------------------------------------------


def test_try_call_success(authed_client: UnionCloudClient, service: FakeService):
    service.reply({"data": [1]})

    result = authed_client.try_call("users")

    assert isinstance(result, Success)
    assert result.unwrap().data == {"data": [1]}


def test_try_call_failure_can_be_matched(clock: FakeClock, spy: MagicMock):
    client = UnionCloudClient(HOST, clock=clock, transport=spy)

    result = client.try_call("users")

    match result:
        case Failure(error) if error.kind is ErrorKind.AUTH_EXPIRED:
            matched = True
        case _:
            matched = False
    assert matched
    assert result.code == 401
    with pytest.raises(errors.AuthExpiredError):
        result.unwrap()


def test_try_call_classifies_service_error(
    authed_client: UnionCloudClient,
    service: FakeService,
):
    service.reply({"errors": {"error_message": "Invalid", "error_code": 401}})

    result = authed_client.try_call("user_get", uid=1)

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.SERVICE
    assert result.message == "Invalid"
    assert result.code == 401


def test_try_call_does_not_swallow_argument_errors(authed_client: UnionCloudClient):
    with pytest.raises(TypeError):
        authed_client.try_call("user_get")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def test_context_manager_closes_transport(clock: FakeClock, spy: MagicMock):
    with UnionCloudClient(HOST, clock=clock, transport=spy):
        pass
    spy.close.assert_called_once()
