from __future__ import annotations

import json

import httpx
import pytest

from trello_client import RESOURCES, ApiError, AuthError, ClientConfig, InvalidArgument, NetworkError, TrelloClient
from trello_client.transport import Transport


class _FakeTransport:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict | None, object]] = []
        self.closed = False

    def request(self, method: str, path: str, *, query=None, data=None):
        self.calls.append((method, path, query, data))
        return {"ok": True}, "tx"

    def close(self) -> None:
        self.closed = True


def _make(**overrides) -> tuple[TrelloClient, _FakeTransport]:
    t = _FakeTransport()
    cfg = ClientConfig(key="K", token="T", **overrides)
    return TrelloClient(cfg, transport=t), t


def _mock_client(handler, **overrides) -> TrelloClient:
    cfg = ClientConfig(key="K", token="T", **overrides)
    return TrelloClient(cfg, transport=Transport(cfg, http_transport=httpx.MockTransport(handler)))


def test_root_path_uses_version() -> None:
    client, _ = _make()
    assert client.path == "/1"
    assert client.url == "https://api.trello.com/1"

    client, _ = _make(version="2", base_url="https://example.test/")
    assert client.path == "/2"
    assert client.url == "https://example.test/2"


@pytest.mark.parametrize(
    "name, segments, suffix",
    [
        ("boards", (), "boards"),
        ("boards", ("4d5ea62fd76a",), "boards/4d5ea62fd76a"),
        ("boards", ("abc", "lists"), "boards/abc/lists"),
        ("cards", ("abc", "1", "actions"), "cards/abc/1/actions"),
    ],
)
def test_resource_path_appends_segments(name, segments, suffix) -> None:
    client, _ = _make()
    child = client.resource(name, *segments)
    assert child.path == client.path + "/" + suffix


def test_resource_camelcases_paired_segments() -> None:
    client, _ = _make()
    assert client.resource("boards", "due_date", "x").path == "/1/boards/dueDate/x"

    plain, _ = _make(casing=None)
    assert plain.resource("boards", "due_date", "x").path == "/1/boards/due_date/x"


def test_resource_does_not_mutate_parent() -> None:
    client, _ = _make()
    a = client.resource("boards")
    b = a.resource("x")
    assert client.path == "/1"
    assert a.path == "/1/boards"
    assert b.path == "/1/boards/x"


def test_children_share_config_and_transport() -> None:
    client, t = _make()
    child = client.boards("abc").lists()
    assert child.config is client.config
    child.fetch()
    assert t.calls == [("GET", "/1/boards/abc/lists", None, None)]


def test_named_accessors_match_resource() -> None:
    client, _ = _make()
    for name in RESOURCES:
        accessor = getattr(client, name)
        assert accessor.__name__ == name
        assert accessor("abc").path == client.resource(name, "abc").path


def test_resource_rejects_malformed_segments() -> None:
    client, _ = _make()
    with pytest.raises(InvalidArgument):
        client.resource("boards", ("due_date",))
    with pytest.raises(InvalidArgument):
        client.resource("")


@pytest.mark.parametrize(
    "method, verb",
    [("create", "POST"), ("fetch", "GET"), ("update", "PUT"), ("delete", "DELETE")],
)
def test_convenience_wrappers_dispatch_verbs(method, verb) -> None:
    client, t = _make()
    result = getattr(client.cards("abc"), method)(query={"fields": "name"}, data={"name": "X"})
    assert result == {"ok": True}
    assert t.calls == [(verb, "/1/cards/abc", {"fields": "name"}, {"name": "X"})]


def test_action_defaults_to_get_and_upper_cases_verb() -> None:
    client, t = _make()
    client.boards().action()
    client.boards().action("patch")
    assert [c[0] for c in t.calls] == ["GET", "PATCH"]


def test_action_ignores_unknown_parameters() -> None:
    client, t = _make()
    client.boards().action("head", query={"a": "b"}, headers={"X": "1"}, timeout=3)
    assert t.calls == [("HEAD", "/1/boards", {"a": "b"}, None)]


def test_action_rejects_unknown_verb() -> None:
    client, t = _make()
    with pytest.raises(InvalidArgument):
        client.boards().action("BREW")
    assert t.calls == []


def test_send_returns_body_and_transaction() -> None:
    client, _ = _make()
    assert client.boards().send("GET") == ({"ok": True}, "tx")


def test_context_manager_closes_transport() -> None:
    client, t = _make()
    with client as c:
        c.boards().fetch()
    assert t.closed is True


def test_fetch_board_request_shape() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "4d5ea62fd76a"})

    client = _mock_client(handler)
    assert client.resource("boards", "4d5ea62fd76a").fetch() == {"id": "4d5ea62fd76a"}

    (req,) = seen
    assert req.method == "GET"
    assert str(req.url) == "https://api.trello.com/1/boards/4d5ea62fd76a?key=K&token=T"
    assert req.headers["Content-Type"] == "application/json"


def test_create_board_request_shape() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "new", "name": "X"})

    client = _mock_client(handler)
    assert client.resource("boards").create(data={"name": "X"}) == {"id": "new", "name": "X"}

    (req,) = seen
    assert req.method == "POST"
    assert str(req.url) == "https://api.trello.com/1/boards?key=K&token=T"
    assert json.loads(req.content) == {"name": "X"}


@pytest.mark.parametrize(
    "segments, encoded",
    [
        (("query", "bug #12"), "query/bug%20%2312"),
        (("a?key=evil",), "a%3Fkey%3Devil"),
        (("name", "two words"), "name/two%20words"),
    ],
)
def test_reserved_characters_reach_the_wire_encoded(segments, encoded) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = _mock_client(handler)
    child = client.resource("search", *segments)
    child.fetch()

    (req,) = seen
    assert child.path == "/1/search/" + encoded
    assert req.url.raw_path.decode("ascii") == child.path + "?key=K&token=T"
    assert dict(req.url.params) == {"key": "K", "token": "T"}
    assert req.url.fragment == ""


def test_router_passes_api_errors_through_unchanged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "board not found"})

    client = _mock_client(handler, fatal=True)
    with pytest.raises(ApiError) as exc:
        client.boards("x").fetch()

    assert type(exc.value) is ApiError
    assert exc.value.status_code == 404
    assert exc.value.body == {"message": "board not found"}
    assert str(exc.value) == "board not found"


def test_router_passes_auth_errors_through_unchanged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="invalid token")

    client = _mock_client(handler, fatal=True)
    with pytest.raises(AuthError) as exc:
        client.members("me").action()

    assert exc.value.status_code == 401
    assert exc.value.body == "invalid token"


def test_router_passes_network_errors_through_send() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _mock_client(handler)
    with pytest.raises(NetworkError, match="connection refused") as exc:
        client.cards("abc").send("PUT", data={"closed": True})

    assert isinstance(exc.value.__cause__, httpx.ConnectError)
