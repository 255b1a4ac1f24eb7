import base64

import pytest

from vtxplugin.core.errors import AuthDenied, DatabaseError, NotFound, PermissionDenied
from vtxplugin.core.types import Err, HttpRequest, Ok, UserContext, find_header
from vtxplugin.host.auth import AuthRequest, UserBuilder, auth_status_code, into_auth_result


def _basic(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


def test_header_lookup_is_case_insensitive_and_first_wins():
    req = AuthRequest([("X-Api-Key", "one"), ("x-api-key", "two")])
    assert req.header("x-api-key") == "one"
    assert req.header("X-API-KEY") == "one"
    assert req.header("missing") is None


def test_require_header_denies_with_401():
    with pytest.raises(AuthDenied) as exc_info:
        AuthRequest([]).require_header("X-Api-Key")
    assert exc_info.value.code == 401


def test_header_lookup_ignores_case_permutations():
    headers = [("Content-Type", "text/plain"), ("X-Request-Id", "r1")]
    req = AuthRequest(headers)
    for name in ("x-request-id", "X-REQUEST-ID", "x-ReQuEsT-iD"):
        assert req.header(name) == req.header(name.upper()) == "r1"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Bearer abc", "abc"),
        ("Bearer abc123", "abc123"),
        ("Token abc", None),
        ("bearer abc", "abc"),
        ("BEARER abc.def", "abc.def"),
        ("Basic xyz", None),
        ("Bearerabc", None),
    ],
)
def test_bearer_token(value, expected):
    assert AuthRequest([("Authorization", value)]).bearer_token() == expected


def test_bearer_token_without_header():
    assert AuthRequest([]).bearer_token() is None
    with pytest.raises(AuthDenied) as exc_info:
        AuthRequest([("Authorization", "Basic xyz")]).require_bearer_token()
    assert exc_info.value.code == 401


def test_basic_auth():
    req = AuthRequest([("authorization", _basic("alice:s3cret:x"))])
    assert req.basic_auth() == base64.b64encode(b"alice:s3cret:x").decode("ascii")
    assert req.basic_credentials() == ("alice", "s3cret:x")


@pytest.mark.parametrize("value", ["Basic !!!", _basic("no-colon"), "Bearer abc"])
def test_basic_credentials_rejects_malformed(value):
    assert AuthRequest([("Authorization", value)]).basic_credentials() is None


def test_user_builder_collects_groups_and_metadata():
    user = UserBuilder("u1", "alice").group("admin").group("staff").meta("plan", "pro").meta("quota", 3).build()
    assert user.user_id == "u1"
    assert user.username == "alice"
    assert user.groups == ["admin", "staff"]
    assert user.metadata_dict() == {"plan": "pro", "quota": 3}


def test_user_builder_drops_unserializable_metadata():
    builder = UserBuilder("u1", "alice").meta("ok", True).meta("bad", object()).meta("nan", float("nan"))
    user = builder.build()
    assert builder.dropped_keys == ["bad", "nan"]
    assert user.metadata_dict() == {"ok": True}


def test_user_builder_without_metadata():
    assert UserBuilder("u1", "alice").build().metadata == "{}"


@pytest.mark.parametrize(
    ("err", "code"),
    [
        (AuthDenied(401), 401),
        (AuthDenied(429), 429),
        (PermissionDenied("x"), 403),
        (NotFound("x"), 404),
        (DatabaseError("x"), 500),
    ],
)
def test_auth_status_code(err, code):
    assert auth_status_code(err) == code


def test_into_auth_result():
    user = UserContext(user_id="u1", username="alice")
    assert into_auth_result(lambda: user) == Ok(user)

    def _denied():
        raise PermissionDenied("revoked")

    def _crash():
        raise RuntimeError("boom")

    assert into_auth_result(_denied) == Err(403)
    assert into_auth_result(_crash) == Err(500)


def test_request_and_auth_lookups_agree():
    headers = [("X-Api-Key", "one"), ("x-api-key", "two"), ("Accept", "*/*")]
    request = HttpRequest(method="GET", path="/", headers=headers)
    for name in ("x-api-key", "ACCEPT", "missing"):
        assert request.header(name) == AuthRequest(headers).header(name) == find_header(headers, name)
