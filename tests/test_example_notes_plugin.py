import json

import pytest

from vtxplugin.core.types import CurrentUser, Err, HttpRequest, PluginEvent
from vtxplugin.host.stream import read_all
from vtxplugin.runtime.buffers import MemoryBuffer
from vtxplugin.runtime.loader import apply_migrations, load_plugin


@pytest.fixture
def notes(example_plugin_path, local_host):
    guest = load_plugin(str(example_plugin_path))
    apply_migrations(local_host, guest)
    return guest


def _post(path: str, payload) -> HttpRequest:
    return HttpRequest(method="POST", path=path, body=MemoryBuffer(json.dumps(payload).encode("utf-8")))


def _json(response):
    return json.loads(read_all(response.body))


def test_create_and_list_notes(notes, local_host):
    local_host.current_user = CurrentUser(user_id="u1", username="alice")
    res = notes.handle(local_host, _post("/notes", {"title": "first", "body": "hello"}))
    assert res.status == 201
    assert _json(res) == {"created": "first"}
    assert [e.topic for e in local_host.events] == ["notes.created"]

    listing = notes.handle(local_host, HttpRequest(method="GET", path="/notes"))
    assert _json(listing) == [{"id": 1, "title": "first", "body": "hello"}]
    assert _json(notes.handle(local_host, HttpRequest(method="GET", path="/notes/1")))["title"] == "first"


def test_bad_body_is_400(notes, local_host):
    res = notes.handle(local_host, _post("/notes", {"body": "no title"}))
    assert res.status == 400
    assert _json(res)["type"] == "SerializationError"


def test_missing_note_is_404(notes, local_host):
    res = notes.handle(local_host, HttpRequest(method="GET", path="/notes/99"))
    assert res.status == 404
    assert _json(res)["message"] == "note 99"


def test_admin_requires_group(notes, local_host):
    assert notes.handle(local_host, HttpRequest(method="GET", path="/admin")).status == 403
    local_host.current_user = CurrentUser(user_id="u1", username="alice", groups=["admin"])
    res = notes.handle(local_host, HttpRequest(method="GET", path="/admin"))
    assert res.status == 200
    assert read_all(res.body) == b"welcome"


def test_authenticate(notes, local_host):
    ok = notes.authenticate(local_host, [("Authorization", "Bearer demo-token")])
    assert ok.value.username == "demo"
    assert ok.value.groups == ["admin"]
    assert ok.value.metadata_dict() == {"plan": "free"}
    assert notes.authenticate(local_host, [("Authorization", "Bearer other")]) == Err(403)
    assert notes.authenticate(local_host, []) == Err(401)


def test_created_event_is_indexed(notes, local_host):
    event = PluginEvent(id="e1", topic="notes.created", source="test", payload='{"title": "first"}')
    assert notes.handle_event(local_host, event).is_ok
    assert [(e.topic, e.payload) for e in local_host.events] == [("notes.indexed", {"title": "first"})]
    bad = PluginEvent(id="e2", topic="notes.created", source="test", payload="oops")
    assert notes.handle_event(local_host, bad) == Err("Data serialization error: Expecting value: line 1 column 1 (char 0)")


def test_files_and_previews(notes, local_host):
    local_host.register_file("clip", b"raw")
    local_host.register_profile("mini", lambda params, source: [b"mp4:", read_all(source)])
    file_res = notes.handle(local_host, HttpRequest(method="GET", path="/files/clip"))
    assert read_all(file_res.body) == b"raw"
    preview = notes.handle(local_host, HttpRequest(method="GET", path="/preview/clip"))
    assert preview.status == 200
    assert read_all(preview.body) == b"mp4:raw"
    assert notes.handle(local_host, HttpRequest(method="GET", path="/files/nope")).status == 404
