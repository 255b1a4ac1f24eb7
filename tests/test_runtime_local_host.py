import base64
import gc
import json
import weakref

import httpx
import pytest

from vtxplugin.config.schema import LocalHostSettings
from vtxplugin.core.errors import HostCallError, Internal
from vtxplugin.core.types import HttpClientRequest, HttpRequest, Manifest
from vtxplugin.host import http_client, stream
from vtxplugin.host.binding import bind_host
from vtxplugin.host.http import ResponseBuilder
from vtxplugin.plugin import VtxPlugin, export_plugin
from vtxplugin.runtime.buffers import FileBuffer, PipeBuffer
from vtxplugin.runtime.local_host import LocalHost


def test_http_request_goes_through_httpx():
    seen = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["auth"] = request.headers.get("x-token")
        return httpx.Response(200, json={"ok": True}, headers={"x-trace": "t1"})

    with LocalHost(http_transport=httpx.MockTransport(_handler)) as host, bind_host(host):
        res = http_client.get("https://example.test/ping", headers=[("X-Token", "abc")])
        assert res.status == 200
        assert ("x-trace", "t1") in res.headers
        assert json.loads(stream.read_all(res.body)) == {"ok": True}
    assert seen == {"method": "GET", "auth": "abc"}


def test_http_request_sends_body():
    captured = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = request.content
        return httpx.Response(204)

    with LocalHost(http_transport=httpx.MockTransport(_handler)) as host, bind_host(host):
        res = http_client.request(HttpClientRequest(method="post", url="https://example.test/x", body=b"data"))
    assert res.status == 204
    assert captured["body"] == b"data"


def test_http_transport_failure_is_internal():
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with LocalHost(http_transport=httpx.MockTransport(_handler)) as host, bind_host(host):
        with pytest.raises(Internal):
            http_client.get("https://example.test/down")


def test_files_from_directory(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"alpha")
    (tmp_path / "sub").mkdir()
    with LocalHost(LocalHostSettings(files_dir=str(tmp_path))) as host:
        buf = host.open_file("a.txt")
        assert isinstance(buf, FileBuffer)
        assert stream.read_all(buf, chunk_size=2) == b"alpha"
        with pytest.raises(HostCallError):
            host.open_file("sub")


def test_register_dir_missing(tmp_path):
    with LocalHost() as host:
        assert host.register_dir(tmp_path / "nope") == 0


def test_blob_cells_are_base64():
    with LocalHost() as host:
        host.run_script("CREATE TABLE b (data BLOB); INSERT INTO b VALUES (x'0102');")
        rows = json.loads(host.sql_query_json("SELECT data FROM b", []))
    assert rows == [{"data": base64.b64encode(b"\x01\x02").decode("ascii")}]


def test_run_script_failure():
    with LocalHost() as host:
        with pytest.raises(HostCallError, match="migration failed"):
            host.run_script("CREATE TABLE broken (")


def test_event_log_is_bounded():
    with LocalHost(LocalHostSettings(event_log_limit=2)) as host:
        for i in range(3):
            host.publish_event("t", json.dumps({"i": i}))
        assert [e.payload["i"] for e in host.events] == [1, 2]


def test_pipe_buffer_splits_chunks():
    pipe = PipeBuffer([b"abcdef"])
    assert pipe.size() == 0
    assert pipe.read(0, 4) == b"abcd"
    assert pipe.read(0, 4) == b"ef"
    assert pipe.read(0, 4) == b""


def test_pipe_buffer_forwards_writes():
    sent = []
    pipe = PipeBuffer(on_write=lambda data: sent.append(data) or len(data))
    assert pipe.write(b"xyz") == 3
    assert sent == [b"xyz"]
    assert pipe.written == bytearray()


class _EchoPlugin(VtxPlugin):
    def get_manifest(self):
        return Manifest(id="echo", name="Echo")

    def handle(self, request):
        return ResponseBuilder.json({"path": request.path})


def test_handles_are_not_kept_after_the_call(local_host):
    local_host.register_file("f1", b"data")
    guest = export_plugin(_EchoPlugin)
    bodies = []
    for i in range(50):
        res = guest.handle(local_host, HttpRequest(method="GET", path=f"/{i}"))
        bodies.append(weakref.ref(res.body))
        del res
    opened = weakref.ref(local_host.open_file("f1"))
    gc.collect()
    assert all(ref() is None for ref in bodies)
    assert opened() is None
