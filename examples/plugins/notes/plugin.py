"""Example plugin: a small notes service on top of the host database."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from vtxplugin import (
    AuthRequest,
    FfmpegTask,
    Manifest,
    NotFound,
    PermissionDenied,
    ResponseBuilder,
    UserBuilder,
    VtxPlugin,
    export_plugin,
)
from vtxplugin.host import context, db, event_bus, events, stream

DEMO_TOKEN = "demo-token"


class NoteIn(BaseModel):
    title: str
    body: str = ""


class NotesPlugin(VtxPlugin):
    def get_manifest(self) -> Manifest:
        return Manifest(
            id="notes",
            name="Notes",
            version="0.1.0",
            description="Stores short notes per user",
            entrypoint="/notes",
            capabilities=["db", "events"],
        )

    def get_migrations(self) -> list[str]:
        return [
            "CREATE TABLE IF NOT EXISTS notes (id INTEGER PRIMARY KEY, title TEXT NOT NULL, body TEXT NOT NULL)",
            "ALTER TABLE notes ADD COLUMN owner TEXT",
        ]

    def get_resources(self) -> list[str]:
        return ["static/index.html"]

    def handle(self, request):
        if request.path == "/notes" and request.method == "GET":
            return ResponseBuilder.json(db.query("SELECT id, title, body FROM notes ORDER BY id"))
        if request.path == "/notes" and request.method == "POST":
            if request.body is None:
                return ResponseBuilder.status(400)
            note = stream.read_json(request.body, model=NoteIn)
            user = context.current_user()
            db.execute(
                "INSERT INTO notes (title, body, owner) VALUES (?, ?, ?)",
                [note.title, note.body, user.user_id if user else None],
            )
            event_bus.publish_json("notes.created", {"title": note.title})
            return ResponseBuilder.json({"created": note.title}, status=201)
        if request.path.startswith("/notes/"):
            rows = db.query("SELECT id, title, body FROM notes WHERE id = ?", [int(request.path.rsplit("/", 1)[1])])
            if not rows:
                raise NotFound(f"note {request.path.rsplit('/', 1)[1]}")
            return ResponseBuilder.json(rows[0])
        if request.path == "/admin":
            if not context.is_in_group(context.current_user(), "admin"):
                raise PermissionDenied("admins only")
            return ResponseBuilder.text("welcome")
        if request.path.startswith("/files/"):
            return ResponseBuilder.file(request.path.rsplit("/", 1)[1])
        if request.path.startswith("/preview/"):
            return FfmpegTask("mini", request.path.rsplit("/", 1)[1]).seek("0", "5").format("mp4").execute()
        return ResponseBuilder.not_found()

    def handle_event(self, event) -> None:
        if event.topic != "notes.created":
            return
        payload: dict[str, Any] = events.payload_json(event)
        event_bus.publish_json("notes.indexed", {"title": payload.get("title", "")})

    def authenticate(self, headers):
        token = AuthRequest(headers).require_bearer_token()
        if token != DEMO_TOKEN:
            raise PermissionDenied("unknown token")
        return UserBuilder("u-1", "demo").group("admin").meta("plan", "free").build()


plugin = export_plugin(NotesPlugin)
