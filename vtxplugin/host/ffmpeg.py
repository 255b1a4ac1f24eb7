"""Host-side transcoding tasks."""

from __future__ import annotations

from collections.abc import Iterable

from vtxplugin.core.contracts import Buffer
from vtxplugin.core.errors import HostCallError, VtxError
from vtxplugin.core.types import FfmpegOption, HttpResponse, TranscodeProfile

from .binding import current_host

PIPE_INPUT = "pipe:0"


class FfmpegTask:
    """Builder for one host-side ffmpeg run.

    The host owns the binary and the profiles; the plugin only names a
    profile, an input and extra options. Example::

        FfmpegTask("mini", video_id).seek("10", "30").execute()
    """

    def __init__(self, profile: str, input_id: str):
        self.profile = profile
        self.input_id = input_id
        self.options: list[FfmpegOption] = []

    @classmethod
    def new_pipe(cls, profile: str) -> FfmpegTask:
        """Task reading its input from stdin; write to the returned buffer to feed it."""
        return cls(profile, PIPE_INPUT)

    def option(self, key: str, value: str) -> FfmpegTask:
        """Key/value option (`-key=value`)."""
        self.options.append(FfmpegOption(key=key, value=value))
        return self

    def flag(self, key: str) -> FfmpegTask:
        """Flag option (`-key`)."""
        self.options.append(FfmpegOption(key=key, value=None))
        return self

    def extend(self, options: Iterable[tuple[str, str]]) -> FfmpegTask:
        for key, value in options:
            self.option(key, value)
        return self

    def format(self, fmt: str) -> FfmpegTask:
        return self.option("f", fmt)

    def seek(self, start: str, duration: str | None = None) -> FfmpegTask:
        self.option("ss", start)
        if duration is not None:
            self.option("t", duration)
        return self

    def to_params(self) -> TranscodeProfile:
        return TranscodeProfile(profile=self.profile, input_id=self.input_id, options=list(self.options))

    def execute_buffer(self) -> Buffer:
        """Start the process and return its stdout pipe."""
        try:
            return current_host().ffmpeg_execute(self.to_params())
        except HostCallError as exc:
            raise VtxError.from_host_message(exc.message) from exc

    def execute(self) -> HttpResponse:
        """Start the process and respond 200 with stdout streamed as the body."""
        return HttpResponse(status=200, body=self.execute_buffer())
