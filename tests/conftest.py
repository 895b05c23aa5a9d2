from __future__ import annotations

import os

os.environ.setdefault("KIVY_NO_ARGS", "1")

import pytest

from media_backend import AudioHandle, MediaBackend, VideoHandle
from playback import MediaTracks


class FakeEvent:
    def __init__(self, clock: "FakeClock", callback, interval: float) -> None:
        self.clock = clock
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Stands in for kivy.clock.Clock; time only moves on advance()."""

    def __init__(self) -> None:
        self.t = 0.0
        self.events: list[FakeEvent] = []

    def schedule_interval(self, callback, interval: float) -> FakeEvent:
        ev = FakeEvent(self, callback, interval)
        ev.next_at = self.t + interval
        self.events.append(ev)
        return ev

    def active(self) -> list[FakeEvent]:
        return [ev for ev in self.events if not ev.cancelled]

    def advance(self, dt: float) -> None:
        end = self.t + dt
        while True:
            due = [ev for ev in self.active() if ev.next_at <= end]
            if not due:
                break
            ev = min(due, key=lambda e: e.next_at)
            self.t = ev.next_at
            ev.next_at += ev.interval
            ev.callback(ev.interval)
        self.t = end


class FakeAudio(AudioHandle):
    def __init__(self, source, duration: int = 180000) -> None:
        self.source = source
        self.duration = duration
        self.position = 0
        self.playing = False
        self.calls: list[str] = []

    def start(self):
        self.calls.append("start")
        self.playing = True

    def pause(self):
        self.calls.append("pause")
        self.playing = False

    def reset(self):
        self.calls.append("reset")
        self.playing = False
        self.position = 0

    def release(self):
        self.calls.append("release")
        self.playing = False

    def is_playing(self) -> bool:
        return self.playing

    def position_ms(self) -> int:
        return self.position

    def duration_ms(self) -> int:
        return self.duration

    def seek_to(self, ms: int):
        self.calls.append(f"seek:{ms}")
        self.position = ms


class FakeVideo(VideoHandle):
    def __init__(self, source) -> None:
        self.source = source
        self.calls: list[str] = []

    def start(self):
        self.calls.append("start")

    def reset(self):
        self.calls.append("reset")

    def release(self):
        self.calls.append("release")


class FakeBackend(MediaBackend):
    def __init__(self) -> None:
        self.tracks: dict[str, MediaTracks] = {}
        self.audio: list[FakeAudio] = []
        self.video: list[FakeVideo] = []
        self.picks: list[tuple[str, object]] = []
        self.inspect_error: Exception | None = None
        self.open_error: Exception | None = None

    def pick_file(self, mime, callback):
        self.picks.append((mime, callback))

    def inspect(self, source):
        if self.inspect_error is not None:
            raise self.inspect_error
        return self.tracks[source]

    def open_audio(self, source):
        if self.open_error is not None:
            raise self.open_error
        handle = FakeAudio(source)
        self.audio.append(handle)
        return handle

    def open_video(self, source):
        if self.open_error is not None:
            raise self.open_error
        handle = FakeVideo(source)
        self.video.append(handle)
        return handle


class FakeView:
    def __init__(self) -> None:
        self.layout = None
        self.playing = None
        self.seek_max = None
        self.seek_pos = None
        self.elapsed = None
        self.total = None
        self.errors: list[str] = []

    def apply_layout(self, layout):
        self.layout = layout

    def set_playing(self, playing):
        self.playing = playing

    def set_seek_range(self, max_ms):
        self.seek_max = max_ms

    def set_seek_position(self, ms):
        self.seek_pos = ms

    def set_elapsed_text(self, text):
        self.elapsed = text

    def set_total_text(self, text):
        self.total = text

    def show_error(self, message):
        self.errors.append(message)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    b = FakeBackend()
    b.tracks = {
        "content://song.mp3": MediaTracks(has_video=False, has_audio=True),
        "content://clip.mp4": MediaTracks(has_video=True, has_audio=True),
        "content://silent.mp4": MediaTracks(has_video=True, has_audio=False),
        "content://notes.txt": MediaTracks(has_video=False, has_audio=False),
    }
    return b


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def controller(view, backend, clock):
    from player_controller import PlayerController

    return PlayerController(view, backend, clock)
