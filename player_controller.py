# player_controller.py
from collections import namedtuple
from enum import Enum
from functools import partial

import app_config
from diag import log, vlog
from playback import (
    MediaError, MediaKind, PlaybackSession, PlaybackState,
    classify_media, format_time,
)


class ControlsLayout(Enum):
    NEUTRAL = "neutral"
    AUDIO = "audio"
    VIDEO = "video"


Selection = namedtuple("Selection", "source kind error")

MIME_FOR_KIND = {
    MediaKind.AUDIO: app_config.AUDIO_MIME,
    MediaKind.VIDEO: app_config.VIDEO_MIME,
}


class PlayerController:
    """Owns the audio and video sessions and keeps the screen controls in step.

    `view` must provide apply_layout, set_playing, set_seek_range,
    set_seek_position, set_elapsed_text, set_total_text and show_error.
    `clock` is anything with Kivy's schedule_interval signature whose events
    have cancel().
    """

    def __init__(self, view, backend, clock, interval: float = app_config.PROGRESS_INTERVAL):
        self.view = view
        self.backend = backend
        self._clock = clock
        self._interval = interval

        self.audio_session: PlaybackSession | None = None
        self.video_session: PlaybackSession | None = None

        self._progress_ev = None
        self._user_seeking = False
        self._seek_max = 0
        self._closed = False

    # ==================== selection ====================

    def select_file(self, kind: MediaKind):
        mime = MIME_FOR_KIND[kind]
        vlog(f"[CTRL] pick {mime}")
        self.backend.pick_file(mime, partial(self.on_file_chosen, kind))

    def on_file_chosen(self, requested: MediaKind, source):
        if source is None:
            vlog("[CTRL] chooser dismissed")
            return None
        if self._closed:
            log("[CTRL] file chosen after close, ignored")
            return None

        # whatever is playing keeps playing when the new file is rejected
        try:
            kind = classify_media(self.backend.inspect(source))
        except MediaError as e:
            log(f"[CTRL] cannot classify {source}: {e}")
            self.view.show_error(f"Cannot play this file: {e}")
            return Selection(source, None, e)

        if kind is not requested:
            log(f"[CTRL] asked for {requested.value}, got {kind.value}: {source}")
        try:
            if kind is MediaKind.VIDEO:
                self.play_video(source)
            else:
                self.play_audio(source)
        except MediaError as e:
            # both sessions were already released or reset by play_*
            log(f"[CTRL] cannot play {source}: {e}")
            self._stop_progress()
            self.view.apply_layout(ControlsLayout.NEUTRAL)
            self.view.show_error(f"Cannot play this file: {e}")
            return Selection(source, None, e)

        return Selection(source, kind, None)

    # ==================== playback ====================

    def play_audio(self, source):
        self._stop_progress()
        self._release_audio()
        self._release_video()

        self.view.apply_layout(ControlsLayout.AUDIO)
        self.view.set_playing(True)

        handle = self.backend.open_audio(source)
        session = PlaybackSession(source, MediaKind.AUDIO, handle)
        self.audio_session = session
        session.start()

        duration = session.duration_ms
        self._seek_max = duration
        self.view.set_seek_range(duration)
        self.view.set_total_text(format_time(duration))
        self.view.set_seek_position(0)
        self.view.set_elapsed_text(format_time(0))
        log(f"[CTRL] audio {source} ({format_time(duration)})")

        self._start_progress()

    def play_video(self, source):
        self._stop_progress()
        self.view.apply_layout(ControlsLayout.VIDEO)

        if self.audio_session is not None:
            self.audio_session.reset()
        self._release_video()

        handle = self.backend.open_video(source)
        session = PlaybackSession(source, MediaKind.VIDEO, handle)
        self.video_session = session
        session.start()
        log(f"[CTRL] video {source}")

    def toggle_pause_resume(self, *a):
        session = self.audio_session
        if session is None or not session.is_live:
            return
        if session.is_playing:
            session.pause()
            self.view.set_playing(False)
        else:
            session.resume()
            self.view.set_playing(True)

    def stop(self, *a):
        session = self.audio_session
        if session is None:
            return
        self._stop_progress()
        self.view.apply_layout(ControlsLayout.NEUTRAL)
        session.reset()
        self.view.set_seek_position(0)
        self.view.set_elapsed_text(format_time(0))
        vlog("[CTRL] audio stopped")

    # ==================== seek bar ====================

    def begin_user_seek(self):
        self._user_seeking = True

    def end_user_seek(self):
        self._user_seeking = False

    @property
    def user_seeking(self) -> bool:
        return self._user_seeking

    def seek(self, position_ms, from_user: bool):
        session = self.audio_session
        if from_user and session is not None and session.is_live:
            session.seek_to(position_ms)
        # icon only, the player keeps its own state at the end of the track
        if self._seek_max > 0 and position_ms == self._seek_max:
            self.view.set_playing(False)

    # ==================== progress ====================

    def _start_progress(self):
        self._stop_progress()
        self._progress_ev = self._clock.schedule_interval(self.refresh_progress, self._interval)

    def _stop_progress(self):
        if self._progress_ev is not None:
            self._progress_ev.cancel()
            self._progress_ev = None

    @property
    def progress_active(self) -> bool:
        return self._progress_ev is not None

    def refresh_progress(self, dt=None):
        session = self.audio_session
        if session is None or not session.is_live or self._user_seeking:
            return
        pos = session.position_ms
        self.view.set_seek_position(pos)
        self.view.set_elapsed_text(format_time(pos))

    # ==================== cleanup ====================

    def _release_audio(self):
        if self.audio_session is not None:
            self.audio_session.release()
            self.audio_session = None

    def _release_video(self):
        if self.video_session is not None:
            self.video_session.release()
            self.video_session = None

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._stop_progress()
        self._release_audio()
        self._release_video()
        log("[CTRL] closed")

    @property
    def state(self) -> PlaybackState:
        if self.audio_session is None:
            return PlaybackState.NEUTRAL
        return self.audio_session.state
