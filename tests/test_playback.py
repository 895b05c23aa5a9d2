"""Classification, time formatting and the session state machine."""
from __future__ import annotations

import pytest

from playback import (
    MediaClassificationError, MediaKind, MediaTracks, PlaybackSession, PlaybackState,
    classify_media, format_time,
)
from conftest import FakeAudio


@pytest.mark.parametrize(
    "ms, expected",
    [(0, "00:00"), (999, "00:00"), (65000, "01:05"), (3599000, "59:59"), (3600000, "60:00")],
)
def test_format_time(ms, expected):
    assert format_time(ms) == expected


def test_format_time_treats_none_as_zero():
    assert format_time(None) == "00:00"


def test_audio_only_track_is_audio():
    assert classify_media(MediaTracks(has_video=False, has_audio=True)) is MediaKind.AUDIO


def test_video_track_wins_over_audio_track():
    assert classify_media(MediaTracks(has_video=True, has_audio=True)) is MediaKind.VIDEO
    assert classify_media(MediaTracks(has_video=True, has_audio=False)) is MediaKind.VIDEO


def test_no_tracks_fails_classification():
    with pytest.raises(MediaClassificationError):
        classify_media(MediaTracks(has_video=False, has_audio=False))


def test_tracks_from_retriever_flags():
    assert MediaTracks.from_metadata("yes", None) == (True, False)
    assert MediaTracks.from_metadata(None, "yes") == (False, True)
    assert MediaTracks.from_metadata("no", "") == (False, False)


def test_session_state_machine():
    handle = FakeAudio("content://song.mp3")
    session = PlaybackSession("content://song.mp3", MediaKind.AUDIO, handle)
    assert session.state is PlaybackState.NEUTRAL

    session.start()
    assert session.state is PlaybackState.PLAYING
    assert session.is_playing

    session.pause()
    assert session.state is PlaybackState.PAUSED
    assert not session.is_playing

    session.resume()
    assert session.state is PlaybackState.PLAYING

    session.reset()
    assert session.state is PlaybackState.NEUTRAL
    assert handle.calls == ["start", "pause", "start", "reset"]


def test_neutral_session_reports_zero_without_touching_handle():
    handle = FakeAudio("content://song.mp3")
    handle.position = 5000
    session = PlaybackSession("content://song.mp3", MediaKind.AUDIO, handle)

    assert session.position_ms == 0
    assert session.duration_ms == 0
    session.seek_to(1000)
    session.pause()
    assert handle.calls == []


def test_release_is_idempotent():
    handle = FakeAudio("content://song.mp3")
    session = PlaybackSession("content://song.mp3", MediaKind.AUDIO, handle)
    session.start()
    session.release()
    session.release()
    session.start()
    session.reset()

    assert session.released
    assert handle.calls == ["start", "release"]
