# playback.py
from collections import namedtuple
from enum import Enum


class MediaKind(Enum):
    AUDIO = "audio"
    VIDEO = "video"


class PlaybackState(Enum):
    NEUTRAL = "neutral"
    PLAYING = "playing"
    PAUSED = "paused"


# ==================== errors ====================

class MediaError(Exception):
    pass


class MediaClassificationError(MediaError):
    """The file carries neither a video nor an audio track."""


class MediaInspectionError(MediaError):
    """Track metadata could not be read from the file."""


class PlaybackError(MediaError):
    """The native player could not be created or prepared."""


# ==================== classification ====================

class MediaTracks(namedtuple("MediaTracks", "has_video has_audio")):
    __slots__ = ()

    @classmethod
    def from_metadata(cls, video_flag, audio_flag):
        # MediaMetadataRetriever reports "yes" or null
        return cls(video_flag == "yes", audio_flag == "yes")


def classify_media(tracks: MediaTracks) -> MediaKind:
    if tracks.has_video:
        return MediaKind.VIDEO
    if tracks.has_audio:
        return MediaKind.AUDIO
    raise MediaClassificationError("no audio or video track found")


def format_time(ms) -> str:
    s = int(ms or 0) // 1000
    m, s = divmod(s, 60)
    return f"{m:02d}:{s:02d}"


# ==================== session ====================

class PlaybackSession:
    """One native player handle plus the state the screen cares about.

    Audio sessions move NEUTRAL -> PLAYING <-> PAUSED -> NEUTRAL. Video
    sessions only use PLAYING and NEUTRAL, the native transport overlay
    owns pause and seek.
    """

    def __init__(self, source, kind: MediaKind, handle):
        self.source = source
        self.kind = kind
        self.handle = handle
        self.state = PlaybackState.NEUTRAL
        self.released = False

    def __repr__(self):
        return f"<PlaybackSession {self.kind.value} {self.state.value} {self.source!r}>"

    @property
    def is_live(self) -> bool:
        return not self.released and self.state is not PlaybackState.NEUTRAL

    @property
    def is_playing(self) -> bool:
        if not self.is_live:
            return False
        return bool(self.handle.is_playing())

    @property
    def position_ms(self) -> int:
        if not self.is_live:
            return 0
        return int(self.handle.position_ms() or 0)

    @property
    def duration_ms(self) -> int:
        if not self.is_live:
            return 0
        return int(self.handle.duration_ms() or 0)

    def start(self):
        if self.released:
            return
        self.handle.start()
        self.state = PlaybackState.PLAYING

    def pause(self):
        if not self.is_live:
            return
        self.handle.pause()
        self.state = PlaybackState.PAUSED

    def resume(self):
        if not self.is_live:
            return
        self.handle.start()
        self.state = PlaybackState.PLAYING

    def seek_to(self, ms):
        if not self.is_live:
            return
        self.handle.seek_to(int(ms))

    def reset(self):
        if self.released:
            return
        self.handle.reset()
        self.state = PlaybackState.NEUTRAL

    def release(self):
        if self.released:
            return
        self.handle.release()
        self.released = True
        self.state = PlaybackState.NEUTRAL
