# media_backend.py
from abc import ABC, abstractmethod


class AudioHandle(ABC):
    """A prepared native audio player."""

    @abstractmethod
    def start(self): ...

    @abstractmethod
    def pause(self): ...

    @abstractmethod
    def reset(self): ...

    @abstractmethod
    def release(self): ...

    @abstractmethod
    def is_playing(self) -> bool: ...

    @abstractmethod
    def position_ms(self) -> int: ...

    @abstractmethod
    def duration_ms(self) -> int: ...

    @abstractmethod
    def seek_to(self, ms: int): ...


class VideoHandle(ABC):
    """A file bound to the video surface and its transport overlay."""

    @abstractmethod
    def start(self): ...

    @abstractmethod
    def reset(self): ...

    @abstractmethod
    def release(self): ...


class MediaBackend(ABC):
    """Platform services the player screen needs."""

    @abstractmethod
    def pick_file(self, mime: str, callback) -> None:
        """
        Opens the system chooser filtered by `mime`.

        Args:
            mime (str): "audio/*" or "video/*".
            callback: called with the chosen source, or None if the user backed out.
        """

    @abstractmethod
    def inspect(self, source):
        """
        Reads the track flags of `source`.

        Returns:
            MediaTracks: which tracks the file carries.

        Raises:
            MediaInspectionError: the metadata could not be read.
        """

    @abstractmethod
    def open_audio(self, source) -> AudioHandle:
        """Creates and prepares an audio player; raises PlaybackError on failure."""

    @abstractmethod
    def open_video(self, source) -> VideoHandle:
        """Binds `source` to the video surface; raises PlaybackError on failure."""
