# media_android.py
# -*- coding: utf-8 -*-

from jnius import autoclass, cast, JavaException
from android.runnable import run_on_ui_thread
from android import activity as _py_activity

from kivy.clock import Clock

import app_config
import diag
from diag import log, vlog
from media_backend import AudioHandle, VideoHandle, MediaBackend
from playback import MediaTracks, MediaInspectionError, PlaybackError

# ===================== Android / Java classes =====================

# Core
PythonActivity      = autoclass('org.kivy.android.PythonActivity')
Build_VERSION       = autoclass('android.os.Build$VERSION')
PackageManager      = autoclass('android.content.pm.PackageManager')
Activity            = autoclass('android.app.Activity')

# Media
MediaPlayer              = autoclass('android.media.MediaPlayer')
MediaMetadataRetriever   = autoclass('android.media.MediaMetadataRetriever')
AudioAttributes          = autoclass('android.media.AudioAttributes')
AudioAttributesBuilder   = autoclass('android.media.AudioAttributes$Builder')

# URIs / Intents
Uri                 = autoclass('android.net.Uri')
Intent              = autoclass('android.content.Intent')

# Views / layout
VideoView           = autoclass('android.widget.VideoView')
MediaController     = autoclass('android.widget.MediaController')
FrameLayoutLayoutParams = autoclass('android.widget.FrameLayout$LayoutParams')
Gravity             = autoclass('android.view.Gravity')
View                = autoclass('android.view.View')
R_id                = autoclass('android.R$id')

activity = PythonActivity.mActivity

try:
    _ext = activity.getExternalFilesDir(None)
    diag.configure((_ext.getAbsolutePath() if _ext else activity.getFilesDir().getAbsolutePath())
                   + "/" + app_config.DIAG_FILENAME)
except Exception:
    diag.configure(None)


def _context():
    return cast('android.content.Context', PythonActivity.mActivity)

# ===================== AudioAttributes for "music" =====================

_audio_attrs = None


def _ensure_audio_attrs():
    """USAGE_MEDIA + CONTENT_TYPE_MUSIC for the audio player."""
    global _audio_attrs
    if _audio_attrs is None:
        _audio_attrs = (AudioAttributesBuilder()
                        .setUsage(AudioAttributes.USAGE_MEDIA)
                        .setContentType(AudioAttributes.CONTENT_TYPE_MUSIC)
                        .build())
    return _audio_attrs

# ===================== Runtime permissions =====================

_perm_once_guard = {"asked_media": False}


@run_on_ui_thread
def request_runtime_permissions():
    if _perm_once_guard["asked_media"]:
        return
    act = PythonActivity.mActivity
    if Build_VERSION.SDK_INT >= 33:
        perms = ["android.permission.READ_MEDIA_AUDIO", "android.permission.READ_MEDIA_VIDEO"]
    else:
        perms = ["android.permission.READ_EXTERNAL_STORAGE"]

    to_request = [p for p in perms if act.checkSelfPermission(p) != PackageManager.PERMISSION_GRANTED]
    if not to_request:
        vlog("[PERMS] media already granted")
        return
    _perm_once_guard["asked_media"] = True
    try:
        log(f"[PERMS] requesting {to_request}")
        act.requestPermissions(to_request, app_config.PERMISSION_REQUEST_CODE)
    except Exception as e:
        log(f"[PERMS] request failed: {e}")

# ===================== Media inspection =====================


def inspect_tracks(uri_str) -> MediaTracks:
    retriever = MediaMetadataRetriever()
    try:
        retriever.setDataSource(_context(), Uri.parse(uri_str))
        has_video = retriever.extractMetadata(MediaMetadataRetriever.METADATA_KEY_HAS_VIDEO)
        has_audio = retriever.extractMetadata(MediaMetadataRetriever.METADATA_KEY_HAS_AUDIO)
    except JavaException as e:
        raise MediaInspectionError(str(e)) from e
    finally:
        try:
            retriever.release()
        except Exception:
            pass
    vlog(f"[INSPECT] video={has_video} audio={has_audio} {uri_str}")
    return MediaTracks.from_metadata(has_video, has_audio)

# ===================== File chooser =====================


class FileChooser:
    """ACTION_GET_CONTENT with one pending callback at a time."""

    def __init__(self, request_code: int = app_config.PICK_REQUEST_CODE):
        self.request_code = request_code
        self._callback = None
        self._bound = False

    def open(self, mime: str, callback):
        self._callback = callback
        if not self._bound:
            _py_activity.bind(on_activity_result=self._on_activity_result)
            self._bound = True

        intent = Intent(Intent.ACTION_GET_CONTENT)
        intent.setType(mime)
        intent.addCategory(Intent.CATEGORY_OPENABLE)
        try:
            PythonActivity.mActivity.startActivityForResult(intent, self.request_code)
            vlog(f"[PICK] chooser {mime}")
        except JavaException as e:
            log(f"[PICK] start chooser err: {e}")
            self._deliver(None)

    def _on_activity_result(self, request_code, result_code, intent):
        if request_code != self.request_code:
            return
        uri = None
        if result_code == Activity.RESULT_OK and intent is not None:
            data = intent.getData()
            if data is not None:
                uri = data.toString()
        log(f"[PICK] result={result_code} uri={uri}")
        self._deliver(uri)

    def _deliver(self, uri):
        cb, self._callback = self._callback, None
        if cb is not None:
            Clock.schedule_once(lambda dt: cb(uri), 0)

    def unbind(self):
        if self._bound:
            try:
                _py_activity.unbind(on_activity_result=self._on_activity_result)
            except Exception:
                pass
            self._bound = False

# ===================== Audio (MediaPlayer) =====================


class AndroidAudioPlayer(AudioHandle):

    def __init__(self, uri_str):
        self.uri = uri_str
        self.player = MediaPlayer()
        try:
            try:
                self.player.setAudioAttributes(_ensure_audio_attrs())
            except JavaException as e:
                log(f"[AUDIO] setAudioAttributes err: {e}")
            self.player.setDataSource(_context(), Uri.parse(uri_str))
            self.player.prepare()
        except JavaException as e:
            self._drop()
            raise PlaybackError(str(e)) from e
        log(f"[AUDIO] prepared {uri_str}")

    def _drop(self):
        try:
            self.player.release()
        except Exception:
            pass
        self.player = None

    def start(self):
        if self.player:
            self.player.start()
            vlog("[AUDIO] start()")

    def pause(self):
        if self.player and self.player.isPlaying():
            self.player.pause()
            vlog("[AUDIO] pause()")

    def reset(self):
        if self.player:
            self.player.reset()
            vlog("[AUDIO] reset()")

    def release(self):
        if self.player:
            self.player.release()
            self.player = None
            log("[AUDIO] released")

    def is_playing(self) -> bool:
        return bool(self.player and self.player.isPlaying())

    def position_ms(self) -> int:
        return int(self.player.getCurrentPosition()) if self.player else 0

    def duration_ms(self) -> int:
        return int(self.player.getDuration()) if self.player else 0

    def seek_to(self, ms: int):
        if self.player:
            self.player.seekTo(int(ms))
            vlog(f"[AUDIO] seekTo {ms}ms")

# ===================== Video (VideoView overlay) =====================


class AndroidVideoPlayer:
    """One VideoView with a MediaController, layered over the Kivy surface."""

    def __init__(self):
        self.video_view = None
        self.controller = None
        self.pending_bounds = None

    def _bring_to_front(self):
        parent = self.video_view.getParent()
        if parent is None:
            return
        try:
            parent.bringChildToFront(self.video_view)
            parent.requestLayout()
            parent.invalidate()
        except Exception as e:
            vlog(f"[VIDEO] relayout err: {e}")

    def _create_view(self):
        if self.video_view is not None:
            self._bring_to_front()
            return True

        act = PythonActivity.mActivity
        root = None
        try:
            root = cast("android.view.ViewGroup", act.findViewById(R_id.content))
        except Exception as e:
            log(f"[VIDEO] content root err: {e}")
        if root is None:
            try:
                root = cast("android.view.ViewGroup", act.getWindow().getDecorView())
            except Exception as e:
                log(f"[VIDEO] decor root err: {e}")
                return False

        vv = VideoView(act)
        metrics = act.getResources().getDisplayMetrics()
        params = FrameLayoutLayoutParams(FrameLayoutLayoutParams.MATCH_PARENT,
                                         int(metrics.widthPixels * 9 / 16))
        params.gravity = Gravity.TOP | Gravity.CENTER_HORIZONTAL
        vv.setLayoutParams(params)
        vv.setZOrderMediaOverlay(True)
        vv.setVisibility(View.INVISIBLE)

        self.controller = MediaController(act)
        self.controller.setAnchorView(vv)
        vv.setMediaController(self.controller)

        root.addView(vv)
        self.video_view = vv
        self._bring_to_front()

        if self.pending_bounds:
            pending, self.pending_bounds = self.pending_bounds, None
            self._apply_bounds(*pending)
        log("[VIDEO] VideoView created")
        return True

    @run_on_ui_thread
    def play(self, uri_str):
        if not self._create_view():
            log("[VIDEO] no view, cannot play")
            return
        try:
            vv = self.video_view
            vv.setVisibility(View.VISIBLE)
            vv.setVideoURI(Uri.parse(uri_str))
            vv.requestFocus()
            vv.start()
            log(f"[VIDEO] start {uri_str}")
        except JavaException as e:
            log(f"[VIDEO] play err: {e}")
            self.video_view.setVisibility(View.INVISIBLE)

    @run_on_ui_thread
    def stop(self):
        if self.video_view is None:
            return
        try:
            if self.controller is not None:
                self.controller.hide()
            self.video_view.stopPlayback()
        except JavaException as e:
            log(f"[VIDEO] stop err: {e}")
        self.video_view.setVisibility(View.INVISIBLE)
        vlog("[VIDEO] stopped")

    @run_on_ui_thread
    def set_bounds(self, left: int, top: int, width: int, height: int):
        if self.video_view is None:
            self.pending_bounds = (left, top, width, height)
            vlog(f"[VIDEO] set_bounds stored pending: {self.pending_bounds}")
            return
        self._apply_bounds(left, top, width, height)

    def _apply_bounds(self, left, top, width, height):
        if width <= 0 or height <= 0:
            vlog(f"[VIDEO] set_bounds skip, non positive size: {width} {height}")
            return
        params = FrameLayoutLayoutParams(int(width), int(height))
        params.leftMargin = int(left)
        params.topMargin = int(top)
        self.video_view.setLayoutParams(params)
        self._bring_to_front()
        vlog(f"[VIDEO] bounds left={left} top={top} w={width} h={height}")

    def screen_size_px(self):
        try:
            metrics = PythonActivity.mActivity.getResources().getDisplayMetrics()
            return int(metrics.widthPixels), int(metrics.heightPixels)
        except Exception:
            return 1080, 1920


class AndroidVideoSession(VideoHandle):

    def __init__(self, overlay: AndroidVideoPlayer, uri_str):
        self.overlay = overlay
        self.uri = uri_str

    def start(self):
        self.overlay.play(self.uri)

    def reset(self):
        self.overlay.stop()

    def release(self):
        self.overlay.stop()

# ===================== Backend =====================


class AndroidMediaBackend(MediaBackend):

    def __init__(self):
        self.chooser = FileChooser()
        self.video_overlay = AndroidVideoPlayer()

    def pick_file(self, mime, callback):
        self.chooser.open(mime, callback)

    def inspect(self, source):
        return inspect_tracks(source)

    def open_audio(self, source):
        return AndroidAudioPlayer(source)

    def open_video(self, source):
        return AndroidVideoSession(self.video_overlay, source)

    def shutdown(self):
        self.chooser.unbind()
        self.video_overlay.stop()
